"""
model.py

This file defines the *output* data shapes of the extractor.

Think of this as:
- "What is a shadow query?"
- "What is a citation?"
- "What does a finished report look like?"

It does NOT read the raw conversation mapping.
It does NOT decide which fields hold queries or citations.

to_dict() methods produce the camelCase JSON shape consumed by the
presentation/caching side.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class ShadowQuery:
    """
    One search query the assistant issued.

    text:
      - non-empty, already trimmed
    hidden:
      - True if it came from an internal-only query field
      - False if it only ever came from a user-visible query field
    """

    text: str
    hidden: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "hidden": self.hidden}


@dataclass(frozen=True)
class Citation:
    """
    One source the answer relied on.

    url may be "" when only a title is known.
    ref_index stays None until the final per-prompt dedup assigns 1..N.
    """

    title: str
    url: str = ""
    type: str = "Citation"
    ref_index: Optional[int] = None

    @property
    def key(self) -> str:
        # Dedup key: url when present, otherwise the title.
        return self.url or self.title

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "url": self.url,
            "type": self.type,
            "refIndex": self.ref_index,
        }


@dataclass
class PromptGroup:
    """
    All search activity attributable to one resolved user prompt.
    """

    user_prompt: str
    model: str
    shadow_queries: List[ShadowQuery] = field(default_factory=list)
    citations: List[Citation] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.shadow_queries and not self.citations

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userPrompt": self.user_prompt,
            "shadowQueries": [q.to_dict() for q in self.shadow_queries],
            "citations": [c.to_dict() for c in self.citations],
            "model": self.model,
        }


@dataclass
class Report:
    """
    Final result of one extraction call.

    - conversation_id: opaque id of the conversation (may be "")
    - results: prompt groups in the order their first node was scanned
    - extracted_at: epoch milliseconds
    - debug: structural summary, attached only when results is empty
    """

    conversation_id: str
    results: List[PromptGroup] = field(default_factory=list)
    extracted_at: int = 0
    debug: Optional[Dict[str, Any]] = None

    @property
    def total_shadow_queries(self) -> int:
        return sum(len(g.shadow_queries) for g in self.results)

    @property
    def total_citations(self) -> int:
        return sum(len(g.citations) for g in self.results)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "conversationId": self.conversation_id,
            "results": [g.to_dict() for g in self.results],
            "totalShadowQueries": self.total_shadow_queries,
            "totalCitations": self.total_citations,
            "extractedAt": self.extracted_at,
        }
        if self.debug is not None:
            out["debug"] = self.debug
        return out
