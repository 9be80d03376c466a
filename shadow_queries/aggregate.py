"""
aggregate.py

Stage: CONVERSATION GRAPH -> PROMPT GROUPS

One pass over every node:
- collect hidden / visible query strings and citations from the message
- skip nodes that produced nothing
- resolve the triggering user prompt and add the raw findings to that
  prompt's bucket

Then, per bucket (in creation order):
- hidden queries first, then visible ones, dropping case-insensitive repeats,
  so a text seen anywhere as hidden is reported hidden
- citations deduplicated by url/title and numbered 1..N
- empty buckets dropped

Per-node problems never stop the scan; the node is logged and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .citations import dedupe_citations, extract_citations
from .config import DEFAULT_CONFIG, ExtractorConfig
from .graph import GraphIndex
from .mapping import content_of, message_of, metadata_of, object_parts, safe_str
from .model import Citation, PromptGroup, ShadowQuery
from .normalize import field_queries, parsed_raw_result
from .prompts import resolve_prompt

logger = logging.getLogger(__name__)


@dataclass
class NodeFindings:
    """Raw, not yet deduplicated findings of a single message."""

    hidden: List[str] = field(default_factory=list)
    visible: List[str] = field(default_factory=list)
    citations: List[Citation] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.hidden and not self.visible and not self.citations


@dataclass
class _Bucket:
    model: str
    hidden: List[str] = field(default_factory=list)
    visible: List[str] = field(default_factory=list)
    citations: List[Citation] = field(default_factory=list)

    def add(self, found: NodeFindings) -> None:
        self.hidden.extend(found.hidden)
        self.visible.extend(found.visible)
        self.citations.extend(found.citations)


def _queries_pair(container: Dict[str, Any], cfg: ExtractorConfig) -> Tuple[List[str], List[str]]:
    hidden = field_queries(container, cfg.hidden_query_field, cfg.query_text_keys)
    visible = field_queries(container, cfg.visible_query_field, cfg.query_text_keys)
    return hidden, visible


def scan_message(msg: Dict[str, Any], cfg: ExtractorConfig = DEFAULT_CONFIG) -> NodeFindings:
    """
    Collects query strings and citations from one raw message.

    Sources, in order:
      a. metadata hidden / visible query fields
      b. metadata fallback field (hidden), only if (a) found nothing
      c. structured content parts carrying either query field
      d. the content's raw result string, if it parses to a JSON object
      e. citations from every known location
    """
    meta = metadata_of(msg)
    content = content_of(msg)
    found = NodeFindings()

    hidden, visible = _queries_pair(meta, cfg)
    found.hidden.extend(hidden)
    found.visible.extend(visible)

    if not hidden and not visible:
        found.hidden.extend(field_queries(meta, cfg.fallback_query_field, cfg.query_text_keys))

    for part in object_parts(content):
        hidden, visible = _queries_pair(part, cfg)
        found.hidden.extend(hidden)
        found.visible.extend(visible)

    parsed = parsed_raw_result(content, cfg.raw_result_fields)
    if parsed is not None:
        hidden, visible = _queries_pair(parsed, cfg)
        found.hidden.extend(hidden)
        found.visible.extend(visible)

    found.citations.extend(extract_citations(msg, cfg.raw_result_fields))
    return found


def model_of(msg: Dict[str, Any], document_model: Any, cfg: ExtractorConfig = DEFAULT_CONFIG) -> str:
    meta = metadata_of(msg)
    for key in cfg.model_slug_fields:
        slug = safe_str(meta.get(key)).strip()
        if slug:
            return slug
    return safe_str(document_model).strip() or cfg.default_model


def dedupe_queries(hidden: List[str], visible: List[str]) -> List[ShadowQuery]:
    """
    Merges hidden-sourced and visible-sourced strings into ShadowQuery entries.

    All hidden strings are emitted before any visible one, so a text that was
    ever hidden-sourced keeps hidden=True.
    """
    seen = set()
    out: List[ShadowQuery] = []

    for is_hidden, texts in ((True, hidden), (False, visible)):
        for text in texts:
            k = text.lower()
            if k in seen:
                continue
            seen.add(k)
            out.append(ShadowQuery(text=text, hidden=is_hidden))

    return out


def number_citations(citations: List[Citation]) -> List[Citation]:
    # Dedup across messages, then assign contiguous 1-based ref_index.
    kept = dedupe_citations(citations)
    return [replace(c, ref_index=i) for i, c in enumerate(kept, start=1)]


def aggregate(
    graph: GraphIndex,
    document_model: Optional[str] = None,
    cfg: ExtractorConfig = DEFAULT_CONFIG,
) -> List[PromptGroup]:
    """
    Scans the whole graph and returns non-empty prompt groups in the order
    their first contributing node was encountered.
    """
    buckets: Dict[str, _Bucket] = {}

    for node_id, node in graph.items():
        msg = message_of(node)
        if msg is None:
            continue

        try:
            found = scan_message(msg, cfg)
            if found.is_empty():
                continue

            prompt = resolve_prompt(graph, node_id, cfg.unknown_prompt)
            bucket = buckets.get(prompt)
            if bucket is None:
                bucket = _Bucket(model=model_of(msg, document_model, cfg))
                buckets[prompt] = bucket
            bucket.add(found)
        except Exception:
            logger.warning("Skipping malformed node %s", node_id, exc_info=True)
            continue

        logger.debug(
            "Node %s: %d hidden, %d visible, %d citations",
            node_id,
            len(found.hidden),
            len(found.visible),
            len(found.citations),
        )

    groups: List[PromptGroup] = []
    for prompt, bucket in buckets.items():
        group = PromptGroup(
            user_prompt=prompt,
            model=bucket.model,
            shadow_queries=dedupe_queries(bucket.hidden, bucket.visible),
            citations=number_citations(bucket.citations),
        )
        if group.is_empty():
            continue
        groups.append(group)

    return groups
