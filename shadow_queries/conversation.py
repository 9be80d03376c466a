from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .aggregate import aggregate
from .config import DEFAULT_CONFIG, ExtractorConfig
from .debug import summarize_graph
from .errors import MESSAGES, ErrorKind, ExtractionFailed, ShadowQueryError
from .graph import GraphIndex
from .mapping import safe_str
from .model import Report

logger = logging.getLogger(__name__)

_CONVERSATION_PATH = re.compile(r"/(?:c|g)/([a-f0-9-]+)")


def conversation_id_from_url(url: Optional[str]) -> Optional[str]:
    """
    Pulls the conversation id out of a ChatGPT page URL or path
    ("/c/<id>" or "/g/<id>"). Returns None when there is none.
    """
    if not url:
        return None
    match = _CONVERSATION_PATH.search(url)
    return match.group(1) if match else None


def conversation_id_of(raw: Any) -> str:
    if not isinstance(raw, dict):
        return ""
    return safe_str(raw.get("conversation_id") or raw.get("id") or "")


def _now_ms() -> int:
    return int(time.time() * 1000)


def extract_report(
    raw: Any,
    conversation_id: Optional[str] = None,
    config: ExtractorConfig = DEFAULT_CONFIG,
    now_ms: Optional[int] = None,
    include_debug: bool = True,
) -> Report:
    """
    Extract shadow queries and citations from one raw conversation record.

    - raw must be an object with a "mapping" object (node id -> node);
      anything else raises ExtractionFailed
    - an empty mapping is valid and yields an empty report
    - when nothing is found and include_debug is set, the report carries a
      structural summary of every message
    """
    if not isinstance(raw, dict):
        raise ExtractionFailed(f"conversation record is {type(raw).__name__}, expected an object")

    mapping = raw.get("mapping")
    if mapping is None:
        raise ExtractionFailed("conversation record has no mapping")
    if not isinstance(mapping, dict):
        raise ExtractionFailed(f"mapping is {type(mapping).__name__}, expected an object")

    graph = GraphIndex(mapping)
    groups = aggregate(graph, raw.get("model"), config)

    report = Report(
        conversation_id=conversation_id if conversation_id is not None else conversation_id_of(raw),
        results=groups,
        extracted_at=now_ms if now_ms is not None else _now_ms(),
    )

    if not groups and include_debug:
        report.debug = summarize_graph(graph, config)

    logger.info(
        "Conversation %s: %d prompt group(s), %d queries, %d citations",
        report.conversation_id or "?",
        len(report.results),
        report.total_shadow_queries,
        report.total_citations,
    )
    return report


@dataclass
class Outcome:
    """
    Envelope handed to the presentation side.

    success=True with error=NO_SEARCH_QUERIES means the extraction worked
    but the conversation had no web searches.
    """

    success: bool
    error: Optional[ErrorKind] = None
    message: str = ""
    report: Optional[Report] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"success": self.success}
        if self.error is not None:
            out["error"] = self.error.value
        if self.message:
            out["message"] = self.message
        if self.report is not None:
            out["data"] = self.report.to_dict()
        return out


def outcome_from_error(error: ShadowQueryError) -> Outcome:
    """
    Maps a fetch-side or extraction error to a failed Outcome. The kind is
    kept as-is; EXTRACTION_FAILED messages include the cause.
    """
    message = MESSAGES.get(error.kind, error.kind.value)
    if error.kind is ErrorKind.EXTRACTION_FAILED and error.cause:
        message = f"{message}: {error.cause}"
    return Outcome(success=False, error=error.kind, message=message)


def run_extraction(
    raw: Any,
    conversation_id: Optional[str] = None,
    config: ExtractorConfig = DEFAULT_CONFIG,
    now_ms: Optional[int] = None,
) -> Outcome:
    """
    extract_report() wrapped into an Outcome.

    - no conversation id (argument or record) -> NO_CONVERSATION
    - ExtractionFailed -> EXTRACTION_FAILED
    - empty results -> success with NO_SEARCH_QUERIES guidance
    """
    cid = conversation_id if conversation_id else conversation_id_of(raw)
    if not cid:
        return Outcome(
            success=False,
            error=ErrorKind.NO_CONVERSATION,
            message=MESSAGES[ErrorKind.NO_CONVERSATION],
        )

    try:
        report = extract_report(raw, cid, config, now_ms)
    except ExtractionFailed as exc:
        logger.error("Extraction failed for %s: %s", cid, exc.cause)
        return outcome_from_error(exc)

    if not report.results:
        return Outcome(
            success=True,
            error=ErrorKind.NO_SEARCH_QUERIES,
            message=MESSAGES[ErrorKind.NO_SEARCH_QUERIES],
            report=report,
        )

    return Outcome(success=True, report=report)
