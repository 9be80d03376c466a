"""
citations.py

Stage: ONE RAW MESSAGE -> LIST OF CITATIONS (locally deduplicated)

Citations appear in several places depending on the product revision.
They are scanned in this order and all merged:

  1. metadata.content_references
  2. metadata.citation_metadata.citations / .metadata_list
  3. metadata.search_result_groups[*].search_results, else .entries
  4. structured content parts (cite parts, or parts with url + title)
  5. the content's raw result string, when it parses to an object holding
     search_result_groups

ref_index is NOT assigned here; the aggregator numbers citations after the
cross-message merge.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from .config import DEFAULT_CONFIG
from .mapping import content_of, metadata_of, object_parts, safe_str
from .model import Citation
from .normalize import parsed_raw_result


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _clean(value: Any) -> str:
    if isinstance(value, (dict, list, tuple)):
        return ""
    return safe_str(value).strip()


def make_citation(entry: Any, default_type: str, use_entry_type: bool = False) -> Optional[Citation]:
    """
    Builds a Citation from a raw {title, url, type} entry.

    Returns None when the entry is not an object or has neither url nor title.
    A missing title falls back to the url.
    """
    if not isinstance(entry, dict):
        return None

    url = _clean(entry.get("url"))
    title = _clean(entry.get("title")) or url
    if not title:
        return None

    ctype = default_type
    if use_entry_type:
        ctype = _clean(entry.get("type")) or default_type

    return Citation(title=title, url=url, type=ctype)


def dedupe_citations(citations: Iterable[Citation]) -> List[Citation]:
    # First occurrence per key (url, else title) wins.
    seen = set()
    out: List[Citation] = []
    for c in citations:
        if c.key in seen:
            continue
        seen.add(c.key)
        out.append(c)
    return out


def _from_content_references(meta: Dict[str, Any]) -> Iterator[Optional[Citation]]:
    for ref in _as_list(meta.get("content_references")):
        yield make_citation(ref, "Citation", use_entry_type=True)


def _from_citation_metadata(meta: Dict[str, Any]) -> Iterator[Optional[Citation]]:
    cite_meta = meta.get("citation_metadata")
    if not isinstance(cite_meta, dict):
        return

    for entry in _as_list(cite_meta.get("citations")):
        # Newer records nest the source under "metadata" next to start/end offsets.
        if isinstance(entry, dict) and isinstance(entry.get("metadata"), dict):
            entry = entry["metadata"]
        yield make_citation(entry, "Citation")

    for entry in _as_list(cite_meta.get("metadata_list")):
        yield make_citation(entry, "Citation")


def _from_result_groups(groups: Any) -> Iterator[Optional[Citation]]:
    for group in _as_list(groups):
        if not isinstance(group, dict):
            continue
        # search_results first; entries when that is missing or empty
        entries = _as_list(group.get("search_results")) or _as_list(group.get("entries"))
        for entry in entries:
            yield make_citation(entry, "Search Result")


def _from_parts(content: Dict[str, Any]) -> Iterator[Optional[Citation]]:
    for part in object_parts(content):
        if part.get("content_type") == "cite":
            yield make_citation(part, "Footnote")
        elif _clean(part.get("url")) and _clean(part.get("title")):
            yield make_citation(part, "Source")


def _from_raw_result(content: Dict[str, Any], fields: Sequence[str]) -> Iterator[Optional[Citation]]:
    parsed = parsed_raw_result(content, fields)
    if parsed is None:
        return
    yield from _from_result_groups(parsed.get("search_result_groups"))


def extract_citations(
    msg: Dict[str, Any],
    raw_result_fields: Sequence[str] = DEFAULT_CONFIG.raw_result_fields,
) -> List[Citation]:
    """
    Collects every citation candidate of one message, in source order,
    deduplicated within the message.
    """
    meta = metadata_of(msg)
    content = content_of(msg)

    found: List[Citation] = []
    sources = (
        _from_content_references(meta),
        _from_citation_metadata(meta),
        _from_result_groups(meta.get("search_result_groups")),
        _from_parts(content),
        _from_raw_result(content, raw_result_fields),
    )
    for source in sources:
        found.extend(c for c in source if c is not None)

    return dedupe_citations(found)
