"""
debug.py

Structural inventory of every message in a conversation graph.

Used when an extraction finds no queries: it shows which roles, content
types and metadata keys the record actually contains, so a schema change can
be spotted by eye. Nothing here affects extraction results.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .config import DEFAULT_CONFIG, ExtractorConfig
from .graph import GraphIndex
from .mapping import (
    author_name_of,
    content_of,
    message_of,
    metadata_of,
    parts_of,
    role_of,
    safe_str,
)


def _part_type(part: Any) -> str:
    if isinstance(part, str):
        return "string"
    if isinstance(part, dict):
        return safe_str(part.get("content_type") or "object")
    return type(part).__name__


def summarize_message(node_id: str, msg: Dict[str, Any], cfg: ExtractorConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    meta = metadata_of(msg)
    content = content_of(msg)
    return {
        "id": safe_str(msg.get("id") or node_id),
        "role": role_of(msg),
        "authorName": author_name_of(msg),
        "contentType": safe_str(content.get("content_type") or "unknown"),
        "recipient": safe_str(msg.get("recipient") or ""),
        "metadataKeys": sorted(str(k) for k in meta.keys()),
        "hasSearchModelQueries": cfg.hidden_query_field in meta,
        "hasSearchQueries": cfg.visible_query_field in meta,
        "hasContentReferences": "content_references" in meta,
        "hasSearchResultGroups": "search_result_groups" in meta,
        "hasCiteMetadata": "citation_metadata" in meta,
        "partTypes": [_part_type(p) for p in parts_of(content)],
    }


def summarize_graph(graph: GraphIndex, cfg: ExtractorConfig = DEFAULT_CONFIG) -> Dict[str, Any]:
    """
    Returns {"totalMessages": n, "messages": [...]} in mapping order.
    Structural nodes (no message) are not listed.
    """
    messages: List[Dict[str, Any]] = []
    for node_id, node in graph.items():
        msg = message_of(node)
        if msg is None:
            continue
        messages.append(summarize_message(node_id, msg, cfg))

    return {"totalMessages": len(messages), "messages": messages}


def search_related_messages(summary: Dict[str, Any]) -> List[Dict[str, Any]]:
    # Messages worth a closer look: any search field, tool output, or a named author.
    out = []
    for m in summary.get("messages") or []:
        if (
            m.get("hasSearchModelQueries")
            or m.get("hasSearchQueries")
            or m.get("hasContentReferences")
            or m.get("hasSearchResultGroups")
            or m.get("hasCiteMetadata")
            or m.get("role") == "tool"
            or m.get("authorName")
        ):
            out.append(m)
    return out


def _summary_line(m: Dict[str, Any]) -> str:
    author = f"/{m['authorName']}" if m.get("authorName") else ""
    keys = ",".join(m.get("metadataKeys") or [])
    return f"  {m.get('role')}{author} [{m.get('contentType')}] meta:[{keys}]"


def format_debug_text(summary: Dict[str, Any]) -> str:
    """
    Human-readable version of a summary. Lists search-related messages when
    there are any, otherwise every message.
    """
    related = search_related_messages(summary)
    if related:
        lines = ["Messages with search-related fields:"]
        lines.extend(_summary_line(m) for m in related)
        return "\n".join(lines)

    lines = [f"{summary.get('totalMessages', 0)} messages found, none with search metadata."]
    lines.extend(_summary_line(m) for m in summary.get("messages") or [])
    return "\n".join(lines)
