"""
mapping.py

Small accessors over raw conversation mapping nodes.

A raw node looks like:
  {"parent": "<id>", "children": [...], "message": {...} or None}

and a raw message like:
  {"id": "...", "author": {"role": "assistant", "name": None},
   "recipient": "all", "metadata": {...},
   "content": {"content_type": "text", "parts": ["hello"]}}

Every accessor tolerates missing or wrongly-typed fields and returns an empty
value instead of raising.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


def safe_str(value: Any) -> str:
    # Converts any value to a string for safe display.
    return "" if value is None else str(value)


def message_of(node: Any) -> Optional[Dict[str, Any]]:
    """Returns the node's message dict, or None for structural nodes."""
    if not isinstance(node, dict):
        return None
    msg = node.get("message")
    return msg if isinstance(msg, dict) else None


def parent_of(node: Any) -> Optional[str]:
    if not isinstance(node, dict):
        return None
    parent = node.get("parent")
    return parent if isinstance(parent, str) and parent else None


def author_of(msg: Dict[str, Any]) -> Dict[str, Any]:
    author = msg.get("author")
    return author if isinstance(author, dict) else {}


def role_of(msg: Dict[str, Any]) -> str:
    return safe_str(author_of(msg).get("role") or "unknown")


def author_name_of(msg: Dict[str, Any]) -> str:
    return safe_str(author_of(msg).get("name") or "")


def is_user_message(msg: Optional[Dict[str, Any]]) -> bool:
    """Returns True if the message is user-authored."""
    return msg is not None and author_of(msg).get("role") == "user"


def metadata_of(msg: Dict[str, Any]) -> Dict[str, Any]:
    meta = msg.get("metadata")
    return meta if isinstance(meta, dict) else {}


def content_of(msg: Dict[str, Any]) -> Dict[str, Any]:
    content = msg.get("content")
    return content if isinstance(content, dict) else {}


def parts_of(content: Dict[str, Any]) -> List[Any]:
    parts = content.get("parts")
    return list(parts) if isinstance(parts, (list, tuple)) else []


def object_parts(content: Dict[str, Any]) -> List[Dict[str, Any]]:
    # Structured (non-string) content parts only.
    return [p for p in parts_of(content) if isinstance(p, dict)]


def string_parts_text(content: Dict[str, Any]) -> str:
    """
    Joins the plain-string parts of a content object with a single space.

    Structured parts (images, citations, tool payloads) are ignored.
    """
    parts = [p for p in parts_of(content) if isinstance(p, str)]
    return " ".join(parts).strip()
