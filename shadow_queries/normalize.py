"""
normalize.py

Stage: RAW FIELD VALUE -> FLAT LIST OF QUERY STRINGS

Query lists have shipped in several shapes across product revisions:

  ["q1", "q2"]                                  flat list of strings
  [{"text": "q1"}, {"query": "q2"}]             flat list of objects
  {"queries": ["q1", ...]}                      wrapped
  {"items": [{"q": "q1"}, ...]}                 wrapped, older key
  '{"search_model_queries": {...}}'             serialized into a string field

All shape checks live here so call sites never re-inspect a raw value.
Nothing in this module raises on unexpected input: an unknown shape is simply
"no data".
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)


class FieldShape(Enum):
    ABSENT = "absent"
    FLAT_SEQUENCE = "flat_sequence"
    WRAPPED_QUERIES = "wrapped_queries"
    WRAPPED_ITEMS = "wrapped_items"
    UNRECOGNIZED = "unrecognized"


def classify_field(value: Any) -> FieldShape:
    """
    Decides which of the known shapes a query-bearing value has.

    A wrapper object counts only if its "queries"/"items" member is itself a
    sequence; "queries" is checked first.
    """
    if value is None:
        return FieldShape.ABSENT
    if isinstance(value, (list, tuple)):
        return FieldShape.FLAT_SEQUENCE
    if isinstance(value, dict):
        if isinstance(value.get("queries"), (list, tuple)):
            return FieldShape.WRAPPED_QUERIES
        if isinstance(value.get("items"), (list, tuple)):
            return FieldShape.WRAPPED_ITEMS
    return FieldShape.UNRECOGNIZED


def normalize_field(value: Any) -> List[Any]:
    """
    Reduces a query-bearing value to its raw entries (strings or objects).
    """
    shape = classify_field(value)

    if shape is FieldShape.FLAT_SEQUENCE:
        return list(value)
    if shape is FieldShape.WRAPPED_QUERIES:
        return list(value["queries"])
    if shape is FieldShape.WRAPPED_ITEMS:
        return list(value["items"])

    if shape is FieldShape.UNRECOGNIZED:
        logger.debug("Ignoring query field of type %s", type(value).__name__)
    return []


def _entry_text(entry: Any, keys: Sequence[str]) -> str:
    if isinstance(entry, str):
        return entry.strip()

    if isinstance(entry, dict):
        for key in keys:
            candidate = entry.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()

    return ""


def extract_query_strings(
    entries: Iterable[Any],
    keys: Sequence[str] = DEFAULT_CONFIG.query_text_keys,
) -> List[str]:
    """
    Maps raw entries to trimmed query strings, in order.

    - strings pass through when non-empty after trimming
    - objects: first non-empty string among `keys` wins
    - everything else is dropped
    """
    out: List[str] = []
    for entry in entries:
        text = _entry_text(entry, keys)
        if text:
            out.append(text)
    return out


def field_queries(
    container: Dict[str, Any],
    field_name: str,
    keys: Sequence[str] = DEFAULT_CONFIG.query_text_keys,
) -> List[str]:
    # Convenience: normalize + extract for one named field of a dict.
    return extract_query_strings(normalize_field(container.get(field_name)), keys)


def parse_embedded_json(value: Any) -> Optional[Any]:
    """
    Tries to read a string field as serialized JSON.

    Returns the parsed value, or None when value is not a string, is blank,
    or does not parse.
    """
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        logger.debug("Embedded field is not JSON (%d chars)", len(text))
        return None


def raw_result_of(
    content: Dict[str, Any],
    fields: Sequence[str] = DEFAULT_CONFIG.raw_result_fields,
) -> Optional[str]:
    # First string-valued raw result field of a content object.
    for name in fields:
        value = content.get(name)
        if isinstance(value, str):
            return value
    return None


def parsed_raw_result(
    content: Dict[str, Any],
    fields: Sequence[str] = DEFAULT_CONFIG.raw_result_fields,
) -> Optional[Dict[str, Any]]:
    """
    The content's raw result string parsed into a JSON object, if it is one.
    """
    parsed = parse_embedded_json(raw_result_of(content, fields))
    return parsed if isinstance(parsed, dict) else None
