"""
Extractor configuration.

Names of the schema fields the extractor looks at. Defaults match the
conversation records returned by ChatGPT's backend; override a field when a
product revision renames one.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class ExtractorConfig:
    # Metadata field holding the internal-only ("shadow") queries.
    hidden_query_field: str = "search_model_queries"

    # Metadata field holding the queries shown to the user.
    visible_query_field: str = "search_queries"

    # Secondary metadata field, read only when both fields above are empty.
    # Anything found here counts as hidden.
    fallback_query_field: str = "search_query"

    # Keys probed, in order, when a query entry is an object instead of a string.
    query_text_keys: Tuple[str, ...] = ("text", "query", "q", "search_query")

    # Content keys that may carry a serialized JSON document.
    # The first one holding a string is used.
    raw_result_fields: Tuple[str, ...] = ("result", "text")

    # Metadata keys naming the model, checked before the document-level "model".
    model_slug_fields: Tuple[str, ...] = ("model_slug", "default_model_slug")

    # Prompt text used when no user message is found above a node.
    unknown_prompt: str = "(unknown prompt)"

    # Model reported when neither the message nor the document names one.
    default_model: str = "unknown"


DEFAULT_CONFIG = ExtractorConfig()
