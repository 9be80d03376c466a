"""
shadow_queries package

Extracts "shadow queries" (the web searches ChatGPT runs behind the scenes
while answering) and the citations they produced from a conversation record,
grouped by the user prompt that triggered them.

To run:

python -m shadow_queries.convert [INPUT_JSON] --out [OUTPUT_JSON]

Example:

python -m shadow_queries.convert conversation.json --out report.json --url https://chatgpt.com/c/67a1b2c3-...

From code:

    from shadow_queries import extract_report
    report = extract_report(record)
    report.to_dict()
"""

from .config import DEFAULT_CONFIG, ExtractorConfig
from .conversation import (
    Outcome,
    conversation_id_from_url,
    extract_report,
    outcome_from_error,
    run_extraction,
)
from .errors import ErrorKind, ExtractionFailed, FetchFailed, ShadowQueryError
from .model import Citation, PromptGroup, Report, ShadowQuery

__all__ = [
    "Citation",
    "DEFAULT_CONFIG",
    "ErrorKind",
    "ExtractionFailed",
    "ExtractorConfig",
    "FetchFailed",
    "Outcome",
    "PromptGroup",
    "Report",
    "ShadowQuery",
    "ShadowQueryError",
    "conversation_id_from_url",
    "extract_report",
    "outcome_from_error",
    "run_extraction",
]
