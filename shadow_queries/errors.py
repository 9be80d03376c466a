"""
errors.py

Error kinds surfaced to callers, and the exceptions that carry them.

Only ExtractionFailed is raised by the extractor itself. FetchFailed belongs
to whatever retrieves the conversation record (session token, HTTP call);
its kind is passed upward unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    NO_CONVERSATION = "NO_CONVERSATION"
    NOT_LOGGED_IN = "NOT_LOGGED_IN"
    AUTH_FAILED = "AUTH_FAILED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    RATE_LIMITED = "RATE_LIMITED"
    NO_SEARCH_QUERIES = "NO_SEARCH_QUERIES"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"


# User-facing text per kind. NO_SEARCH_QUERIES is guidance, not an error.
MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.NO_CONVERSATION: (
        "Open a ChatGPT conversation with web search results, then click Analyze."
    ),
    ErrorKind.NOT_LOGGED_IN: "Log in to ChatGPT to analyze shadow queries.",
    ErrorKind.AUTH_FAILED: (
        "Could not authenticate with ChatGPT. Try refreshing the page."
    ),
    ErrorKind.TOKEN_EXPIRED: (
        "Your ChatGPT session has expired. Refresh the page and try again."
    ),
    ErrorKind.RATE_LIMITED: "Too many requests. Wait a moment and try again.",
    ErrorKind.NO_SEARCH_QUERIES: (
        "This conversation didn't trigger web searches. "
        "Try a prompt likely to trigger a web search, such as one that needs "
        "current information."
    ),
    ErrorKind.EXTRACTION_FAILED: "Failed to extract shadow queries",
}


class ShadowQueryError(Exception):
    """Base error carrying an ErrorKind and a free-text cause."""

    kind: ErrorKind = ErrorKind.EXTRACTION_FAILED

    def __init__(self, cause: str = "", kind: Optional[ErrorKind] = None) -> None:
        if kind is not None:
            self.kind = kind
        self.cause = cause
        super().__init__(f"{self.kind.value}: {cause}" if cause else self.kind.value)


class ExtractionFailed(ShadowQueryError):
    """The conversation graph is absent or not a keyed structure."""

    kind = ErrorKind.EXTRACTION_FAILED


class FetchFailed(ShadowQueryError):
    """Raised by the fetch side (not by the extractor); kind is passed upward as-is."""

    def __init__(self, kind: ErrorKind, cause: str = "") -> None:
        super().__init__(cause, kind)
