"""Tests for extract_report / run_extraction and the error envelope."""
import pytest

from builders import document, simple_conversation
from conftest import FIXED_NOW_MS

from shadow_queries import (
    ErrorKind,
    ExtractionFailed,
    FetchFailed,
    conversation_id_from_url,
    extract_report,
    outcome_from_error,
    run_extraction,
)


class TestExtractReport:
    def test_report_shape(self, rehab_record):
        data = extract_report(rehab_record, now_ms=FIXED_NOW_MS).to_dict()
        assert data == {
            "conversationId": "conv-123",
            "results": [
                {
                    "userPrompt": "drug rehab new jersey",
                    "shadowQueries": [
                        {"text": "best drug rehab centers nj", "hidden": True},
                        {"text": "top rated addiction treatment nj", "hidden": True},
                        {"text": "drug rehab reviews", "hidden": False},
                    ],
                    "citations": [],
                    "model": "gpt-4o",
                }
            ],
            "totalShadowQueries": 3,
            "totalCitations": 0,
            "extractedAt": FIXED_NOW_MS,
        }

    def test_totals_sum_over_groups(self, mixed_record):
        report = extract_report(mixed_record)
        assert report.total_shadow_queries == 2
        assert report.total_citations == 3

    def test_explicit_conversation_id_wins(self, rehab_record):
        assert extract_report(rehab_record, "other").conversation_id == "other"

    def test_id_field_fallback(self):
        record = simple_conversation("p", {"search_queries": ["x"]})
        del record["conversation_id"]
        record["id"] = "from-id"
        assert extract_report(record).conversation_id == "from-id"

    def test_extracted_at_defaults_to_now(self, rehab_record):
        assert extract_report(rehab_record).extracted_at > FIXED_NOW_MS

    def test_empty_mapping_is_an_empty_report(self):
        report = extract_report(document({}))
        assert report.results == []
        assert report.to_dict()["totalShadowQueries"] == 0
        assert report.debug == {"totalMessages": 0, "messages": []}

    @pytest.mark.parametrize(
        "raw",
        [
            {"conversation_id": "c"},
            {"conversation_id": "c", "mapping": None},
            {"conversation_id": "c", "mapping": ["not", "keyed"]},
            {"conversation_id": "c", "mapping": "text"},
            ["not", "an", "object"],
            None,
        ],
    )
    def test_missing_or_malformed_mapping_is_fatal(self, raw):
        with pytest.raises(ExtractionFailed) as info:
            extract_report(raw)
        assert info.value.kind is ErrorKind.EXTRACTION_FAILED
        assert info.value.cause

    def test_debug_only_when_empty(self, rehab_record, quiet_record):
        assert extract_report(rehab_record).debug is None
        assert "debug" not in extract_report(rehab_record).to_dict()
        assert extract_report(quiet_record).debug["totalMessages"] == 2
        assert extract_report(quiet_record, include_debug=False).debug is None


class TestRunExtraction:
    def test_success(self, rehab_record):
        outcome = run_extraction(rehab_record, now_ms=FIXED_NOW_MS)
        assert outcome.success
        assert outcome.error is None
        assert outcome.to_dict()["data"]["totalShadowQueries"] == 3

    def test_no_search_queries_is_not_a_failure(self, quiet_record):
        outcome = run_extraction(quiet_record)
        assert outcome.success
        assert outcome.error is ErrorKind.NO_SEARCH_QUERIES
        assert "web search" in outcome.message
        data = outcome.to_dict()["data"]
        assert data["results"] == []
        assert data["totalCitations"] == 0
        assert data["debug"]["totalMessages"] == 2

    def test_no_conversation(self, rehab_record):
        del rehab_record["conversation_id"]
        outcome = run_extraction(rehab_record)
        assert not outcome.success
        assert outcome.error is ErrorKind.NO_CONVERSATION
        assert outcome.report is None

    def test_extraction_failed_carries_cause(self):
        outcome = run_extraction({"conversation_id": "c"})
        assert not outcome.success
        assert outcome.error is ErrorKind.EXTRACTION_FAILED
        assert outcome.message.startswith("Failed to extract shadow queries: ")
        assert "mapping" in outcome.message
        assert outcome.to_dict() == {
            "success": False,
            "error": "EXTRACTION_FAILED",
            "message": outcome.message,
        }


class TestFetchErrors:
    @pytest.mark.parametrize(
        "kind",
        [ErrorKind.NOT_LOGGED_IN, ErrorKind.AUTH_FAILED, ErrorKind.TOKEN_EXPIRED, ErrorKind.RATE_LIMITED],
    )
    def test_kind_passed_through(self, kind):
        outcome = outcome_from_error(FetchFailed(kind, "HTTP 401"))
        assert not outcome.success
        assert outcome.error is kind
        assert outcome.message
        assert "HTTP 401" not in outcome.message

    def test_error_string(self):
        assert str(FetchFailed(ErrorKind.RATE_LIMITED, "429")) == "RATE_LIMITED: 429"
        assert str(FetchFailed(ErrorKind.RATE_LIMITED)) == "RATE_LIMITED"


class TestConversationIdFromUrl:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://chatgpt.com/c/67a1b2c3-0d4e-8f90-a1b2-c3d4e5f60789", "67a1b2c3-0d4e-8f90-a1b2-c3d4e5f60789"),
            ("/g/abc123-def", "abc123-def"),
            ("https://chatgpt.com/", None),
            ("https://chatgpt.com/gpts", None),
            ("", None),
            (None, None),
        ],
    )
    def test_patterns(self, url, expected):
        assert conversation_id_from_url(url) == expected
