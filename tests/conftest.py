"""Shared fixtures for the shadow query test suite."""
import sys
from pathlib import Path

import pytest

# Add project root to path so imports work without installing
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from builders import assistant_message, document, node, user_message  # noqa: E402


FIXED_NOW_MS = 1_700_000_000_000


@pytest.fixture
def rehab_record():
    """One prompt, hidden + visible queries overlapping on one text."""
    return document(
        {
            "root": node(None),
            "u1": node("root", user_message("drug rehab new jersey")),
            "a1": node(
                "u1",
                assistant_message(
                    {
                        "model_slug": "gpt-4o",
                        "search_model_queries": {
                            "queries": [
                                "best drug rehab centers nj",
                                "top rated addiction treatment nj",
                            ]
                        },
                        "search_queries": [
                            {"q": "top rated addiction treatment nj"},
                            {"q": "drug rehab reviews"},
                        ],
                    }
                ),
            ),
        }
    )


@pytest.fixture
def mixed_record():
    """
    Two prompts, citations spread over every known location, a structural
    node in the middle of the chain, and one node with unparseable JSON.
    """
    return document(
        {
            "root": node(None),
            "u1": node("root", user_message("weather in paris")),
            "sys": node("u1"),
            "a1": node(
                "sys",
                assistant_message(
                    {
                        "search_model_queries": ["paris forecast"],
                        "content_references": [
                            {"title": "Meteo", "url": "https://meteo.example/paris", "type": "webpage"},
                        ],
                        "citation_metadata": {
                            "citations": [
                                {"start_ix": 0, "end_ix": 5, "metadata": {"title": "BBC", "url": "https://bbc.example/w"}},
                            ]
                        },
                    }
                ),
            ),
            "t1": node(
                "a1",
                assistant_message(
                    {},
                    content_type="tether_browsing_display",
                    role="tool",
                    author_name="web",
                    result="{not json",
                ),
            ),
            "u2": node("t1", user_message("and in london?")),
            "a2": node(
                "u2",
                assistant_message(
                    {
                        "search_queries": [{"query": "london weather"}],
                        "search_result_groups": [
                            {"domain": "met.example", "entries": [{"title": "Met", "url": "https://met.example/l"}]},
                        ],
                    }
                ),
            ),
        },
        model="gpt-4o-mini",
    )


@pytest.fixture
def quiet_record():
    """A conversation where nothing searched."""
    return document(
        {
            "root": node(None),
            "u1": node("root", user_message("hello")),
            "a1": node("u1", assistant_message({"model_slug": "gpt-4o"}, parts=["Hi there!"])),
        }
    )
