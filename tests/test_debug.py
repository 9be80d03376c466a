"""Tests for the structural debug summary."""
from builders import assistant_message, document, node, user_message

from shadow_queries.debug import format_debug_text, search_related_messages, summarize_graph
from shadow_queries.graph import GraphIndex


def _graph():
    tool = assistant_message({"search_result_groups": []}, role="tool", author_name="web.run", content_type="code")
    tool["recipient"] = "all"
    return GraphIndex(
        document(
            {
                "root": node(None),
                "u1": node("root", user_message("hi", msg_id="m-user")),
                "a1": node(
                    "u1",
                    assistant_message(
                        {"model_slug": "gpt-4o", "search_queries": []},
                        parts=["text", {"content_type": "cite"}],
                    ),
                ),
                "t1": node("a1", tool),
            }
        )["mapping"]
    )


class TestSummarizeGraph:
    def test_lists_only_real_messages(self):
        summary = summarize_graph(_graph())
        assert summary["totalMessages"] == 3
        assert [m["role"] for m in summary["messages"]] == ["user", "assistant", "tool"]

    def test_fields(self):
        user, assistant, tool = summarize_graph(_graph())["messages"]

        assert user["id"] == "m-user"
        assert user["contentType"] == "text"
        assert user["metadataKeys"] == []
        assert user["partTypes"] == ["string"]

        assert assistant["metadataKeys"] == ["model_slug", "search_queries"]
        assert assistant["hasSearchQueries"] is True
        assert assistant["hasSearchModelQueries"] is False
        assert assistant["partTypes"] == ["string", "cite"]

        assert tool["authorName"] == "web.run"
        assert tool["contentType"] == "code"
        assert tool["hasSearchResultGroups"] is True

    def test_message_without_content(self):
        graph = GraphIndex({"x": node(None, {"author": {"role": "system"}})})
        [m] = summarize_graph(graph)["messages"]
        assert m["contentType"] == "unknown"
        assert m["partTypes"] == []
        assert m["id"] == "x"


class TestSearchRelated:
    def test_filters(self):
        related = search_related_messages(summarize_graph(_graph()))
        assert [m["role"] for m in related] == ["assistant", "tool"]

    def test_text_lists_related_messages(self):
        text = format_debug_text(summarize_graph(_graph()))
        assert text.startswith("Messages with search-related fields:")
        assert "tool/web.run [code]" in text

    def test_text_lists_everything_when_nothing_related(self):
        graph = GraphIndex({"u": node(None, user_message("hi")), "a": node("u", assistant_message())})
        text = format_debug_text(summarize_graph(graph))
        assert text.splitlines()[0] == "2 messages found, none with search metadata."
        assert "  user [text] meta:[]" in text
