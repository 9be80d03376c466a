from __future__ import annotations

from .config import DEFAULT_CONFIG
from .graph import GraphIndex
from .mapping import content_of, is_user_message, message_of, string_parts_text


def resolve_prompt(
    graph: GraphIndex,
    node_id: str,
    unknown: str = DEFAULT_CONFIG.unknown_prompt,
) -> str:
    """
    Finds the user prompt that triggered a node.

    Walks up the parent chain (structural nodes are stepped over) to the
    nearest user message and returns its plain-string parts joined by a
    single space. Returns `unknown` when the chain ends without one.
    """
    for _, node in graph.ancestors(node_id):
        msg = message_of(node)
        if is_user_message(msg):
            return string_parts_text(content_of(msg))

    return unknown
