from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Tuple

from .mapping import parent_of


class GraphIndex:
    """
    Read-only view over a raw conversation mapping (node id -> node).

    - get(id) returns the raw node dict or None
    - items() yields (id, node) in the mapping's own order
    - ancestors(id) walks parent links without ever revisiting an id
    """

    def __init__(self, mapping: Dict[str, Any]) -> None:
        self._mapping = mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._mapping

    def get(self, node_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if node_id is None:
            return None
        node = self._mapping.get(node_id)
        return node if isinstance(node, dict) else None

    def items(self) -> Iterator[Tuple[str, Dict[str, Any]]]:
        # Non-string keys are skipped, as parent_of rejects non-string parents.
        for node_id, node in self._mapping.items():
            if isinstance(node_id, str) and isinstance(node, dict):
                yield node_id, node

    def ancestors(self, node_id: str) -> Iterator[Tuple[str, Dict[str, Any]]]:
        """
        Yields (id, node) for each ancestor, nearest first.

        Stops at a missing parent, an id absent from the mapping, or an id
        already seen (self-links and cycles in corrupted exports).
        """
        visited = {node_id}
        current = parent_of(self.get(node_id))

        while current is not None and current not in visited:
            visited.add(current)
            node = self.get(current)
            if node is None:
                return
            yield current, node
            current = parent_of(node)
