"""Read-only view over a sub-tree of spans.

Traversal methods return fresh generators on every call, so separate callers
never share a cursor. Starting or stopping spans while one of these
generators is in flight is not supported: the results are undefined.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from buildtrace.config.constants import SELF_TIME_STAT
from buildtrace.instrumentation.node import SpanNode


class SpanTree:
    """A sub-tree rooted at ``root``."""

    def __init__(self, root: SpanNode) -> None:
        self.root = root

    @classmethod
    def from_node(cls, node: SpanNode) -> SpanTree:
        return cls(node)

    def pre_order(self) -> Iterator[SpanNode]:
        """Node before its children, children in start order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def post_order(self) -> Iterator[SpanNode]:
        """All descendants before the node itself."""
        stack: list[tuple[SpanNode, bool]] = [(self.root, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                yield node
                continue
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    def __iter__(self) -> Iterator[SpanNode]:
        return self.pre_order()

    def __len__(self) -> int:
        return sum(1 for _ in self.pre_order())

    def find(self, name: str) -> SpanNode | None:
        """First node in pre-order whose label name is ``name``."""
        return next((node for node in self.pre_order() if node.label.get("name") == name), None)

    def total_self_time(self) -> int:
        """Sum of ``time.self`` over every node in the sub-tree."""
        total = 0
        for node in self.pre_order():
            for stat_name, value in node.iter_stats():
                if stat_name == SELF_TIME_STAT:
                    total += value
        return total

    def to_json(self) -> dict[str, Any]:
        """Serialize to the visualization format: ``{"nodes": [...]}`` in pre-order."""
        return {"nodes": [node_to_json(node) for node in self.pre_order()]}


def node_to_json(node: SpanNode) -> dict[str, Any]:
    """One node of the visualization format.

    Falsy label fields are omitted, not written as ``false``.
    """
    stats: dict[str, Any] = {"time": {"self": node.self_time}}
    for monitor, record in node.stats.items():
        stats[monitor] = dict(record)
    return {
        "id": node.id,
        "label": {key: value for key, value in node.label.items() if value},
        "children": [child.id for child in node.children],
        "stats": stats,
    }
