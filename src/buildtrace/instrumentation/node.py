"""Span nodes.

A node is one timed, labeled unit of work. Children are owned by their
parent and kept in start order; ``parent`` is a back-reference only.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any

Label = dict[str, Any]


def make_label(label: str | Mapping[str, Any]) -> Label:
    """Normalize a span label to a dict with at least a ``name``."""
    if isinstance(label, str):
        return {"name": label}
    result = dict(label)
    if "name" not in result:
        raise ValueError(f"Span label needs a 'name': {result!r}")
    return result


class SpanNode:
    """A node in the span tree.

    ``stats`` maps monitor name to that monitor's record for this node.
    Self time is kept separately in ``self_time`` (nanoseconds) and is
    reported as the ``time.self`` stat.
    """

    __slots__ = ("id", "label", "parent", "children", "stats", "self_time", "stopped")

    def __init__(self, node_id: int, label: Label, parent: SpanNode | None = None) -> None:
        self.id = node_id
        self.label = label
        self.parent = parent
        self.children: list[SpanNode] = []
        self.stats: dict[str, dict[str, Any]] = {}
        self.self_time = 0
        self.stopped = False

    @property
    def name(self) -> str:
        return str(self.label["name"])

    @property
    def is_root(self) -> bool:
        return self.parent is None

    def add_child(self, node_id: int, label: Label) -> SpanNode:
        child = SpanNode(node_id, label, parent=self)
        self.children.append(child)
        return child

    def flag(self, key: str) -> bool:
        return bool(self.label.get(key))

    def ancestors(self) -> Iterator[SpanNode]:
        """Yield parent, grandparent, ... stopping before the synthetic root."""
        node = self.parent
        while node is not None and not node.is_root:
            yield node
            node = node.parent

    def iter_stats(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(stat_name, value)`` pairs, ``time.self`` first."""
        yield "time.self", self.self_time
        for monitor, record in self.stats.items():
            for key, value in record.items():
                yield f"{monitor}.{key}", value

    def __repr__(self) -> str:
        name = self.label.get("name")
        return f"SpanNode(id={self.id}, name={name!r}, children={len(self.children)})"
