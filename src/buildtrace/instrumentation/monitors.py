"""Named statistic monitors.

A monitor is a named counter shape. Each span gets its own record for a
monitor the first time that monitor is touched while the span is open,
built from the registered default shape. Callers mutate records only
through :meth:`MonitorRegistry.increment` and :meth:`MonitorRegistry.set`;
reads return copies.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from buildtrace.core.errors import MonitorError
from buildtrace.instrumentation.node import SpanNode

ShapeFactory = Callable[[], dict[str, Any]]

# "time" is reserved for the built-in self time stat
_RESERVED = frozenset({"time"})


class MonitorRegistry:
    """Registered monitor shapes, keyed by name."""

    def __init__(self) -> None:
        self._shapes: dict[str, ShapeFactory] = {}

    def register(self, name: str, factory: ShapeFactory) -> None:
        """Register ``factory`` as the default shape for ``name``.

        Registering the same factory again is a no-op. A different factory
        under an existing (or reserved) name raises ``MonitorError``.
        """
        if name in _RESERVED:
            raise MonitorError.conflict(name)
        existing = self._shapes.get(name)
        if existing is None:
            self._shapes[name] = factory
        elif existing is not factory:
            raise MonitorError.conflict(name)

    def __contains__(self, name: object) -> bool:
        return name in self._shapes

    def names(self) -> list[str]:
        return list(self._shapes)

    def default(self, name: str) -> dict[str, Any]:
        factory = self._shapes.get(name)
        if factory is None:
            raise MonitorError.unknown_monitor(name)
        return dict(factory())

    def record_for(self, node: SpanNode, name: str) -> dict[str, Any]:
        """The live record for ``name`` on ``node``, created on first touch."""
        record = node.stats.get(name)
        if record is None:
            record = self.default(name)
            node.stats[name] = record
        return record

    def increment(self, node: SpanNode, name: str, field: str, amount: int | float = 1) -> None:
        record = self.record_for(node, name)
        if field not in record:
            raise MonitorError.unknown_field(name, field)
        record[field] += amount

    def set(self, node: SpanNode, name: str, field: str, value: Any) -> None:
        record = self.record_for(node, name)
        if field not in record:
            raise MonitorError.unknown_field(name, field)
        record[field] = value
