"""Span session: the open-span pointer, start/stop discipline and self time.

A ``Session`` is one timeline. ``start`` opens a child of whatever span is
currently open and returns a ``Cookie``; stopping cookies must mirror
starts in reverse order.

Self time: a span's clock runs only while it is the innermost open span.
Starting a child pauses the parent, stopping the child resumes it, so a
node's ``time.self`` never includes time spent in its descendants.

A session is plain mutable state with no locking. Use one per thread (or
per test); never share one across concurrent execution contexts.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from buildtrace.core.errors import InvalidStopOrder
from buildtrace.core.logging import get_logger
from buildtrace.instrumentation.flags import instrumentation_enabled
from buildtrace.instrumentation.monitors import MonitorRegistry, ShapeFactory
from buildtrace.instrumentation.node import SpanNode, make_label
from buildtrace.instrumentation.tree import SpanTree

log = get_logger("instrumentation.session")


class Cookie:
    """One-shot capability to stop the span it was issued for."""

    __slots__ = ("_session", "node")

    def __init__(self, session: Session, node: SpanNode) -> None:
        self._session = session
        self.node: SpanNode | None = node

    @property
    def stopped(self) -> bool:
        return self.node is not None and self.node.stopped

    def stop(self) -> None:
        if self.node is not None:
            self._session._stop(self.node)

    def __repr__(self) -> str:
        return f"Cookie(node={self.node!r})"


class _NullCookie(Cookie):
    """Returned by ``start`` while instrumentation is disabled."""

    def __init__(self) -> None:
        self.node = None

    @property
    def stopped(self) -> bool:
        return False

    def stop(self) -> None:
        pass

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NULL_COOKIE"


NULL_COOKIE: Cookie = _NullCookie()


class Session:
    """Tracks the currently open span of one timeline."""

    def __init__(
        self,
        *,
        enabled: Callable[[], bool] = instrumentation_enabled,
        clock: Callable[[], int] = time.perf_counter_ns,
    ) -> None:
        self._enabled = enabled
        self._clock = clock
        self._next_id = 0
        self.root = SpanNode(self._take_id(), {"name": "root"})
        self.current = self.root
        self._resumed_at = clock()
        self.monitors = MonitorRegistry()

    def _take_id(self) -> int:
        node_id = self._next_id
        self._next_id += 1
        return node_id

    def is_enabled(self) -> bool:
        return self._enabled()

    def start(self, label: str | Mapping[str, Any]) -> Cookie:
        """Open a child of the current span and make it current."""
        if not self._enabled():
            return NULL_COOKIE

        now = self._clock()
        parent = self.current
        parent.self_time += now - self._resumed_at

        node = parent.add_child(self._take_id(), make_label(label))
        self.current = node
        self._resumed_at = now
        log.debug("span_start", span=node.name, id=node.id, parent=parent.id)
        return Cookie(self, node)

    def _stop(self, node: SpanNode) -> None:
        if not self._enabled():
            return
        if node.stopped:
            raise InvalidStopOrder.already_stopped(node.id, node.name)
        if node is not self.current:
            raise InvalidStopOrder.not_innermost(node.id, node.name, self.current.id)

        now = self._clock()
        node.self_time += now - self._resumed_at
        node.stopped = True
        self.current = node.parent or self.root
        self._resumed_at = now
        log.debug("span_stop", span=node.name, id=node.id, self_time=node.self_time)

    @contextmanager
    def span(self, label: str | Mapping[str, Any]) -> Iterator[Cookie]:
        """Start a span for the duration of a ``with`` block.

        If the block raises, the span is closed only when it is still the
        innermost open span; the block's exception always propagates.
        """
        cookie = self.start(label)
        try:
            yield cookie
        except BaseException:
            if cookie.node is self.current and not cookie.stopped:
                cookie.stop()
            raise
        cookie.stop()

    def tree(self, node: SpanNode | None = None) -> SpanTree:
        """A tree view rooted at ``node`` (default: the synthetic root)."""
        return SpanTree.from_node(node or self.root)

    # -- monitors ---------------------------------------------------------

    def register_monitor(self, name: str, factory: ShapeFactory) -> None:
        self.monitors.register(name, factory)

    def stats_for(self, name: str) -> dict[str, Any]:
        """A copy of the current span's record for monitor ``name``."""
        if not self._enabled():
            return self.monitors.default(name)
        return dict(self.monitors.record_for(self.current, name))

    def increment(self, name: str, field: str, amount: int | float = 1) -> None:
        if not self._enabled():
            return
        self.monitors.increment(self.current, name, field, amount)

    def set_stat(self, name: str, field: str, value: Any) -> None:
        if not self._enabled():
            return
        self.monitors.set(self.current, name, field, value)
