"""Filesystem call interceptor.

``FSMonitor.install()`` replaces a fixed set of ``os`` functions with
wrappers that count calls and time spent, recording both on whichever span
is open at the time under the ``fs`` monitor (``<op>.count`` and
``<op>.time`` in nanoseconds). ``uninstall()`` puts the originals back.

Only one monitor may be installed per process. Code that bound an ``os``
function before installation (``from os import stat``) is not observed.
"""

from __future__ import annotations

import functools
import os
import time
from collections.abc import Callable
from typing import Any, ClassVar

from buildtrace.core.errors import MonitorError
from buildtrace.core.logging import get_logger
from buildtrace.instrumentation.session import Session

log = get_logger("instrumentation.fs_monitor")

FS_MONITOR = "fs"

FS_OPS: tuple[str, ...] = (
    "access",
    "chmod",
    "listdir",
    "lstat",
    "mkdir",
    "readlink",
    "rename",
    "replace",
    "rmdir",
    "scandir",
    "stat",
    "symlink",
    "unlink",
    "utime",
)


def fs_shape() -> dict[str, int]:
    shape: dict[str, int] = {}
    for op in FS_OPS:
        shape[f"{op}.count"] = 0
        shape[f"{op}.time"] = 0
    return shape


class FSMonitor:
    """Attributes ``os`` filesystem calls to the open span of a session."""

    _installed: ClassVar[FSMonitor | None] = None

    def __init__(self, session: Session) -> None:
        self._session = session
        self._originals: dict[str, Callable[..., Any]] = {}
        self._depth = 0

    @classmethod
    def active(cls) -> FSMonitor | None:
        return cls._installed

    @property
    def installed(self) -> bool:
        return FSMonitor._installed is self

    def install(self) -> None:
        if FSMonitor._installed is not None:
            raise MonitorError.already_installed(type(self).__name__)

        self._session.register_monitor(FS_MONITOR, fs_shape)
        for op in FS_OPS:
            original = getattr(os, op, None)
            if original is None:
                continue
            self._originals[op] = original
            setattr(os, op, self._wrap(op, original))
        FSMonitor._installed = self
        log.debug("fs_monitor_installed", ops=sorted(self._originals))

    def uninstall(self) -> None:
        if not self.installed:
            return
        for op, original in self._originals.items():
            setattr(os, op, original)
        self._originals.clear()
        FSMonitor._installed = None
        log.debug("fs_monitor_uninstalled")

    def _wrap(self, op: str, original: Callable[..., Any]) -> Callable[..., Any]:
        session = self._session

        @functools.wraps(original)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if self._depth or not session.is_enabled():
                return original(*args, **kwargs)
            start = time.perf_counter_ns()
            try:
                return original(*args, **kwargs)
            finally:
                elapsed = time.perf_counter_ns() - start
                self._depth += 1
                try:
                    session.increment(FS_MONITOR, f"{op}.count")
                    session.increment(FS_MONITOR, f"{op}.time", elapsed)
                finally:
                    self._depth -= 1

        return wrapper


def enable_fs_monitor_if_instrumentation_enabled(session: Session) -> FSMonitor | None:
    """Install an ``FSMonitor`` on ``session`` when instrumentation is on.

    Call once at process start. Returns the installed monitor, or None.
    """
    if not session.is_enabled():
        return None
    monitor = FSMonitor(session)
    monitor.install()
    return monitor
