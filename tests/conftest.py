"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages,
and gives every test a clean instrumentation environment.
"""

import logging
import sys
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
import structlog

# Insert local src directory at the beginning of sys.path
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of buildtrace modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("buildtrace"):
        del sys.modules[module_name]

from buildtrace.config.constants import (  # noqa: E402
    BUILD_NODE_FLAG,
    CACHED_NODE_FLAG,
    INSTRUMENTATION_ENV,
    VIZ_ENV,
)
from buildtrace.instrumentation import flags  # noqa: E402
from buildtrace.instrumentation.fs_monitor import FSMonitor  # noqa: E402
from buildtrace.instrumentation.session import Session  # noqa: E402
from buildtrace.instrumentation.tree import SpanTree  # noqa: E402


class FakeClock:
    """Nanosecond clock that advances by ``step`` on every read."""

    def __init__(self, step: int = 100) -> None:
        self.now = 0
        self.step = step

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture(autouse=True)
def clean_instrumentation_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Start every test with instrumentation off and no pending warnings."""
    monkeypatch.delenv(INSTRUMENTATION_ENV, raising=False)
    monkeypatch.delenv(VIZ_ENV, raising=False)
    flags._reset_viz_warning()
    yield
    flags._reset_viz_warning()
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    active = FSMonitor.active()
    if active is not None:
        active.uninstall()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session(clock: FakeClock) -> Session:
    """A session that is always enabled, on a fake clock."""
    return Session(enabled=lambda: True, clock=clock)


def _stats_shape() -> dict[str, int]:
    return {"x": 0, "y": 0}


@pytest.fixture
def build_example_tree(session: Session) -> Callable[..., SpanTree]:
    """Build the reference tree on ``session`` and return the sub-tree at ``a``.

    a
    ├── b1 (build)
    │   └── c1          mystats = {x: 3, y: 4}
    └── b2
        ├── c2 (build)
        │   └── d1 (build, cached)   only when include_cached
        └── c3
    """

    def build(include_cached: bool = True) -> SpanTree:
        session.register_monitor("mystats", _stats_shape)
        a = session.start("a")
        b1 = session.start({"name": "b1", BUILD_NODE_FLAG: True, CACHED_NODE_FLAG: False})
        c1 = session.start("c1")
        session.set_stat("mystats", "x", 3)
        session.set_stat("mystats", "y", 4)
        c1.stop()
        b1.stop()
        b2 = session.start("b2")
        c2 = session.start({"name": "c2", BUILD_NODE_FLAG: True, CACHED_NODE_FLAG: False})
        if include_cached:
            d1 = session.start({"name": "d1", BUILD_NODE_FLAG: True, CACHED_NODE_FLAG: True})
            d1.stop()
        c2.stop()
        c3 = session.start("c3")
        c3.stop()
        b2.stop()
        a.stop()
        assert a.node is not None
        return SpanTree.from_node(a.node)

    return build
