"""Phase controller: start, stop, summarize, dispatch and export named phases.

There are four phases: ``init``, ``build``, ``command`` and ``shutdown``.
Each phase record moves idle -> started (cookie held) -> reported (cookie
consumed). ``build`` normally cycles many times; its record counts how
many builds have been reported, which names the viz file of each build.

Every public operation is a no-op while instrumentation is disabled.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from buildtrace.config.constants import PHASE_MARKER_FLAG
from buildtrace.config.models import ExportConfig
from buildtrace.core.errors import MissingSummaryHandler, NotStarted, UnknownPhase
from buildtrace.core.logging import get_logger, set_phase
from buildtrace.core.progress import status
from buildtrace.instrumentation.export import write_viz_file
from buildtrace.instrumentation.flags import viz_enabled
from buildtrace.instrumentation.hooks import HookDispatcher, InstrumentationInfo
from buildtrace.instrumentation.node import SpanNode
from buildtrace.instrumentation.session import Cookie, Session
from buildtrace.instrumentation.summary import (
    BuildResult,
    ResultAnnotation,
    build_summary,
    total_time_summary,
)
from buildtrace.instrumentation.tree import SpanTree

log = get_logger("instrumentation.phases")

MISSING_INIT_MESSAGE = (
    "No init instrumentation passed to CLI.  Please update your global ember or "
    "invoke ember via the local executable within node_modules.  Init "
    "instrumentation will still be recorded, but some bootstraping will be "
    "omitted."
)


class Phase(StrEnum):
    INIT = "init"
    BUILD = "build"
    COMMAND = "command"
    SHUTDOWN = "shutdown"


@dataclass(slots=True)
class PhaseRecord:
    cookie: Cookie | None = None
    node: SpanNode | None = None


@dataclass(slots=True)
class BuildPhaseRecord(PhaseRecord):
    count: int = 0


def phase_label(name: str) -> dict[str, Any]:
    return {"name": str(name), PHASE_MARKER_FLAG: True}


def start_init_record(session: Session) -> PhaseRecord:
    """Start ``init`` timing before a controller exists.

    Pass the result to ``PhaseController(init_record=...)``.
    """
    cookie = session.start(phase_label(Phase.INIT))
    return PhaseRecord(cookie=cookie or None, node=cookie.node)


class PhaseController:
    """Drives the four instrumentation phases of one process."""

    def __init__(
        self,
        *,
        session: Session | None = None,
        dispatcher: HookDispatcher | None = None,
        init_record: PhaseRecord | None = None,
        export_config: ExportConfig | None = None,
        viz: Callable[[], bool] = viz_enabled,
    ) -> None:
        self.session = session or Session()
        self.dispatcher = dispatcher or HookDispatcher()
        self.export_config = export_config or ExportConfig()
        self._viz = viz

        self._build_record = BuildPhaseRecord()
        self.records: dict[str, PhaseRecord] = {
            Phase.INIT: init_record or PhaseRecord(),
            Phase.BUILD: self._build_record,
            Phase.COMMAND: PhaseRecord(),
            Phase.SHUTDOWN: PhaseRecord(),
        }
        self._summarizers: dict[str, Callable[..., Any]] = {
            Phase.INIT: self._init_summary,
            Phase.BUILD: self._build_summary,
            Phase.COMMAND: self._command_summary,
            Phase.SHUTDOWN: self._shutdown_summary,
        }

        if init_record is None and self.is_enabled():
            self.start(Phase.INIT)
            status(MISSING_INIT_MESSAGE, style="warning")

    def is_enabled(self) -> bool:
        return self.session.is_enabled()

    def is_viz_enabled(self) -> bool:
        return self._viz()

    @property
    def build_count(self) -> int:
        return self._build_record.count

    def _record_for(self, name: str) -> PhaseRecord:
        record = self.records.get(name)
        if record is None:
            raise UnknownPhase.for_name(name)
        return record

    def tree_for(self, name: str) -> SpanTree:
        node = self._record_for(name).node
        if node is None:
            raise NotStarted.for_name(name)
        return SpanTree.from_node(node)

    def start(self, name: str) -> None:
        if not self.is_enabled():
            return

        record = self._record_for(name)
        cookie = self.session.start(phase_label(name))
        record.cookie = cookie
        record.node = cookie.node
        set_phase(name)
        log.debug("phase_start", name=name, id=cookie.node.id if cookie.node else None)

    def stop_and_report(self, name: str, *args: Any) -> InstrumentationInfo | None:
        """Stop phase ``name``, then summarize, dispatch and export it.

        Extra positional args go to the phase summarizer; ``build`` takes a
        ``BuildResult`` and a ``ResultAnnotation``.
        """
        if not self.is_enabled():
            return None

        record = self._record_for(name)
        if record.cookie is None:
            raise NotStarted.for_name(name)
        record.cookie.stop()
        record.cookie = None
        set_phase(None)

        summarize = self._summarizers.get(name)
        if summarize is None:
            raise MissingSummaryHandler.for_name(name)

        tree = self.tree_for(name)
        info = InstrumentationInfo(summary=summarize(tree, *args), tree=tree)
        log.debug("phase_report", name=name, id=tree.root.id)

        self._invoke_addon_hook(name, info)
        self._write_instrumentation(name, info)

        if isinstance(record, BuildPhaseRecord):
            record.count += 1
        return info

    def _invoke_addon_hook(self, name: str, info: InstrumentationInfo) -> None:
        self.dispatcher.dispatch(name, info)

    def _write_instrumentation(self, name: str, info: InstrumentationInfo) -> None:
        if not self.is_viz_enabled():
            return
        build_count = self.build_count if name == Phase.BUILD else None
        write_viz_file(
            name,
            info.summary,
            info.tree,
            build_count=build_count,
            config=self.export_config,
        )

    def _build_summary(
        self, tree: SpanTree, result: BuildResult, annotation: ResultAnnotation
    ) -> dict[str, Any]:
        return build_summary(tree, result, annotation, count=self.build_count)

    def _init_summary(self, tree: SpanTree, *_args: Any) -> dict[str, Any]:
        return total_time_summary(tree)

    def _command_summary(self, tree: SpanTree, *_args: Any) -> dict[str, Any]:
        return total_time_summary(tree)

    def _shutdown_summary(self, tree: SpanTree, *_args: Any) -> dict[str, Any]:
        return total_time_summary(tree)
