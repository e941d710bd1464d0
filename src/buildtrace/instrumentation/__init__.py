"""Instrumentation module exports."""

from buildtrace.instrumentation.flags import instrumentation_enabled, viz_enabled
from buildtrace.instrumentation.fs_monitor import (
    FSMonitor,
    enable_fs_monitor_if_instrumentation_enabled,
)
from buildtrace.instrumentation.hooks import (
    Addon,
    HookDispatcher,
    HookKind,
    InstrumentationInfo,
)
from buildtrace.instrumentation.node import SpanNode
from buildtrace.instrumentation.phases import (
    BuildPhaseRecord,
    Phase,
    PhaseController,
    PhaseRecord,
    start_init_record,
)
from buildtrace.instrumentation.session import NULL_COOKIE, Cookie, Session
from buildtrace.instrumentation.summary import BuildResult, ResultAnnotation
from buildtrace.instrumentation.tree import SpanTree

__all__ = [
    # Enablement
    "instrumentation_enabled",
    "viz_enabled",
    # Spans
    "Cookie",
    "NULL_COOKIE",
    "Session",
    "SpanNode",
    "SpanTree",
    # Phases
    "BuildPhaseRecord",
    "BuildResult",
    "Phase",
    "PhaseController",
    "PhaseRecord",
    "ResultAnnotation",
    "start_init_record",
    # Addons
    "Addon",
    "HookDispatcher",
    "HookKind",
    "InstrumentationInfo",
    # Filesystem monitor
    "FSMonitor",
    "enable_fs_monitor_if_instrumentation_enabled",
]
