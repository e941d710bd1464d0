"""Core module exports."""

from buildtrace.core.errors import (
    BuildTraceError,
    ConfigError,
    ErrorCode,
    InvalidStopOrder,
    MissingSummaryHandler,
    MonitorError,
    NotStarted,
    PhaseError,
    SpanError,
    UnknownPhase,
)
from buildtrace.core.logging import configure_logging, get_logger
from buildtrace.core.progress import status

__all__ = [
    # Errors
    "BuildTraceError",
    "ConfigError",
    "ErrorCode",
    "InvalidStopOrder",
    "MissingSummaryHandler",
    "MonitorError",
    "NotStarted",
    "PhaseError",
    "SpanError",
    "UnknownPhase",
    # Logging
    "configure_logging",
    "get_logger",
    # Console
    "status",
]
