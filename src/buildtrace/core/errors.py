"""BuildTrace error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Instrumentation
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Instrumentation (3xxx)
    UNKNOWN_PHASE = 3001
    NOT_STARTED = 3002
    INVALID_STOP_ORDER = 3003
    MISSING_SUMMARY_HANDLER = 3004
    UNKNOWN_MONITOR = 3005
    MONITOR_CONFLICT = 3006
    UNKNOWN_STAT_FIELD = 3007
    MONITOR_ALREADY_INSTALLED = 3008


@dataclass(frozen=True)
class BuildTraceError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'UNKNOWN_PHASE')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(BuildTraceError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class PhaseError(BuildTraceError):
    """Phase controller misuse: bad names, stops without starts."""


class UnknownPhase(PhaseError):
    @classmethod
    def for_name(cls, name: str) -> "UnknownPhase":
        return cls(
            code=ErrorCode.UNKNOWN_PHASE,
            message=f'No such instrumentation "{name}"',
            details={"phase": name},
        )


class NotStarted(PhaseError):
    @classmethod
    def for_name(cls, name: str) -> "NotStarted":
        return cls(
            code=ErrorCode.NOT_STARTED,
            message=f'Cannot stop instrumentation "{name}".  It has not started.',
            details={"phase": name},
        )


class MissingSummaryHandler(PhaseError):
    """A phase has no summarizer registered. Always a programming defect."""

    @classmethod
    def for_name(cls, name: str) -> "MissingSummaryHandler":
        return cls(
            code=ErrorCode.MISSING_SUMMARY_HANDLER,
            message=f'No summary found for "{name}"',
            details={"phase": name},
        )


class SpanError(BuildTraceError):
    """Span start/stop discipline violations."""


class InvalidStopOrder(SpanError):
    @classmethod
    def already_stopped(cls, node_id: int, name: str) -> "InvalidStopOrder":
        return cls(
            code=ErrorCode.INVALID_STOP_ORDER,
            message=f'Span "{name}" (id {node_id}) has already been stopped',
            details={"node_id": node_id, "name": name, "reason": "already_stopped"},
        )

    @classmethod
    def not_innermost(cls, node_id: int, name: str, current_id: int) -> "InvalidStopOrder":
        return cls(
            code=ErrorCode.INVALID_STOP_ORDER,
            message=(
                f'Span "{name}" (id {node_id}) is not the innermost open span '
                f"(current is id {current_id})"
            ),
            details={
                "node_id": node_id,
                "name": name,
                "current_id": current_id,
                "reason": "not_innermost",
            },
        )


class MonitorError(BuildTraceError):
    """Statistic monitor registration and lookup errors."""

    @classmethod
    def unknown_monitor(cls, name: str) -> "MonitorError":
        return cls(
            code=ErrorCode.UNKNOWN_MONITOR,
            message=f'No monitor registered as "{name}"',
            details={"monitor": name},
        )

    @classmethod
    def conflict(cls, name: str) -> "MonitorError":
        return cls(
            code=ErrorCode.MONITOR_CONFLICT,
            message=f'Monitor "{name}" is already registered with a different shape',
            details={"monitor": name},
        )

    @classmethod
    def unknown_field(cls, name: str, field: str) -> "MonitorError":
        return cls(
            code=ErrorCode.UNKNOWN_STAT_FIELD,
            message=f'Monitor "{name}" has no field "{field}"',
            details={"monitor": name, "field": field},
        )

    @classmethod
    def already_installed(cls, name: str) -> "MonitorError":
        return cls(
            code=ErrorCode.MONITOR_ALREADY_INSTALLED,
            message=f"{name} is already installed in this process",
            details={"monitor": name},
        )
