"""Tests for error types and codes."""

import pytest

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


class TestErrorCode:
    """Error code value tests."""

    @pytest.mark.parametrize(
        ("code", "expected_range"),
        [
            (ErrorCode.CONFIG_PARSE_ERROR, 2000),
            (ErrorCode.CONFIG_INVALID_VALUE, 2000),
            (ErrorCode.UNKNOWN_PHASE, 3000),
            (ErrorCode.INVALID_STOP_ORDER, 3000),
            (ErrorCode.MONITOR_ALREADY_INSTALLED, 3000),
        ],
    )
    def test_given_error_code_when_checked_then_in_correct_range(
        self, code: ErrorCode, expected_range: int
    ) -> None:
        """Error codes fall within their designated numeric range."""
        assert expected_range <= code.value < expected_range + 1000


class TestBuildTraceError:
    """Base error behavior tests."""

    def test_given_error_when_to_dict_then_serializes_all_fields(self) -> None:
        # Given
        error = BuildTraceError(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message="Test message",
            details={"key": "value"},
        )

        # When
        result = error.to_dict()

        # Then
        assert result == {
            "code": 2001,
            "error": "CONFIG_PARSE_ERROR",
            "message": "Test message",
            "retryable": False,
            "details": {"key": "value"},
        }

    def test_given_error_when_str_then_human_readable(self) -> None:
        error = UnknownPhase.for_name("deploy")

        assert str(error) == '[3001] UNKNOWN_PHASE: No such instrumentation "deploy"'

    def test_given_raised_error_when_traceback_reassigned_then_keeps_type(self) -> None:
        """contextlib rewrites __traceback__ on exceptions leaving a with block."""
        try:
            raise NotStarted.for_name("build")
        except NotStarted as error:
            error.__traceback__ = None

            assert error.__traceback__ is None
            assert error.code == ErrorCode.NOT_STARTED


class TestPhaseErrors:
    """Phase error factories keep the established wording."""

    @pytest.mark.parametrize(
        ("cls", "code", "message"),
        [
            (UnknownPhase, ErrorCode.UNKNOWN_PHASE, 'No such instrumentation "deploy"'),
            (
                NotStarted,
                ErrorCode.NOT_STARTED,
                'Cannot stop instrumentation "deploy".  It has not started.',
            ),
            (
                MissingSummaryHandler,
                ErrorCode.MISSING_SUMMARY_HANDLER,
                'No summary found for "deploy"',
            ),
        ],
    )
    def test_factories(self, cls: type[PhaseError], code: ErrorCode, message: str) -> None:
        error = cls.for_name("deploy")  # type: ignore[attr-defined]

        assert isinstance(error, PhaseError)
        assert error.code == code
        assert error.message == message
        assert error.details == {"phase": "deploy"}

    def test_catchable_as_exception(self) -> None:
        with pytest.raises(UnknownPhase, match="deploy"):
            raise UnknownPhase.for_name("deploy")


class TestSpanAndMonitorErrors:
    def test_invalid_stop_order_is_span_error(self) -> None:
        error = InvalidStopOrder.not_innermost(4, "b1", 5)

        assert isinstance(error, SpanError)
        assert error.details["current_id"] == 5

    @pytest.mark.parametrize(
        ("factory", "args", "code"),
        [
            ("unknown_monitor", ("fs",), ErrorCode.UNKNOWN_MONITOR),
            ("conflict", ("fs",), ErrorCode.MONITOR_CONFLICT),
            ("unknown_field", ("fs", "stat.count"), ErrorCode.UNKNOWN_STAT_FIELD),
            ("already_installed", ("FSMonitor",), ErrorCode.MONITOR_ALREADY_INSTALLED),
        ],
    )
    def test_monitor_factories(self, factory: str, args: tuple[str, ...], code: ErrorCode) -> None:
        assert getattr(MonitorError, factory)(*args).code == code


class TestConfigError:
    def test_parse_error_includes_path(self) -> None:
        error = ConfigError.parse_error("/config.yaml", "invalid syntax")

        assert error.details["path"] == "/config.yaml"
        assert "invalid syntax" in error.message
