"""Config module exports."""

from buildtrace.config.loader import BuildTraceSettings, load_config
from buildtrace.config.models import (
    BuildTraceConfig,
    ExportConfig,
    LoggingConfig,
    LogOutputConfig,
)

__all__ = [
    "load_config",
    "BuildTraceConfig",
    "BuildTraceSettings",
    "ExportConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
