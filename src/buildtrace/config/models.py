"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (BUILDTRACE__SECTION__KEY)
3. Repo YAML (.buildtrace/config.yaml)
4. Global YAML (~/.config/buildtrace/config.yaml)
5. Built-in defaults (this file)

Examples:
    BUILDTRACE__LOGGING__LEVEL=DEBUG
    BUILDTRACE__EXPORT__OUTPUT_DIR=/tmp/viz

The instrumentation switches (EMBER_CLI_INSTRUMENTATION, BROCCOLI_VIZ) are
deliberately not part of this model; see buildtrace.instrumentation.flags.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        BUILDTRACE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every span start and stop.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExportConfig(BaseModel):
    """Visualization export configuration.

    Env vars:
        BUILDTRACE__EXPORT__OUTPUT_DIR: Directory viz files are written to
        BUILDTRACE__EXPORT__INDENT: JSON indent for viz files
    """

    output_dir: str = Field(
        default=".",
        description="Directory broccoli-viz.*.json files are written to. "
        "Relative paths resolve against the working directory at write time.",
    )
    indent: int | None = Field(
        default=None,
        description="JSON indent. None writes compact files.",
    )

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int | None) -> int | None:
        if v is not None and v < 0:
            raise ValueError(f"Indent must be non-negative, got {v}")
        return v


class BuildTraceConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
