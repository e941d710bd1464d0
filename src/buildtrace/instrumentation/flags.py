"""Environment switches for instrumentation and visualization export.

Both are read from ``os.environ`` on every call so that toggling the
environment at runtime (or in tests) takes effect immediately.
"""

from __future__ import annotations

import os

from buildtrace.config.constants import INSTRUMENTATION_ENV, VIZ_ENV
from buildtrace.core.logging import get_logger
from buildtrace.core.progress import status

log = get_logger("instrumentation.flags")

_viz_warning_emitted = False


def viz_enabled() -> bool:
    """True when BROCCOLI_VIZ is set to any non-empty value.

    Values other than "1" still enable export but print a one-time warning.
    """
    global _viz_warning_emitted

    value = os.environ.get(VIZ_ENV)
    if not value:
        return False
    if value != "1" and not _viz_warning_emitted:
        _viz_warning_emitted = True
        status(
            f"Please set {VIZ_ENV}=1 to enable visual instrumentation, rather than '{value}'",
            style="warning",
        )
        log.warning("viz_env_value", value=value)
    return True


def instrumentation_enabled() -> bool:
    """True when EMBER_CLI_INSTRUMENTATION is exactly "1" or viz export is on."""
    return viz_enabled() or os.environ.get(INSTRUMENTATION_ENV) == "1"


def _reset_viz_warning() -> None:
    global _viz_warning_emitted
    _viz_warning_emitted = False
