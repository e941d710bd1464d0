"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable:
environment switches and the field names of the visualization file format,
which external tooling reads.

For configurable values, see models.py.
"""

# =============================================================================
# Enablement switches
# =============================================================================
# Read from os.environ on every query, never cached.

INSTRUMENTATION_ENV = "EMBER_CLI_INSTRUMENTATION"
"""Set to exactly "1" to enable span recording and phase reporting."""

VIZ_ENV = "BROCCOLI_VIZ"
"""Set to "1" to also write visualization files. Implies instrumentation."""

# =============================================================================
# Visualization format
# =============================================================================
# Consumed by broccoli-viz. Field names must not change.

VIZ_FILE_PREFIX = "broccoli-viz"

BUILD_NODE_FLAG = "broccoliNode"
"""Label flag marking a span as a build step."""

CACHED_NODE_FLAG = "broccoliCachedNode"
"""Label flag marking a build step that was served from cache."""

PHASE_MARKER_FLAG = "emberCLI"
"""Label flag set on every phase root span."""

SELF_TIME_STAT = "time.self"

# =============================================================================
# Summaries
# =============================================================================

CHANGED_FILES_LIMIT = 10
"""Rebuild summaries list at most this many changed files."""

REBUILD = "rebuild"
"""Result annotation type that carries changed-file details."""
