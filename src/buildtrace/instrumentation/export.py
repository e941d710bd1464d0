"""Visualization file export.

Writes ``broccoli-viz.<phase>[.<count>].json`` holding the phase summary
and the pre-order node list. Write errors are not caught.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from buildtrace.config.constants import VIZ_FILE_PREFIX
from buildtrace.config.models import ExportConfig
from buildtrace.core.logging import get_logger
from buildtrace.instrumentation.tree import SpanTree

log = get_logger("instrumentation.export")


def viz_filename(phase: str, build_count: int | None = None) -> str:
    name = f"{VIZ_FILE_PREFIX}.{phase}"
    if build_count is not None:
        name += f".{build_count}"
    return name + ".json"


def viz_payload(summary: Any, tree: SpanTree) -> dict[str, Any]:
    # broccoli-viz reads "nodes"; the hook payload calls the same thing "tree"
    return {"summary": summary, "nodes": tree.to_json()["nodes"]}


def write_viz_file(
    phase: str,
    summary: Any,
    tree: SpanTree,
    *,
    build_count: int | None = None,
    config: ExportConfig | None = None,
) -> Path:
    """Serialize ``tree`` and ``summary`` to the phase's viz file and return its path."""
    config = config or ExportConfig()
    path = Path(config.output_dir) / viz_filename(phase, build_count)
    path.write_text(json.dumps(viz_payload(summary, tree), indent=config.indent))
    log.debug("viz_written", path=str(path), root=tree.root.id)
    return path


def read_viz_file(path: Path) -> dict[str, Any]:
    """Load a viz file written by :func:`write_viz_file`."""
    data: dict[str, Any] = json.loads(path.read_text())
    return data
