"""Phase summaries computed by walking a finished phase sub-tree.

Summary dicts use the camelCase keys external tooling expects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from buildtrace.config.constants import (
    BUILD_NODE_FLAG,
    CACHED_NODE_FLAG,
    CHANGED_FILES_LIMIT,
    REBUILD,
)
from buildtrace.instrumentation.tree import SpanTree


@dataclass(slots=True)
class BuildResult:
    """What a build produced."""

    directory: str
    output_changes: list[str] = field(default_factory=list)


@dataclass(slots=True)
class ResultAnnotation:
    """Why a build ran: ``initial`` or ``rebuild`` (with the triggering files)."""

    type: str
    primary_file: str | None = None
    changed_files: list[str] = field(default_factory=list)


def count_build_steps(tree: SpanTree) -> int:
    """Nodes flagged as build nodes that were not served from cache."""
    return sum(
        1
        for node in tree.pre_order()
        if node.flag(BUILD_NODE_FLAG) and not node.flag(CACHED_NODE_FLAG)
    )


def total_time_summary(tree: SpanTree) -> dict[str, Any]:
    return {"totalTime": tree.total_self_time()}


def build_summary(
    tree: SpanTree,
    result: BuildResult,
    annotation: ResultAnnotation,
    *,
    count: int,
) -> dict[str, Any]:
    """Summary for one build invocation.

    Rebuilds also carry the primary file, the full changed-file count and
    only the first ``CHANGED_FILES_LIMIT`` changed files.
    """
    build: dict[str, Any] = {
        "type": annotation.type,
        "count": count,
        "outputChangedFiles": list(result.output_changes),
    }
    if annotation.type == REBUILD:
        build["primaryFile"] = annotation.primary_file
        build["changedFileCount"] = len(annotation.changed_files)
        build["changedFiles"] = list(annotation.changed_files[:CHANGED_FILES_LIMIT])

    return {
        "build": build,
        "output": result.directory,
        "totalTime": tree.total_self_time(),
        "buildSteps": count_build_steps(tree),
    }
