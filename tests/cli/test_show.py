"""Tests for btrace show command."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from buildtrace.cli.main import cli
from buildtrace.cli.show import build_rich_tree
from buildtrace.config.models import ExportConfig
from buildtrace.instrumentation.export import write_viz_file
from buildtrace.instrumentation.summary import BuildResult, ResultAnnotation, build_summary
from buildtrace.instrumentation.tree import SpanTree

runner = CliRunner()


@pytest.fixture
def viz_file(tmp_path: Path, build_example_tree: Callable[..., SpanTree]) -> Path:
    tree = build_example_tree()
    annotation = ResultAnnotation("rebuild", primary_file="a", changed_files=list("abcdefghijk"))
    summary = build_summary(tree, BuildResult("dist", ["app.js"]), annotation, count=0)
    return write_viz_file(
        "build", summary, tree, build_count=0, config=ExportConfig(output_dir=str(tmp_path))
    )


class TestShowCommand:
    """btrace show command tests."""

    def test_given_viz_file_when_show_then_prints_tree_and_summary(
        self, viz_file: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["show", str(viz_file)])

        assert result.exit_code == 0, result.output
        for name in ("a", "b1", "c1", "b2", "c2", "d1", "c3"):
            assert name in result.output
        assert "Nodes: 7" in result.output
        assert "Build steps: 2" in result.output
        assert "Build: rebuild #0" in result.output
        assert "Changed files: 11" in result.output

    def test_given_json_flag_when_show_then_prints_summary_json(
        self, viz_file: Path, monkeypatch: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(cli, ["show", "--json", str(viz_file)])

        assert result.exit_code == 0, result.output
        summary = json.loads(result.output)
        assert summary["buildSteps"] == 2
        assert len(summary["build"]["changedFiles"]) == 10

    def test_given_invalid_json_when_show_then_fails(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        bad = tmp_path / "broken.json"
        bad.write_text("{not json")

        result = runner.invoke(cli, ["show", str(bad)])

        assert result.exit_code != 0
        assert "not valid JSON" in result.output

    def test_given_missing_file_when_show_then_fails(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["show", str(tmp_path / "missing.json")])

        assert result.exit_code != 0


class TestBuildRichTree:
    def test_empty_nodes(self) -> None:
        assert build_rich_tree([]) is None

    def test_nesting_follows_children(self, build_example_tree: Callable[..., SpanTree]) -> None:
        tree = build_rich_tree(build_example_tree().to_json()["nodes"])

        assert tree is not None
        assert [len(branch.children) for branch in tree.children] == [1, 2]
