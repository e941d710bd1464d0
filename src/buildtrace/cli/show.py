"""btrace show command - render a broccoli-viz file."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.tree import Tree

from buildtrace.core.progress import format_duration
from buildtrace.instrumentation.export import read_viz_file


def _describe(node: dict[str, Any]) -> str:
    label = node.get("label", {})
    flags = [key for key in label if key != "name"]
    self_time = node.get("stats", {}).get("time", {}).get("self", 0)
    name = label.get("name", "?")
    text = f"[bold]{name}[/bold] [dim]#{node['id']}[/dim] {format_duration(self_time)}"
    if flags:
        text += f" [cyan]({', '.join(flags)})[/cyan]"
    return text


def build_rich_tree(nodes: list[dict[str, Any]]) -> Tree | None:
    """Rebuild the span hierarchy from the flat pre-order node list."""
    if not nodes:
        return None
    by_id = {node["id"]: node for node in nodes}
    root = nodes[0]
    tree = Tree(_describe(root))
    stack: list[tuple[dict[str, Any], Tree]] = [(root, tree)]
    while stack:
        node, branch = stack.pop()
        for child_id in node.get("children", []):
            child = by_id.get(child_id)
            if child is None:
                continue
            stack.append((child, branch.add(_describe(child))))
    return tree


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print only the summary as JSON")
def show_command(file: Path, as_json: bool) -> None:
    """Show the span tree and summary stored in a broccoli-viz FILE."""
    try:
        data = read_viz_file(file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{file} is not valid JSON: {e}") from e

    summary = data.get("summary")
    if as_json:
        click.echo(json.dumps(summary, indent=2))
        return

    console = Console()
    nodes = data.get("nodes", [])
    tree = build_rich_tree(nodes)
    if tree is None:
        click.echo("No nodes recorded.")
    else:
        console.print(tree)

    if isinstance(summary, dict):
        click.echo(f"Nodes: {len(nodes)}")
        if "totalTime" in summary:
            click.echo(f"Total time: {format_duration(summary['totalTime'])}")
        if "buildSteps" in summary:
            click.echo(f"Build steps: {summary['buildSteps']}")
        build = summary.get("build")
        if isinstance(build, dict):
            click.echo(f"Build: {build.get('type')} #{build.get('count')}")
            if "changedFileCount" in build:
                click.echo(f"  Changed files: {build['changedFileCount']}")
