"""BuildTrace CLI - btrace command."""

import click

from buildtrace.cli.run import run_command
from buildtrace.cli.show import show_command
from buildtrace.config.loader import load_config
from buildtrace.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="btrace")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """BuildTrace - hierarchical build instrumentation."""
    ctx.ensure_object(dict)
    config = load_config()
    if verbose:
        config.logging.level = "DEBUG"
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = config
    configure_logging(config=config.logging)


cli.add_command(show_command, name="show")
cli.add_command(run_command, name="run")


if __name__ == "__main__":
    cli()
