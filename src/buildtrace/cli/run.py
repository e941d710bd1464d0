"""btrace run command - time a command through the instrumentation phases."""

from __future__ import annotations

import subprocess

import click

from buildtrace.config.models import BuildTraceConfig
from buildtrace.core.progress import format_duration, status
from buildtrace.instrumentation.fs_monitor import enable_fs_monitor_if_instrumentation_enabled
from buildtrace.instrumentation.phases import Phase, PhaseController, start_init_record
from buildtrace.instrumentation.session import Session


@click.command(context_settings={"ignore_unknown_options": True})
@click.option("--viz", is_flag=True, help="Write broccoli-viz.*.json files")
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def run_command(ctx: click.Context, viz: bool, command: tuple[str, ...]) -> None:
    """Run COMMAND inside the init/command/shutdown phases and report timings.

    Example: btrace run --viz -- make all
    """
    config: BuildTraceConfig = ctx.obj["config"] if ctx.obj else BuildTraceConfig()

    # scoped to this session; os.environ is not touched
    session = Session(enabled=lambda: True)
    init_record = start_init_record(session)
    monitor = enable_fs_monitor_if_instrumentation_enabled(session)
    try:
        controller = PhaseController(
            session=session,
            init_record=init_record,
            export_config=config.export,
            viz=lambda: viz,
        )
        init_info = controller.stop_and_report(Phase.INIT)

        controller.start(Phase.COMMAND)
        try:
            completed = subprocess.run(list(command), check=False)
        except FileNotFoundError as e:
            raise click.ClickException(f"Command not found: {command[0]}") from e
        finally:
            command_info = controller.stop_and_report(Phase.COMMAND)

        controller.start(Phase.SHUTDOWN)
        shutdown_info = controller.stop_and_report(Phase.SHUTDOWN)
    finally:
        if monitor is not None:
            monitor.uninstall()

    for name, info in (
        (Phase.INIT, init_info),
        (Phase.COMMAND, command_info),
        (Phase.SHUTDOWN, shutdown_info),
    ):
        if info is not None:
            status(f"{name}: {format_duration(info.summary['totalTime'])}", style="success")

    ctx.exit(completed.returncode)
