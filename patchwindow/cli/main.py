#!/usr/bin/env python3
"""Main CLI entry point for patchwindow using Typer.

This module provides the command-line interface for the monthly maintenance
window rescheduling run and for previewing Patch Tuesday alignment.
"""

import logging
from datetime import date, datetime, time
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .. import __version__
from ..platform import PlatformError
from ..scheduling import (
    DayOfWeek,
    MaintenanceWindowSpec,
    compute_new_window,
    compute_patch_tuesday,
    precedes_patch_tuesday,
    resolve_current_cycle,
)
from .config import load_configuration, print_configuration, validate_configuration
from .runner import ExitCode, run_reschedule


app = typer.Typer(
    name="patchwindow",
    help="Align maintenance windows to Patch Tuesday",
    add_completion=False,
    rich_markup_mode="rich"
)


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )


def _resolve_date(value: Optional[datetime]) -> date:
    return value.date() if value else date.today()


@app.callback()
def main():
    """
    Align maintenance windows to Patch Tuesday.

    Recomputes each selected collection's maintenance window as a single
    occurrence at the same weekday offset from this month's Patch Tuesday.
    """
    pass


@app.command(name="version")
def show_version():
    """Show version information."""
    typer.echo(f"patchwindow v{__version__}")


@app.command()
def run(
    site: Annotated[
        Optional[str],
        typer.Option("--site", "-s", help="Management site code")
    ] = None,

    name_filter: Annotated[
        Optional[str],
        typer.Option("--filter", "-f", help="Collection name pattern (wildcards * and ?)")
    ] = None,

    recipient: Annotated[
        Optional[str],
        typer.Option("--to", help="Report recipient email address")
    ] = None,

    run_date: Annotated[
        Optional[datetime],
        typer.Option("--date", formats=["%Y-%m-%d"], help="Run date (default: today)")
    ] = None,

    config_file: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to configuration file")
    ] = None,

    inventory: Annotated[
        Optional[Path],
        typer.Option("--inventory", "-i", help="Inventory file for the inventory platform")
    ] = None,

    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute and report without applying")
    ] = False,

    no_email: Annotated[
        bool,
        typer.Option("--no-email", help="Log the report instead of emailing it")
    ] = False,

    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,

    print_config: Annotated[
        bool,
        typer.Option("--print-config", help="Print effective configuration and exit")
    ] = False,
):
    """
    Reschedule maintenance windows for the current Patch Tuesday cycle.

    Examples:

        # Monthly run against an exported inventory
        patchwindow run --site PS1 --filter "Servers - Patch*" \\
            --inventory inventory.yaml --to patching@example.com

        # Preview what a late run would schedule
        patchwindow run --date 2020-01-20 --dry-run --no-email -i inventory.yaml
    """
    cli_overrides = {}
    if site:
        cli_overrides["site"] = site
    if name_filter:
        cli_overrides["filter"] = {"pattern": name_filter}
    if inventory:
        cli_overrides["platform"] = {"inventory_path": inventory}

    notification_config = {}
    if recipient:
        notification_config["recipient"] = recipient
    if no_email:
        notification_config["enabled"] = False
    if notification_config:
        cli_overrides["notification"] = notification_config

    execution_config = {}
    if dry_run:
        execution_config["dry_run"] = True
    if verbose:
        execution_config["verbose"] = True
    if execution_config:
        cli_overrides["execution"] = execution_config

    try:
        config = load_configuration(
            config_file=config_file,
            cli_overrides=cli_overrides,
            search_paths=[Path.cwd()]
        )
    except Exception as e:
        typer.echo(f"❌ Configuration error: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    if print_config:
        typer.echo("# Effective Configuration")
        typer.echo("# Loaded from: " + " -> ".join(config.loaded_from))
        typer.echo(print_configuration(config, "yaml"))
        raise typer.Exit()

    validation_errors = validate_configuration(config)
    if validation_errors:
        for error in validation_errors:
            typer.echo(f"❌ Configuration error: {error}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    configure_logging(config.execution.verbose)

    try:
        outcome = run_reschedule(config, _resolve_date(run_date))
    except PlatformError as e:
        typer.echo(f"❌ Platform error: {e}", err=True)
        raise typer.Exit(code=ExitCode.RUNTIME_ERROR.value)
    except Exception as e:
        typer.echo(f"❌ Runtime error: {e}", err=True)
        if config.execution.verbose:
            import traceback
            traceback.print_exc()
        raise typer.Exit(code=ExitCode.RUNTIME_ERROR.value)

    typer.echo(outcome.report.get_summary())
    if outcome.log_path:
        typer.echo(f"Log: {outcome.log_path}")
    if outcome.log_error:
        typer.echo(f"⚠️  Report log not written: {outcome.log_error}", err=True)
    if outcome.notification and not outcome.notification.success:
        typer.echo(f"⚠️  Notification failed: {outcome.notification.error_message}", err=True)


@app.command(name="patch-tuesday")
def patch_tuesday(
    run_date: Annotated[
        Optional[datetime],
        typer.Option("--date", formats=["%Y-%m-%d"], help="Run date (default: today)")
    ] = None,

    day: Annotated[
        Optional[str],
        typer.Option("--day", help="Window weekday to preview (e.g. Wed)")
    ] = None,

    start: Annotated[
        str,
        typer.Option("--time", help="Window start time HH:MM")
    ] = "00:00",

    duration: Annotated[
        int,
        typer.Option("--duration", min=0, help="Window duration in minutes")
    ] = 0,
):
    """
    Show the Patch Tuesday a run on DATE aligns to, and optionally a window.
    """
    today = _resolve_date(run_date)
    cycle = resolve_current_cycle(today)

    typer.echo(f"Patch Tuesday this month: {compute_patch_tuesday(today).isoformat()}")
    typer.echo(f"Current cycle:            {cycle.isoformat()}")

    if day is None:
        return

    try:
        spec = MaintenanceWindowSpec(
            start_day_of_week=DayOfWeek.parse(day),
            start_time=time.fromisoformat(start),
            duration_minutes=duration
        )
    except ValueError as e:
        typer.echo(f"❌ Invalid window: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    window = compute_new_window(cycle, spec)
    typer.echo(
        f"Window:                   {window.start.strftime('%a %Y-%m-%d %H:%M')} - "
        f"{window.end.strftime('%a %Y-%m-%d %H:%M')}"
    )
    if precedes_patch_tuesday(spec.start_day_of_week):
        typer.echo("⚠️  Window falls before Patch Tuesday", err=True)


@app.command()
def validate_config(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to configuration file to validate")
    ],
):
    """
    Validate a configuration file without running.
    """
    if not config_file.exists():
        typer.echo(f"❌ Configuration file not found: {config_file}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    try:
        config = load_configuration(config_file=config_file)
    except Exception as e:
        typer.echo(f"❌ Configuration validation failed: {e}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    errors = validate_configuration(config)
    if errors:
        for error in errors:
            typer.echo(f"❌ {error}", err=True)
        raise typer.Exit(code=ExitCode.CONFIG_ERROR.value)

    typer.echo(f"✅ Configuration file {config_file} is valid")


def cli_main():
    """Entry point for console script."""
    app()


if __name__ == "__main__":
    cli_main()
