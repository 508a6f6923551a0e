"""
Command line entry-point.

Provides:
  - ``daily-tracker``                      — today's report (same as ``report``)
  - ``daily-tracker report``               — ``--date YYYY-MM-DD`` / ``--yesterday`` / ``--no-input``
  - ``daily-tracker schedule``             — generate reports automatically every day
  - ``daily-tracker setup``                — (re-)run the setup wizard

Saved configuration is injected into the environment before any command
runs; if no GitHub credentials are found the setup wizard runs first.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

import requests
import typer

from daily_tracker import config, config_store
from daily_tracker.logger import get_logger, set_level

app = typer.Typer(
    help="Track your daily GitHub activity and generate progress reports.",
    no_args_is_help=False,
)

logger = get_logger(__name__)


def _load_configuration() -> config.Settings:
    config_store.init_env_from_config()
    return config.load_settings_from_env()


def _ensure_configured() -> None:
    if not _load_configuration().is_configured:
        typer.secho("Configuration not found. Running setup...", fg=typer.colors.YELLOW)
        from daily_tracker.services.setup_service import run_setup

        run_setup()


def parse_day(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        typer.secho("Invalid date format. Use YYYY-MM-DD", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _generate(day: Optional[date], interactive: bool) -> None:
    from daily_tracker.scheduler import run_daily_report

    try:
        run_daily_report(day, interactive=interactive)
    except (requests.RequestException, OSError) as exc:
        logger.exception("Report generation failed")
        typer.secho(f"Error generating report: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Generate today's report when no command is given."""
    if verbose:
        set_level("DEBUG")
    if ctx.invoked_subcommand is None:
        _ensure_configured()
        _generate(None, interactive=True)


@app.command()
def report(
    day: Optional[str] = typer.Option(None, "--date", "-d", help="Generate report for a specific date (YYYY-MM-DD)"),
    yesterday: bool = typer.Option(False, "--yesterday", help="Generate report for yesterday"),
    no_input: bool = typer.Option(False, "--no-input", help="Skip the manual-details prompts"),
) -> None:
    """Generate a daily report."""
    if day is not None and yesterday:
        typer.secho("Use either --date or --yesterday, not both.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    target: Optional[date] = parse_day(day) if day is not None else None

    _ensure_configured()
    if yesterday:
        from daily_tracker.services.github_service import report_timezone

        target = datetime.now(report_timezone()).date() - timedelta(days=1)

    _generate(target, interactive=not no_input)


@app.command()
def schedule(
    no_catch_up: bool = typer.Option(
        False,
        "--no-catch-up",
        help="Don't generate today's report immediately when started after the report time",
    ),
) -> None:
    """Start automated daily reporting."""
    _ensure_configured()
    from daily_tracker.scheduler import start_scheduler

    start_scheduler(run_now_if_late=not no_catch_up)


@app.command()
def setup() -> None:
    """Run the setup wizard."""
    _load_configuration()
    from daily_tracker.services.setup_service import run_setup

    run_setup()


if __name__ == "__main__":
    app()
