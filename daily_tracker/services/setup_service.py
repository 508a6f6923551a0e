"""
Setup Service — the one-time wizard that stores credentials and paths.

Answers are saved through ``config_store``, applied to the environment,
and verified by listing the user's repositories and fetching today's
activity before the wizard declares success.
"""

from __future__ import annotations

from typing import Any, Dict
from zoneinfo import ZoneInfoNotFoundError

import requests
import typer

from daily_tracker import config, config_store
from daily_tracker.logger import get_logger
from daily_tracker.services import github_service

logger = get_logger(__name__)

_TOKEN_HELP_URL = "https://github.com/settings/tokens"


def _required(message: str, default: str = "", hide_input: bool = False) -> str:
    while True:
        value = typer.prompt(
            message,
            default=default or None,
            hide_input=hide_input,
            show_default=not hide_input,
        ).strip()
        if value:
            return value
        typer.secho("Please enter a value.", fg=typer.colors.RED)


def prompt_for_config(current: Dict[str, Any]) -> Dict[str, Any]:
    """Ask for every setting, offering the stored value as default."""
    answers = dict(current)
    answers["github_token"] = _required(
        "Enter your GitHub Personal Access Token",
        default=current.get("github_token", ""),
        hide_input=True,
    )
    answers["github_username"] = _required(
        "Enter your GitHub username",
        default=current.get("github_username", ""),
    )
    answers["report_dir"] = _required(
        "Where should daily reports be saved?",
        default=str(current.get("report_dir", "")),
    )
    answers["timezone"] = _required(
        "Timezone for the reporting day (IANA name)",
        default=current.get("timezone", "UTC"),
    )

    answers["git_enabled"] = typer.confirm(
        "Commit and push reports to a shared git repository?",
        default=bool(current.get("git_enabled", False)),
    )
    if answers["git_enabled"]:
        answers["git_repo_path"] = _required(
            "Path to the local clone of the reports repository",
            default=current.get("git_repo_path", ""),
        )
        answers["git_branch"] = _required("Branch to push to", default=current.get("git_branch", "main"))

    return answers


def verify_connection() -> int:
    """List repositories and fetch today's activity; return the activity count."""
    typer.secho("\nTesting GitHub connection...", fg=typer.colors.YELLOW)
    github_service.fetch_user_repos()
    typer.secho("GitHub connection successful!", fg=typer.colors.GREEN)

    typer.secho("Fetching today's activity...", fg=typer.colors.YELLOW)
    activity = github_service.fetch_github_activity()
    typer.secho(f"Found {activity.total_activity} activities for today!", fg=typer.colors.GREEN)
    return activity.total_activity


def run_setup() -> None:
    """
    Run the interactive setup wizard.

    Raises:
        typer.Exit: with code 1 when the GitHub connection test fails.
    """
    typer.secho("\nWelcome to Daily Tracker Setup!\n", fg=typer.colors.BLUE, bold=True)
    typer.echo("This tool tracks your GitHub activity and generates daily reports.")
    typer.echo("You'll need a GitHub Personal Access Token to get started.\n")
    if config_store.config_exists():
        typer.secho("Existing configuration found; press Enter to keep a current value.\n", dim=True)

    answers = prompt_for_config(config_store.load_config())
    path = config_store.save_config(answers)
    config_store.apply_config(answers)
    config.load_settings_from_env()
    logger.info("Configuration saved to %s", path)

    try:
        verify_connection()
    except (requests.RequestException, ZoneInfoNotFoundError, ValueError) as exc:
        logger.error("Setup connection test failed: %s", exc)
        typer.secho(f"Setup failed: {exc}", fg=typer.colors.RED)
        typer.secho("\nPlease check your GitHub token and try again.", fg=typer.colors.YELLOW)
        typer.secho(f"To create a token: {_TOKEN_HELP_URL}", dim=True)
        raise typer.Exit(code=1)

    typer.secho("\nSetup completed successfully!", fg=typer.colors.BLUE, bold=True)
    typer.echo("You can now run:")
    typer.secho("  daily-tracker            - Generate today's report", fg=typer.colors.CYAN)
    typer.secho("  daily-tracker schedule   - Generate reports automatically", fg=typer.colors.CYAN)
