"""
Application configuration using Pydantic BaseSettings.

All configuration is loaded from environment variables (or a .env file).
The setup wizard persists its answers through ``config_store`` and injects
them into the environment before this module builds the singleton.
"""

from pathlib import Path
from typing import List

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration for the daily tracker."""

    # --- GitHub ---
    github_token: str = Field(default="", description="GitHub personal access token")
    github_username: str = Field(default="", description="GitHub username to track activity for")
    github_api_url: str = Field(default="https://api.github.com", description="GitHub REST API base URL")

    # --- Reports ---
    report_dir: Path = Field(
        default=Path.home() / "daily-reports",
        description="Directory the daily reports are written to",
    )
    report_formats: List[str] = Field(
        default_factory=lambda: ["markdown"],
        description="Report formats to save (markdown, json, text)",
    )
    timezone: str = Field(default="UTC", description="IANA timezone that defines the reporting day")

    # --- Scheduler ---
    report_hour: int = Field(default=18, ge=0, le=23, description="Hour (24h) to generate the daily report")
    report_minute: int = Field(default=0, ge=0, le=59, description="Minute to generate the daily report")

    # --- Git integration ---
    git_enabled: bool = Field(default=False, description="Commit and push saved reports to a git repository")
    git_repo_path: str = Field(default="", description="Local clone of the shared reports repository")
    git_reports_subdir: str = Field(default="reports", description="Folder inside the repository for reports")
    git_remote: str = Field(default="origin", description="Remote to push to")
    git_branch: str = Field(default="main", description="Branch to push to")

    # --- App ---
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def is_configured(self) -> bool:
        return bool(self.github_token and self.github_username)


# Singleton: import this everywhere.
# A broken environment must not crash imports; the CLI runs setup instead.
try:
    settings = Settings()
except ValidationError:
    settings = None  # type: ignore[assignment]


def load_settings_from_env() -> "Settings":
    """
    (Re-)create the Settings singleton from current environment variables.

    Call this after ``config_store.init_env_from_config`` or the setup wizard.
    """
    global settings
    settings = Settings()
    return settings


def get_settings() -> "Settings":
    """Return the current singleton, building it on first use."""
    if settings is None:
        return load_settings_from_env()
    return settings
