"""
Git Service — commits saved reports into a shared repository and pushes them.

Shells out to the ``git`` CLI against a local clone configured in settings.
Failures never propagate: the report is already on disk, so a failed push
only means the user has to commit it by hand.
"""

from __future__ import annotations

import shutil
import subprocess
from datetime import date
from pathlib import Path
from typing import List

from daily_tracker import config
from daily_tracker.logger import get_logger

logger = get_logger(__name__)


class GitCommandError(RuntimeError):
    """A git invocation exited with a non-zero status."""

    def __init__(self, args: List[str], stderr: str) -> None:
        super().__init__(f"git {' '.join(args)} failed: {stderr.strip()}")
        self.stderr = stderr


def is_git_integration_configured() -> bool:
    settings = config.get_settings()
    return settings.git_enabled and bool(settings.git_repo_path)


def _run_git(repo_path: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-C", str(repo_path), *args],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise GitCommandError(list(args), result.stderr or result.stdout)
    return result.stdout


def _has_staged_changes(repo_path: Path) -> bool:
    status = _run_git(repo_path, "status", "--porcelain")
    return any(line and line[0] not in (" ", "?") for line in status.splitlines())


def commit_and_push_report(report_path: Path, day: date) -> bool:
    """
    Copy *report_path* into the shared repository, commit and push it.

    Returns:
        ``True`` if the report is committed and pushed (or was already
        committed unchanged), ``False`` on any git failure.
    """
    settings = config.get_settings()
    repo_path = Path(settings.git_repo_path).expanduser()
    target_dir = repo_path / settings.git_reports_subdir
    target = target_dir / Path(report_path).name

    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(report_path, target)

        _run_git(repo_path, "add", str(target.relative_to(repo_path)))
        if not _has_staged_changes(repo_path):
            logger.info("Report for %s already committed; nothing to push", day)
            return True

        _run_git(repo_path, "commit", "-m", f"Add daily report for {day.isoformat()}")
        _run_git(repo_path, "push", settings.git_remote, settings.git_branch)
    except (GitCommandError, OSError) as exc:
        logger.error("Git integration failed: %s", exc)
        return False

    logger.info("Committed and pushed %s to %s/%s", target.name, settings.git_remote, settings.git_branch)
    return True
