"""
Shared test fixtures.

Sets environment variables *before* any application module is imported
so ``Settings`` can be instantiated without a real ``.env`` file, and
points the config store at a throwaway directory.
"""

import os
import tempfile
from datetime import datetime, timezone

import pytest

# Populate required env vars with safe dummy values for test isolation.
_TEST_ENV = {
    "GITHUB_TOKEN": "ghp_test_token_000000000000000000000",
    "GITHUB_USERNAME": "testuser",
    "TIMEZONE": "UTC",
    "REPORT_HOUR": "18",
    "REPORT_MINUTE": "0",
    "LOG_LEVEL": "DEBUG",
    "DAILY_TRACKER_CONFIG_DIR": tempfile.mkdtemp(prefix="daily-tracker-config-"),
}

for key, value in _TEST_ENV.items():
    os.environ.setdefault(key, value)


from daily_tracker.models.activity_models import ActivityData, Commit, Issue, PullRequest  # noqa: E402


def at(hour: int, minute: int = 0) -> datetime:
    """A UTC timestamp on the fixture day."""
    return datetime(2026, 2, 13, hour, minute, tzinfo=timezone.utc)


def make_commit(
    message: str = "fix: resolve flaky test",
    repo: str = "org/backend",
    hour: int = 10,
    sha: str = "abc1234",
) -> Commit:
    return Commit(
        repo=repo,
        message=message,
        sha=sha,
        url=f"https://github.com/{repo}/commit/{sha}",
        timestamp=at(hour),
    )


def make_pr(
    title: str = "Add caching layer",
    number: int = 42,
    state: str = "open",
    repo: str = "org/backend",
    hour: int = 14,
) -> PullRequest:
    return PullRequest(
        repo=repo,
        title=title,
        number=number,
        state=state,
        url=f"https://github.com/{repo}/pull/{number}",
        timestamp=at(hour),
    )


def make_issue(
    title: str = "Crash on startup",
    number: int = 7,
    state: str = "open",
    repo: str = "org/frontend",
    hour: int = 16,
) -> Issue:
    return Issue(
        repo=repo,
        title=title,
        number=number,
        state=state,
        url=f"https://github.com/{repo}/issues/{number}",
        timestamp=at(hour),
    )


@pytest.fixture
def sample_activity() -> ActivityData:
    """A small mixed day: two repos, three commits, one PR, one issue."""
    return ActivityData(
        date="2026-02-13",
        commits=[
            make_commit("feat: add login page", "org/frontend", hour=9, sha="aaa1111"),
            make_commit("fix: off-by-one in pager", "org/backend", hour=13, sha="bbb2222"),
            make_commit("docs: update README", "org/backend", hour=19, sha="ccc3333"),
        ],
        pull_requests=[make_pr(hour=15)],
        issues=[make_issue(hour=23)],
    )
