"""
GitHub Service — fetches one day's commits, pull requests and issues.

Uses the GitHub REST API v3 with a Personal Access Token (classic or
fine-grained). The day is a local-time window in the configured timezone,
converted to UTC for the API's ``since``/``until`` parameters.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone, tzinfo
from typing import Any, Dict, List, Optional, Tuple
from zoneinfo import ZoneInfo

import requests

from daily_tracker import config
from daily_tracker.logger import get_logger
from daily_tracker.models.activity_models import (
    ActivityData,
    Commit,
    Issue,
    PullRequest,
)

logger = get_logger(__name__)

_TIMEOUT = 15
_SHORT_SHA = 7


def _headers() -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {config.get_settings().github_token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }


def _get(path: str, params: Dict[str, Any] | None = None) -> Any:
    """Thin wrapper around requests.get with error handling."""
    url = f"{config.get_settings().github_api_url.rstrip('/')}{path}"
    resp = requests.get(url, headers=_headers(), params=params, timeout=_TIMEOUT)
    resp.raise_for_status()
    return resp.json()


def _parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def report_timezone() -> tzinfo:
    """The configured IANA zone that defines the reporting day."""
    return ZoneInfo(config.get_settings().timezone)


def day_window(day: date, tz: tzinfo) -> Tuple[datetime, datetime]:
    """Return the local-day bounds ``[00:00:00.000, 23:59:59.999]`` in *tz*."""
    start = datetime.combine(day, time(0, 0, 0, 0), tzinfo=tz)
    end = datetime.combine(day, time(23, 59, 59, 999000), tzinfo=tz)
    return start, end


def _iso_utc(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _search_time(moment: datetime) -> str:
    """UTC timestamp for search qualifiers, which take whole seconds."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _repo_from_api_url(repository_url: str) -> str:
    """``https://api.github.com/repos/owner/name`` → ``owner/name``."""
    return "/".join(repository_url.rstrip("/").split("/")[-2:])


# ------------------------------------------------------------------
# Commits
# ------------------------------------------------------------------

def fetch_user_repos() -> List[Dict[str, Any]]:
    """Repositories of the authenticated user, most recently updated first."""
    return _get("/user/repos", params={"sort": "updated", "per_page": 100})


def _parse_commit(item: Dict[str, Any], repo_full: str) -> Commit:
    return Commit(
        repo=repo_full,
        message=item["commit"]["message"],
        sha=item["sha"][:_SHORT_SHA],
        url=item["html_url"],
        timestamp=_parse_timestamp(item["commit"]["author"]["date"]),
    )


def fetch_commits_for_day(start: datetime, end: datetime) -> List[Commit]:
    """
    Walk the user's repositories and collect commits authored in the window.

    Repositories we cannot read (empty, archived, no access) are skipped.
    """
    username = config.get_settings().github_username
    commits: List[Commit] = []

    try:
        repos = fetch_user_repos()
    except requests.RequestException as exc:
        logger.warning("GitHub repository listing failed: %s", exc)
        return commits

    for repo in repos:
        repo_full = repo["full_name"]
        try:
            items = _get(
                f"/repos/{repo['owner']['login']}/{repo['name']}/commits",
                params={"author": username, "since": _iso_utc(start), "until": _iso_utc(end)},
            )
        except requests.RequestException as exc:
            logger.debug("Skipping %s: %s", repo_full, exc)
            continue

        commits.extend(_parse_commit(item, repo_full) for item in items)

    return commits


# ------------------------------------------------------------------
# Pull requests & issues
# ------------------------------------------------------------------

def _search(kind: str, start: datetime, end: datetime) -> List[Dict[str, Any]]:
    """Search issues/PRs authored by the user and created inside the window."""
    username = config.get_settings().github_username
    query = f"author:{username} type:{kind} created:{_search_time(start)}..{_search_time(end)}"
    try:
        data = _get("/search/issues", params={"q": query, "per_page": 100})
    except requests.RequestException as exc:
        logger.warning("GitHub search (type:%s) failed: %s", kind, exc)
        return []
    return data.get("items", [])


def fetch_pull_requests_for_day(start: datetime, end: datetime) -> List[PullRequest]:
    return [
        PullRequest(
            repo=_repo_from_api_url(item["repository_url"]),
            title=item["title"],
            number=item["number"],
            state=item["state"],
            url=item["html_url"],
            timestamp=_parse_timestamp(item["created_at"]),
        )
        for item in _search("pr", start, end)
    ]


def fetch_issues_for_day(start: datetime, end: datetime) -> List[Issue]:
    return [
        Issue(
            repo=_repo_from_api_url(item["repository_url"]),
            title=item["title"],
            number=item["number"],
            state=item["state"],
            url=item["html_url"],
            timestamp=_parse_timestamp(item["created_at"]),
        )
        for item in _search("issue", start, end)
    ]


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def fetch_github_activity(day: Optional[date] = None) -> ActivityData:
    """
    Fetch one day's GitHub activity for the configured user.

    Args:
        day: Local calendar day to collect (today in the configured zone if ``None``).

    Returns an ``ActivityData`` model that the analyzer consumes.
    """
    tz = report_timezone()
    if day is None:
        day = datetime.now(tz).date()
    start, end = day_window(day, tz)

    logger.info("Fetching GitHub activity for user=%s day=%s", config.get_settings().github_username, day)

    activity = ActivityData(
        date=day.isoformat(),
        commits=fetch_commits_for_day(start, end),
        pull_requests=fetch_pull_requests_for_day(start, end),
        issues=fetch_issues_for_day(start, end),
    )

    logger.info(
        "GitHub activity collected: %d commits, %d pull requests, %d issues",
        len(activity.commits),
        len(activity.pull_requests),
        len(activity.issues),
    )
    return activity
