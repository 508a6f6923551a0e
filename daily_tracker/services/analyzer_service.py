"""
Analyzer Service — classifies and scores a day of GitHub activity.

Everything here is a pure function of the ``ActivityData`` it receives:
no I/O, no clock reads, no module state beyond the constant pattern table.
Running ``analyze_activity`` twice on the same input yields equal results.
"""

from __future__ import annotations

import re
from datetime import datetime, tzinfo
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

from daily_tracker.logger import get_logger
from daily_tracker.models.activity_models import ActivityData, ActivityRecord, Commit
from daily_tracker.models.analysis_models import (
    ActivitySummary,
    AnalysisResult,
    CommitAnalysis,
    CommitCategory,
    DetailedCommit,
    ImpactLevel,
    Productivity,
    ProductivityBreakdown,
    ProductivityLevel,
    TimeBucket,
    TimeDistribution,
)

logger = get_logger(__name__)

# Tested in this order; the first match wins.
_COMMIT_PATTERNS: Tuple[Tuple[CommitCategory, Pattern[str]], ...] = (
    (CommitCategory.FEATURE, re.compile(r"^(feat|feature|add|implement)", re.IGNORECASE)),
    (CommitCategory.FIX, re.compile(r"^(fix|bug|hotfix|patch)", re.IGNORECASE)),
    (CommitCategory.REFACTOR, re.compile(r"^(refactor|restructure|optimize)", re.IGNORECASE)),
    (CommitCategory.DOCS, re.compile(r"^(docs|doc|documentation)", re.IGNORECASE)),
    (CommitCategory.STYLE, re.compile(r"^(style|format|lint)", re.IGNORECASE)),
    (CommitCategory.TEST, re.compile(r"^(test|spec|testing)", re.IGNORECASE)),
    (CommitCategory.CHORE, re.compile(r"^(chore|maintenance|update|upgrade)", re.IGNORECASE)),
    (CommitCategory.CONFIG, re.compile(r"^(config|setup|env)", re.IGNORECASE)),
)

COMMIT_WEIGHT = 2
PULL_REQUEST_WEIGHT = 5
ISSUE_WEIGHT = 3

HIGH_PRODUCTIVITY_SCORE = 20
MEDIUM_PRODUCTIVITY_SCORE = 10

MANY_COMMITS_THRESHOLD = 10

RECOMMEND_START_TRACKING = (
    "Consider making some commits or opening pull requests to track your progress."
)
RECOMMEND_GROUP_COMMITS = (
    "Great commit activity! Consider grouping related changes into fewer, more meaningful commits."
)
RECOMMEND_OPEN_PRS = (
    "You have commits but no pull requests. Consider creating PRs to get code reviews."
)
RECOMMEND_DIVERSIFY = "Consider diversifying your work - mix features, fixes, and refactoring."


# ------------------------------------------------------------------
# Commits
# ------------------------------------------------------------------

def categorize_commit(message: str) -> CommitCategory:
    """Classify a commit by the conventional keyword its message starts with."""
    for category, pattern in _COMMIT_PATTERNS:
        if pattern.match(message):
            return category
    return CommitCategory.OTHER


def assess_commit_impact(message: str) -> ImpactLevel:
    """
    Estimate how significant a commit is from its message.

    Keywords on the first line decide first (breaking beats minor beats fix);
    without any keyword, long or multi-paragraph messages count as medium.
    """
    lines = message.split("\n")
    first_line = lines[0].lower()

    if "major" in first_line or "breaking" in first_line:
        return ImpactLevel.HIGH
    if "minor" in first_line or "enhancement" in first_line:
        return ImpactLevel.MEDIUM
    if "patch" in first_line or "fix" in first_line:
        return ImpactLevel.LOW

    if len(lines) > 3 or len(first_line) > 50:
        return ImpactLevel.MEDIUM
    return ImpactLevel.LOW


def analyze_commits(commits: Sequence[Commit]) -> CommitAnalysis:
    """Histogram commits by category and repository and enrich each one."""
    by_category: Dict[str, int] = {}
    by_repository: Dict[str, int] = {}
    detailed: List[DetailedCommit] = []

    for commit in commits:
        category = categorize_commit(commit.message)
        by_category[category.value] = by_category.get(category.value, 0) + 1
        by_repository[commit.repo] = by_repository.get(commit.repo, 0) + 1
        detailed.append(
            DetailedCommit(
                **commit.model_dump(),
                category=category,
                impact=assess_commit_impact(commit.message),
            )
        )

    return CommitAnalysis(
        by_category=by_category,
        by_repository=by_repository,
        detailed_commits=detailed,
    )


# ------------------------------------------------------------------
# Scoring
# ------------------------------------------------------------------

def productivity_level(score: int) -> ProductivityLevel:
    if score >= HIGH_PRODUCTIVITY_SCORE:
        return ProductivityLevel.HIGH
    if score >= MEDIUM_PRODUCTIVITY_SCORE:
        return ProductivityLevel.MEDIUM
    if score > 0:
        return ProductivityLevel.LOW
    return ProductivityLevel.NONE


def calculate_productivity(activity: ActivityData) -> Productivity:
    """Weighted score over the day's counts; pull requests weigh most."""
    breakdown = ProductivityBreakdown(
        commits=len(activity.commits) * COMMIT_WEIGHT,
        pull_requests=len(activity.pull_requests) * PULL_REQUEST_WEIGHT,
        issues=len(activity.issues) * ISSUE_WEIGHT,
    )
    score = breakdown.commits + breakdown.pull_requests + breakdown.issues

    return Productivity(score=score, level=productivity_level(score), breakdown=breakdown)


# ------------------------------------------------------------------
# Time of day
# ------------------------------------------------------------------

def bucket_for_hour(hour: int) -> TimeBucket:
    if 6 <= hour < 12:
        return TimeBucket.MORNING
    if 12 <= hour < 18:
        return TimeBucket.AFTERNOON
    if 18 <= hour < 22:
        return TimeBucket.EVENING
    return TimeBucket.NIGHT


def local_hour(timestamp: datetime, tz: Optional[tzinfo] = None) -> int:
    """
    Hour of *timestamp* in local time.

    Naive timestamps are taken as already local. Aware ones are converted to
    *tz*, or to the host's zone when *tz* is ``None``.
    """
    if timestamp.tzinfo is None:
        return timestamp.hour
    return timestamp.astimezone(tz).hour


def analyze_time_distribution(activity: ActivityData, tz: Optional[tzinfo] = None) -> TimeDistribution:
    """Count every commit, PR and issue into exactly one time-of-day bucket."""
    counts: Dict[str, int] = {bucket.value: 0 for bucket in TimeBucket}

    for record in activity.all_activities():
        bucket = bucket_for_hour(local_hour(record.timestamp, tz))
        counts[bucket.value] += 1

    return TimeDistribution(**counts)


# ------------------------------------------------------------------
# Recommendations
# ------------------------------------------------------------------

def generate_recommendations(activity: ActivityData) -> List[str]:
    recommendations: List[str] = []
    commit_count = len(activity.commits)
    pr_count = len(activity.pull_requests)

    if commit_count == 0 and pr_count == 0:
        recommendations.append(RECOMMEND_START_TRACKING)

    if commit_count > MANY_COMMITS_THRESHOLD:
        recommendations.append(RECOMMEND_GROUP_COMMITS)

    if pr_count == 0 and commit_count > 0:
        recommendations.append(RECOMMEND_OPEN_PRS)

    if len(analyze_commits(activity.commits).by_category) == 1:
        recommendations.append(RECOMMEND_DIVERSIFY)

    return recommendations


# ------------------------------------------------------------------
# Summary
# ------------------------------------------------------------------

def _instant(timestamp: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Comparable aware value; naive timestamps are local to *tz* (host zone if ``None``)."""
    if timestamp.tzinfo is not None:
        return timestamp
    if tz is None:
        return timestamp.astimezone()
    return timestamp.replace(tzinfo=tz)


def get_first_activity(activity: ActivityData, tz: Optional[tzinfo] = None) -> Optional[ActivityRecord]:
    """Earliest record; on equal timestamps the one encountered first wins."""
    earliest: Optional[ActivityRecord] = None
    for record in activity.all_activities():
        if earliest is None or _instant(record.timestamp, tz) < _instant(earliest.timestamp, tz):
            earliest = record
    return earliest


def get_last_activity(activity: ActivityData, tz: Optional[tzinfo] = None) -> Optional[ActivityRecord]:
    """Latest record; on equal timestamps the one encountered first wins."""
    latest: Optional[ActivityRecord] = None
    for record in activity.all_activities():
        if latest is None or _instant(record.timestamp, tz) > _instant(latest.timestamp, tz):
            latest = record
    return latest


def generate_summary(activity: ActivityData, tz: Optional[tzinfo] = None) -> ActivitySummary:
    repos = dict.fromkeys(record.repo for record in activity.all_activities())

    return ActivitySummary(
        total_commits=len(activity.commits),
        total_pull_requests=len(activity.pull_requests),
        total_issues=len(activity.issues),
        repositories_worked_on=list(repos),
        first_activity=get_first_activity(activity, tz),
        last_activity=get_last_activity(activity, tz),
    )


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def analyze_activity(activity: ActivityData, tz: Optional[tzinfo] = None) -> AnalysisResult:
    """
    Produce the full analysis for one day of activity.

    Args:
        activity: The day's commits, pull requests and issues.
        tz:       Zone used for time-of-day bucketing (host zone if ``None``).

    Returns:
        A new ``AnalysisResult``; *activity* is left untouched.
    """
    result = AnalysisResult(
        summary=generate_summary(activity, tz),
        commit_analysis=analyze_commits(activity.commits),
        productivity=calculate_productivity(activity),
        time_distribution=analyze_time_distribution(activity, tz),
        recommendations=generate_recommendations(activity),
    )

    logger.debug(
        "Analyzed %s: %d activities, productivity=%s (%d)",
        activity.date,
        activity.total_activity,
        result.productivity.level.value,
        result.productivity.score,
    )
    return result
