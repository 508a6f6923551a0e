"""
Value objects produced by the activity analyzer.

An ``AnalysisResult`` is created fresh for every analysis run and handed to
the report service and the console summary; nothing holds on to it.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Dict, List, Optional

from pydantic import BaseModel, Field

from daily_tracker.models.activity_models import ActivityRecord, Commit

TaggedRecord = Annotated[ActivityRecord, Field(discriminator="kind")]


class CommitCategory(str, Enum):
    FEATURE = "feature"
    FIX = "fix"
    REFACTOR = "refactor"
    DOCS = "docs"
    STYLE = "style"
    TEST = "test"
    CHORE = "chore"
    CONFIG = "config"
    OTHER = "other"


class ImpactLevel(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ProductivityLevel(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TimeBucket(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"
    NIGHT = "night"


class ActivitySummary(BaseModel):
    """Headline counts for the day."""

    total_commits: int = 0
    total_pull_requests: int = 0
    total_issues: int = 0
    repositories_worked_on: List[str] = Field(default_factory=list)
    first_activity: Optional[TaggedRecord] = None
    last_activity: Optional[TaggedRecord] = None


class DetailedCommit(Commit):
    """A commit enriched with its computed category and impact."""

    category: CommitCategory
    impact: ImpactLevel


class CommitAnalysis(BaseModel):
    by_category: Dict[str, int] = Field(default_factory=dict)
    by_repository: Dict[str, int] = Field(default_factory=dict)
    detailed_commits: List[DetailedCommit] = Field(default_factory=list)


class ProductivityBreakdown(BaseModel):
    commits: int = 0
    pull_requests: int = 0
    issues: int = 0


class Productivity(BaseModel):
    score: int = 0
    level: ProductivityLevel = ProductivityLevel.NONE
    breakdown: ProductivityBreakdown = Field(default_factory=ProductivityBreakdown)


class TimeDistribution(BaseModel):
    """Activity counts per local time-of-day bucket."""

    morning: int = 0
    afternoon: int = 0
    evening: int = 0
    night: int = 0

    @property
    def total(self) -> int:
        return self.morning + self.afternoon + self.evening + self.night


class AnalysisResult(BaseModel):
    summary: ActivitySummary
    commit_analysis: CommitAnalysis
    productivity: Productivity
    time_distribution: TimeDistribution
    recommendations: List[str] = Field(default_factory=list)
