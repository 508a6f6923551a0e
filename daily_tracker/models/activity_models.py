"""
Domain models for a day of GitHub activity and the optional manual notes.

These Pydantic models define the structured data that flows between
services. They are intentionally decoupled from API response shapes so
the system is resilient to upstream schema changes. Records are frozen:
once the GitHub service produces them nothing downstream may mutate them.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------

class Commit(BaseModel):
    """A single commit authored by the tracked user."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["commit"] = "commit"
    repo: str = Field(..., description="Repository full name (owner/repo)")
    message: str = Field(..., description="Full commit message (may be multi-line)")
    sha: str = Field(..., description="Short commit SHA")
    url: str = Field(..., description="HTML URL to the commit on GitHub")
    timestamp: datetime = Field(..., description="Authoring timestamp (ISO-8601)")

    @property
    def first_line(self) -> str:
        return self.message.split("\n")[0]


class PullRequest(BaseModel):
    """A pull request opened by the tracked user."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["pull_request"] = "pull_request"
    repo: str = Field(..., description="Repository full name (owner/repo)")
    title: str = Field(..., description="PR title")
    number: int = Field(..., description="PR number within the repo")
    state: str = Field(..., description="open | closed | merged")
    url: str = Field(..., description="HTML URL to the PR")
    timestamp: datetime = Field(..., description="Creation timestamp (ISO-8601)")


class Issue(BaseModel):
    """An issue opened by the tracked user."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["issue"] = "issue"
    repo: str = Field(..., description="Repository full name (owner/repo)")
    title: str = Field(..., description="Issue title")
    number: int = Field(..., description="Issue number within the repo")
    state: str = Field(..., description="open | closed")
    url: str = Field(..., description="HTML URL to the issue")
    timestamp: datetime = Field(..., description="Creation timestamp (ISO-8601)")


ActivityRecord = Union[Commit, PullRequest, Issue]


class ActivityData(BaseModel):
    """Aggregated GitHub activity for a single day."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="ISO date string (YYYY-MM-DD)")
    commits: List[Commit] = Field(default_factory=list)
    pull_requests: List[PullRequest] = Field(default_factory=list)
    issues: List[Issue] = Field(default_factory=list)

    @property
    def total_activity(self) -> int:
        return len(self.commits) + len(self.pull_requests) + len(self.issues)

    def all_activities(self) -> List[ActivityRecord]:
        """Commits, then pull requests, then issues, each in input order."""
        return [*self.commits, *self.pull_requests, *self.issues]


# ---------------------------------------------------------------------------
# Manual notes
# ---------------------------------------------------------------------------

TIME_CATEGORIES: List[str] = [
    "Development",
    "Meetings",
    "Code Review",
    "Planning",
    "Testing",
    "Documentation",
    "Learning",
    "Other",
]


class CodeReview(BaseModel):
    """One review the user took part in."""

    type: str
    description: str
    outcome: str


class CodeReviews(BaseModel):
    participated: bool = False
    reviews: List[CodeReview] = Field(default_factory=list)


class Blocker(BaseModel):
    """Something that slowed the user down today."""

    type: str
    description: str
    status: str
    next_steps: str = ""


class Blockers(BaseModel):
    had_blockers: bool = False
    blockers: List[Blocker] = Field(default_factory=list)


class PlannedTask(BaseModel):
    """A task planned for the next working day."""

    task: str
    priority: Literal["High", "Medium", "Low"] = "Medium"
    estimated_hours: Optional[float] = Field(None, ge=0)


class ManualData(BaseModel):
    """User-supplied notes that accompany the generated report."""

    time_allocation: Dict[str, float] = Field(default_factory=dict)
    code_reviews: CodeReviews = Field(default_factory=CodeReviews)
    blockers: Blockers = Field(default_factory=Blockers)
    tomorrow_plans: List[PlannedTask] = Field(default_factory=list)

    @property
    def total_hours(self) -> float:
        return sum(self.time_allocation.values())
