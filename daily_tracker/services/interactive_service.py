"""
Interactive Service — asks the user for the parts of the day GitHub can't see.

Collects time allocation, code reviews, blockers and tomorrow's plans
through terminal prompts and returns them as a ``ManualData`` model.
"""

from __future__ import annotations

from typing import Dict, List

import click
import typer

from daily_tracker.logger import get_logger
from daily_tracker.models.activity_models import (
    TIME_CATEGORIES,
    Blocker,
    Blockers,
    CodeReview,
    CodeReviews,
    ManualData,
    PlannedTask,
)

logger = get_logger(__name__)

_LONG_DAY_HOURS = 12

REVIEW_TYPES = [
    "Reviewed someone else's PR",
    "My PR was reviewed",
    "Pair programming/Live review",
    "Other",
]
REVIEW_OUTCOMES = ["Approved", "Requested changes", "In progress", "Merged", "Other"]

BLOCKER_TYPES = [
    "Technical issue",
    "Waiting for review/approval",
    "External dependency",
    "Unclear requirements",
    "Environment/tooling issue",
    "Knowledge gap",
    "Other",
]
BLOCKER_STATUSES = ["Resolved", "In progress", "Need help", "Escalated", "Waiting"]

PRIORITIES = ["High", "Medium", "Low"]


def _required_text(message: str) -> str:
    """Prompt until a non-blank answer is given."""
    while True:
        value = typer.prompt(message).strip()
        if value:
            return value
        typer.secho("Please enter a value.", fg=typer.colors.RED)


def _choice(message: str, choices: List[str], default: str | None = None) -> str:
    return typer.prompt(message, type=click.Choice(choices, case_sensitive=False), default=default)


# ------------------------------------------------------------------
# Collectors
# ------------------------------------------------------------------

def collect_time_allocation() -> Dict[str, float]:
    typer.secho("\nTime Allocation (in hours)", fg=typer.colors.CYAN)
    typer.secho("Enter approximate hours spent on each activity today:\n", dim=True)

    allocation: Dict[str, float] = {}
    for category in TIME_CATEGORIES:
        allocation[category] = typer.prompt(f"{category}", default=0.0, type=click.FloatRange(0, 24))

    total_hours = sum(allocation.values())
    if total_hours > 0:
        typer.secho(f"\nTotal tracked time: {total_hours:.1f} hours", dim=True)
        if total_hours > _LONG_DAY_HOURS:
            typer.secho("That's a lot of work! Make sure to take breaks.", fg=typer.colors.YELLOW)

    return allocation


def collect_code_reviews() -> CodeReviews:
    typer.secho("\nCode Reviews & Reviews Given", fg=typer.colors.CYAN)

    if not typer.confirm("Did you participate in any code reviews today?", default=False):
        return CodeReviews(participated=False)

    reviews: List[CodeReview] = []
    add_more = True
    while add_more:
        reviews.append(
            CodeReview(
                type=_choice("Type of review", REVIEW_TYPES),
                description=_required_text("Brief description (repo/PR name, what was reviewed)"),
                outcome=_choice("Outcome", REVIEW_OUTCOMES),
            )
        )
        add_more = typer.confirm("Add another code review?", default=False)

    return CodeReviews(participated=True, reviews=reviews)


def collect_blockers() -> Blockers:
    typer.secho("\nBlockers & Challenges", fg=typer.colors.CYAN)

    if not typer.confirm("Did you encounter any blockers or challenges today?", default=False):
        return Blockers(had_blockers=False)

    blockers: List[Blocker] = []
    add_more = True
    while add_more:
        blockers.append(
            Blocker(
                type=_choice("Type of blocker", BLOCKER_TYPES),
                description=_required_text("Describe the blocker"),
                status=_choice("Current status", BLOCKER_STATUSES),
                next_steps=typer.prompt("Next steps to resolve (optional)", default="", show_default=False),
            )
        )
        add_more = typer.confirm("Add another blocker?", default=False)

    return Blockers(had_blockers=True, blockers=blockers)


def _parse_hours(raw: str) -> float | None:
    try:
        hours = float(raw)
    except ValueError:
        return None
    return hours if hours >= 0 else None


def collect_tomorrow_plans() -> List[PlannedTask]:
    typer.secho("\nTomorrow's Plans", fg=typer.colors.CYAN)
    typer.secho("Add your planned tasks for tomorrow:\n", dim=True)

    plans: List[PlannedTask] = []
    add_more = True
    while add_more:
        task = _required_text("Planned task/goal")
        priority = _choice("Priority", PRIORITIES, default="Medium").capitalize()
        raw_hours = typer.prompt("Estimated time (hours, optional)", default="", show_default=False)
        plans.append(PlannedTask(task=task, priority=priority, estimated_hours=_parse_hours(raw_hours)))
        add_more = typer.confirm("Add another planned task?", default=True)

    return plans


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def ask_for_manual_input() -> bool:
    typer.secho("\nWould you like to add manual details to your report?", fg=typer.colors.BLUE)
    typer.secho("This includes time allocation, code reviews, blockers, and tomorrow's plans.\n", dim=True)
    return typer.confirm("Add manual details?", default=True)


def collect_manual_input() -> ManualData:
    """Run every collector in turn and bundle the answers."""
    typer.secho("\nLet's add some manual details to your report!\n", fg=typer.colors.BLUE)

    manual = ManualData(
        time_allocation=collect_time_allocation(),
        code_reviews=collect_code_reviews(),
        blockers=collect_blockers(),
        tomorrow_plans=collect_tomorrow_plans(),
    )
    logger.debug(
        "Manual input collected: %.1f h, %d reviews, %d blockers, %d plans",
        manual.total_hours,
        len(manual.code_reviews.reviews),
        len(manual.blockers.blockers),
        len(manual.tomorrow_plans),
    )
    return manual
