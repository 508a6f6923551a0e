"""
Tests for the interactive prompts: ``typer.prompt`` / ``typer.confirm``
are patched with scripted answers.
"""

from unittest.mock import MagicMock, patch

from daily_tracker.models.activity_models import TIME_CATEGORIES
from daily_tracker.services import interactive_service


class TestCollectors:
    """Verify each collector turns answers into models."""

    @patch("daily_tracker.services.interactive_service.typer.prompt")
    def test_time_allocation(self, mock_prompt: MagicMock) -> None:
        mock_prompt.side_effect = [5.0, 1.5] + [0.0] * (len(TIME_CATEGORIES) - 2)

        allocation = interactive_service.collect_time_allocation()

        assert list(allocation) == TIME_CATEGORIES
        assert allocation["Development"] == 5.0
        assert sum(allocation.values()) == 6.5

    @patch("daily_tracker.services.interactive_service.typer.confirm", return_value=False)
    def test_no_code_reviews(self, mock_confirm: MagicMock) -> None:
        reviews = interactive_service.collect_code_reviews()
        assert reviews.participated is False
        assert reviews.reviews == []

    @patch("daily_tracker.services.interactive_service.typer.confirm")
    @patch("daily_tracker.services.interactive_service.typer.prompt")
    def test_code_review_loop(self, mock_prompt: MagicMock, mock_confirm: MagicMock) -> None:
        mock_confirm.side_effect = [True, True, False]
        mock_prompt.side_effect = [
            "My PR was reviewed", "org/api#3", "Approved",
            "Other", "pairing on parser", "In progress",
        ]

        reviews = interactive_service.collect_code_reviews()

        assert reviews.participated is True
        assert [r.description for r in reviews.reviews] == ["org/api#3", "pairing on parser"]
        assert reviews.reviews[1].outcome == "In progress"

    @patch("daily_tracker.services.interactive_service.typer.confirm")
    @patch("daily_tracker.services.interactive_service.typer.prompt")
    def test_blocker_requires_description(self, mock_prompt: MagicMock, mock_confirm: MagicMock) -> None:
        mock_confirm.side_effect = [True, False]
        mock_prompt.side_effect = ["Knowledge gap", "   ", "New ORM API", "Need help", ""]

        blockers = interactive_service.collect_blockers()

        assert blockers.had_blockers is True
        assert blockers.blockers[0].description == "New ORM API"
        assert blockers.blockers[0].next_steps == ""

    @patch("daily_tracker.services.interactive_service.typer.confirm")
    @patch("daily_tracker.services.interactive_service.typer.prompt")
    def test_tomorrow_plans(self, mock_prompt: MagicMock, mock_confirm: MagicMock) -> None:
        mock_confirm.side_effect = [True, False]
        mock_prompt.side_effect = [
            "Finish caching PR", "high", "3",
            "Write docs", "Low", "soon",
        ]

        plans = interactive_service.collect_tomorrow_plans()

        assert plans[0].priority == "High"
        assert plans[0].estimated_hours == 3.0
        assert plans[1].task == "Write docs"
        assert plans[1].estimated_hours is None


class TestParseHours:
    def test_values(self) -> None:
        assert interactive_service._parse_hours("2.5") == 2.5
        assert interactive_service._parse_hours("") is None
        assert interactive_service._parse_hours("-1") is None
