"""
Scheduler — runs the daily report pipeline.

``run_daily_report`` is the whole pipeline (fetch → analyze → prompt →
render → save → push). ``start_scheduler`` wraps it in APScheduler's
``BlockingScheduler`` with a daily cron trigger at the configured time.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

import typer
from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from daily_tracker import config
from daily_tracker.logger import get_logger
from daily_tracker.models.activity_models import ManualData
from daily_tracker.models.analysis_models import AnalysisResult
from daily_tracker.services import (
    analyzer_service,
    git_service,
    github_service,
    interactive_service,
    report_service,
)
from daily_tracker.services.report_service import SavedReport

logger = get_logger(__name__)

_JOB_ID = "daily_report"


def print_summary(analysis: AnalysisResult, saved: SavedReport) -> None:
    """Console highlights shown after a report is written."""
    summary = analysis.summary
    typer.secho("Daily report generated successfully!", fg=typer.colors.GREEN, bold=True)
    typer.echo("\nSummary:")
    for line in (
        f"{summary.total_commits} commits",
        f"{summary.total_pull_requests} pull requests",
        f"{summary.total_issues} issues",
        f"{len(summary.repositories_worked_on)} repositories",
        f"Productivity: {analysis.productivity.level.value.upper()}",
    ):
        typer.secho(f"  • {line}", fg=typer.colors.CYAN)

    typer.echo("\nReport saved to:")
    for path in saved.paths.values():
        typer.secho(f"  • {path}", dim=True)


def print_recommendations(analysis: AnalysisResult) -> None:
    if not analysis.recommendations:
        return
    typer.echo("\nRecommendations:")
    for rec in analysis.recommendations:
        typer.secho(f"  • {rec}", fg=typer.colors.YELLOW)


def run_daily_report(day: Optional[date] = None, interactive: bool = True) -> Optional[SavedReport]:
    """
    Execute the full daily pipeline synchronously:

    1. Fetch the day's GitHub activity.
    2. Stop early when there is nothing to report.
    3. Analyze the activity.
    4. Optionally collect manual notes.
    5. Render and save the report.
    6. Commit and push it when git integration is configured.

    Returns:
        The saved report paths, or ``None`` if there was no activity.
    """
    settings = config.get_settings()
    tz = github_service.report_timezone()
    if day is None:
        day = datetime.now(tz).date()

    logger.info("=== Daily report pipeline started for %s ===", day)
    typer.secho(f"Generating report for {day:%a %b %d %Y}...", fg=typer.colors.BLUE)

    activity = github_service.fetch_github_activity(day)
    if activity.total_activity == 0:
        logger.warning("No activity found for %s; skipping report", day)
        typer.secho("No activity found for this day.", fg=typer.colors.YELLOW)
        return None

    analysis = analyzer_service.analyze_activity(activity, tz)

    manual: Optional[ManualData] = None
    if interactive and interactive_service.ask_for_manual_input():
        manual = interactive_service.collect_manual_input()

    report = report_service.generate_report(activity, analysis, manual, tz=tz)
    saved = report_service.save_report(report, day, settings.report_dir, settings.report_formats)

    print_summary(analysis, saved)

    if git_service.is_git_integration_configured():
        typer.secho("\nGit integration enabled...", dim=True)
        if not git_service.commit_and_push_report(saved.markdown, day):
            typer.secho("You can manually commit the report later", fg=typer.colors.YELLOW)

    print_recommendations(analysis)

    logger.info("=== Daily report pipeline completed: %s ===", saved.markdown)
    return saved


def _scheduled_report_job() -> None:
    """Wrapper called by APScheduler's cron trigger."""
    try:
        run_daily_report(interactive=False)
    except Exception:
        logger.exception("Unhandled error in scheduled report job")


def build_scheduler() -> BlockingScheduler:
    """Create a scheduler with the daily job registered at the configured time."""
    settings = config.get_settings()
    scheduler = BlockingScheduler(timezone=settings.timezone)
    trigger = CronTrigger(
        hour=settings.report_hour,
        minute=settings.report_minute,
        timezone=settings.timezone,
    )
    scheduler.add_job(
        _scheduled_report_job,
        trigger=trigger,
        id=_JOB_ID,
        name="Daily Report",
        replace_existing=True,
        misfire_grace_time=3600,  # allow up to 1 h late if the machine was asleep
    )
    return scheduler


def is_past_report_time(now: datetime) -> bool:
    settings = config.get_settings()
    return (now.hour, now.minute) >= (settings.report_hour, settings.report_minute)


def start_scheduler(run_now_if_late: bool = True) -> None:
    """
    Start automated daily reporting and block until interrupted.

    When started after today's report time, today's report is generated
    immediately so the day is not skipped.
    """
    settings = config.get_settings()
    scheduler = build_scheduler()

    typer.secho("Starting automated daily reporting...", fg=typer.colors.BLUE, bold=True)
    typer.secho(
        f"Reports will be generated automatically at "
        f"{settings.report_hour:02d}:{settings.report_minute:02d} ({settings.timezone}) every day.",
        dim=True,
    )

    if run_now_if_late and is_past_report_time(datetime.now(github_service.report_timezone())):
        typer.secho("Generating today's report now...", fg=typer.colors.YELLOW)
        _scheduled_report_job()

    typer.secho("Scheduler started. Press Ctrl+C to stop.", fg=typer.colors.GREEN)
    logger.info(
        "Scheduler started; report runs daily at %02d:%02d %s",
        settings.report_hour,
        settings.report_minute,
        settings.timezone,
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        typer.secho("\nStopping scheduler...", fg=typer.colors.YELLOW)
        logger.info("Scheduler stopped")
