"""
Report Service — renders an analysed day as Markdown, JSON and plain text.

The Markdown report is the primary artefact (it is what gets committed to
the shared repository); JSON carries the full activity and analysis for
tooling; the plain-text variant is a compact summary for terminals and mail.
"""

from __future__ import annotations

import json
from collections import defaultdict
from datetime import date, datetime, tzinfo
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel

from daily_tracker.logger import get_logger
from daily_tracker.models.activity_models import ActivityData, Commit, ManualData
from daily_tracker.models.analysis_models import AnalysisResult

logger = get_logger(__name__)

_APP_NAME = "Daily Tracker"

REPORT_EXTENSIONS: Dict[str, str] = {
    "markdown": "md",
    "json": "json",
    "text": "txt",
}

_CATEGORY_EMOJI = {
    "feature": "✨",
    "fix": "🐛",
    "refactor": "♻️",
    "docs": "📚",
    "style": "💄",
    "test": "🧪",
    "chore": "🔧",
    "config": "⚙️",
    "other": "📝",
}

_PERIOD_EMOJI = {
    "morning": "🌅",
    "afternoon": "☀️",
    "evening": "🌆",
    "night": "🌙",
}


class Report(BaseModel):
    """The three renditions of one daily report."""

    date: str
    markdown: str
    json_document: str
    text: str

    def render(self, fmt: str) -> str:
        return {"markdown": self.markdown, "json": self.json_document, "text": self.text}[fmt]


class SavedReport(BaseModel):
    """Files written by ``save_report``, keyed by format name."""

    paths: Dict[str, Path]

    @property
    def markdown(self) -> Path:
        return self.paths["markdown"]


def category_emoji(category: str) -> str:
    return _CATEGORY_EMOJI.get(category, "📝")


def period_emoji(period: str) -> str:
    return _PERIOD_EMOJI.get(period, "⏰")


def _clock(moment: datetime, tz: Optional[tzinfo]) -> str:
    if moment.tzinfo is not None:
        moment = moment.astimezone(tz)
    return moment.strftime("%H:%M:%S")


def _long_date(iso_date: str) -> str:
    d = date.fromisoformat(iso_date)
    return f"{d:%A}, {d:%B} {d.day}, {d.year}"


def _hours(value: float) -> str:
    return f"{value:g}"


# ------------------------------------------------------------------
# Markdown
# ------------------------------------------------------------------

def _markdown_commits(commits: List[Commit], analysis: AnalysisResult, tz: Optional[tzinfo]) -> List[str]:
    lines = [f"## 💻 Commits ({len(commits)})", ""]

    by_repo: Dict[str, List[int]] = defaultdict(list)
    for index, commit in enumerate(commits):
        by_repo[commit.repo].append(index)

    detailed = analysis.commit_analysis.detailed_commits
    for repo, indexes in by_repo.items():
        lines += [f"### {repo}", ""]
        for index in indexes:
            commit = commits[index]
            category = detailed[index].category.value if index < len(detailed) else "other"
            lines.append(
                f"- **[{commit.sha}]({commit.url})** ({_clock(commit.timestamp, tz)}) "
                f"[{category}] {commit.first_line}"
            )
        lines.append("")
    return lines


def _markdown_pull_requests(activity: ActivityData, tz: Optional[tzinfo]) -> List[str]:
    lines = [f"## 🔄 Pull Requests ({len(activity.pull_requests)})", ""]
    for pr in activity.pull_requests:
        status = {"open": "🟡", "closed": "🔴"}.get(pr.state, "🟢")
        lines.append(f"- {status} **[#{pr.number}]({pr.url})** ({_clock(pr.timestamp, tz)}) {pr.title}")
        lines.append(f"  - Repository: {pr.repo}")
    lines.append("")
    return lines


def _markdown_issues(activity: ActivityData, tz: Optional[tzinfo]) -> List[str]:
    lines = [f"## 🐛 Issues ({len(activity.issues)})", ""]
    for issue in activity.issues:
        status = "🟡" if issue.state == "open" else "🟢"
        lines.append(f"- {status} **[#{issue.number}]({issue.url})** ({_clock(issue.timestamp, tz)}) {issue.title}")
        lines.append(f"  - Repository: {issue.repo}")
    lines.append("")
    return lines


def _markdown_analysis(analysis: AnalysisResult) -> List[str]:
    lines = ["## 📈 Analysis", ""]

    if analysis.commit_analysis.by_category:
        lines += ["### Commit Categories", ""]
        for category, count in analysis.commit_analysis.by_category.items():
            lines.append(f"- {category_emoji(category)} **{category.capitalize()}:** {count}")
        lines.append("")

    lines += ["### Time Distribution", ""]
    for period, count in analysis.time_distribution.model_dump().items():
        if count > 0:
            lines.append(f"- {period_emoji(period)} **{period.capitalize()}:** {count} activities")
    lines.append("")
    return lines


def _markdown_manual(manual: ManualData) -> List[str]:
    lines: List[str] = []

    spent = {category: hours for category, hours in manual.time_allocation.items() if hours > 0}
    if spent:
        lines += ["## ⏰ Time Allocation", ""]
        for category, hours in spent.items():
            lines.append(f"- **{category}:** {_hours(hours)}h")
        lines += [f"- **Total:** {_hours(manual.total_hours)}h", ""]

    if manual.code_reviews.participated and manual.code_reviews.reviews:
        lines += ["## 🔍 Code Reviews", ""]
        for review in manual.code_reviews.reviews:
            lines.append(f"- **{review.type}:** {review.description} ({review.outcome})")
        lines.append("")

    if manual.blockers.had_blockers and manual.blockers.blockers:
        lines += ["## 🚧 Blockers & Challenges", ""]
        for blocker in manual.blockers.blockers:
            lines.append(f"- **{blocker.type}** [{blocker.status}]: {blocker.description}")
            if blocker.next_steps:
                lines.append(f"  - Next steps: {blocker.next_steps}")
        lines.append("")

    if manual.tomorrow_plans:
        lines += ["## 📅 Tomorrow's Plans", ""]
        for plan in manual.tomorrow_plans:
            estimate = f" (~{_hours(plan.estimated_hours)}h)" if plan.estimated_hours is not None else ""
            lines.append(f"- [{plan.priority}] {plan.task}{estimate}")
        lines.append("")

    return lines


def generate_markdown_report(
    activity: ActivityData,
    analysis: AnalysisResult,
    manual: Optional[ManualData],
    generated_at: datetime,
    tz: Optional[tzinfo] = None,
) -> str:
    summary = analysis.summary
    lines = [f"# Daily Progress Report - {_long_date(activity.date)}", ""]

    lines += [
        "## 📊 Summary",
        "",
        f"- **Total Commits:** {summary.total_commits}",
        f"- **Pull Requests:** {summary.total_pull_requests}",
        f"- **Issues:** {summary.total_issues}",
        f"- **Repositories:** {len(summary.repositories_worked_on)}",
        f"- **Productivity Level:** {analysis.productivity.level.value.upper()} "
        f"(Score: {analysis.productivity.score})",
    ]
    if summary.first_activity is not None and summary.last_activity is not None:
        start = _clock(summary.first_activity.timestamp, tz)
        end = _clock(summary.last_activity.timestamp, tz)
        lines.append(f"- **Active Period:** {start} - {end}")
    lines.append("")

    if activity.commits:
        lines += _markdown_commits(activity.commits, analysis, tz)
    if activity.pull_requests:
        lines += _markdown_pull_requests(activity, tz)
    if activity.issues:
        lines += _markdown_issues(activity, tz)

    lines += _markdown_analysis(analysis)

    if manual is not None:
        lines += _markdown_manual(manual)

    if analysis.recommendations:
        lines += ["## 💡 Recommendations", ""]
        lines += [f"- {rec}" for rec in analysis.recommendations]
        lines.append("")

    lines += ["---", f"*Report generated on {generated_at:%Y-%m-%d %H:%M:%S} by {_APP_NAME}*", ""]
    return "\n".join(lines)


# ------------------------------------------------------------------
# JSON & text
# ------------------------------------------------------------------

def generate_json_report(
    activity: ActivityData,
    analysis: AnalysisResult,
    manual: Optional[ManualData],
    generated_at: datetime,
) -> str:
    payload = {
        "date": activity.date,
        "generated": generated_at.isoformat(),
        "activity": activity.model_dump(mode="json"),
        "analysis": analysis.model_dump(mode="json"),
        "manual": manual.model_dump(mode="json") if manual is not None else None,
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)


def generate_text_report(activity: ActivityData, analysis: AnalysisResult) -> str:
    summary = analysis.summary
    lines = [
        f"DAILY PROGRESS REPORT - {activity.date}",
        "=" * 50,
        "",
        "SUMMARY:",
        f"- Commits: {summary.total_commits}",
        f"- Pull Requests: {summary.total_pull_requests}",
        f"- Issues: {summary.total_issues}",
        f"- Repositories: {len(summary.repositories_worked_on)}",
        f"- Productivity: {analysis.productivity.level.value.upper()}",
        "",
    ]

    if activity.commits:
        lines.append("COMMITS:")
        lines += [f"- [{c.sha}] {c.first_line} ({c.repo})" for c in activity.commits]
        lines.append("")

    if activity.pull_requests:
        lines.append("PULL REQUESTS:")
        lines += [f"- #{pr.number}: {pr.title} ({pr.repo}) [{pr.state}]" for pr in activity.pull_requests]
        lines.append("")

    return "\n".join(lines)


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def generate_report(
    activity: ActivityData,
    analysis: AnalysisResult,
    manual: Optional[ManualData] = None,
    generated_at: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> Report:
    """
    Render all report formats for one day.

    Args:
        activity:     The raw activity the analysis was computed from.
        analysis:     Output of ``analyze_activity``.
        manual:       Optional notes from the interactive prompts.
        generated_at: Timestamp for the footer (now, in *tz*, if omitted).
        tz:           Zone used to print clock times.
    """
    if generated_at is None:
        generated_at = datetime.now(tz)

    logger.info("Generating report for %s", activity.date)

    return Report(
        date=activity.date,
        markdown=generate_markdown_report(activity, analysis, manual, generated_at, tz),
        json_document=generate_json_report(activity, analysis, manual, generated_at),
        text=generate_text_report(activity, analysis),
    )


def save_report(report: Report, day: date, report_dir: Path, formats: Iterable[str] = ("markdown",)) -> SavedReport:
    """
    Write the report to ``<report_dir>/<YYYY-MM-DD>-report.<ext>``.

    Markdown is always written; ``json`` and ``text`` are added when listed
    in *formats*. Unknown format names are ignored with a warning.
    """
    report_dir = Path(report_dir).expanduser()
    report_dir.mkdir(parents=True, exist_ok=True)

    wanted = {"markdown"}
    for fmt in formats:
        name = fmt.strip().lower()
        if name in REPORT_EXTENSIONS:
            wanted.add(name)
        else:
            logger.warning("Ignoring unknown report format %r", fmt)

    paths: Dict[str, Path] = {}
    for fmt in REPORT_EXTENSIONS:
        if fmt not in wanted:
            continue
        path = report_dir / f"{day.isoformat()}-report.{REPORT_EXTENSIONS[fmt]}"
        path.write_text(report.render(fmt), encoding="utf-8")
        paths[fmt] = path
        logger.debug("Wrote %s report to %s", fmt, path)

    return SavedReport(paths=paths)
