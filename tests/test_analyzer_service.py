"""
Tests for the analyzer service: categorization, impact, scoring,
time-of-day buckets, recommendations and the composed analysis.
"""

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import make_commit, make_issue, make_pr
from daily_tracker.models.activity_models import ActivityData, Commit, PullRequest
from daily_tracker.models.analysis_models import (
    CommitCategory,
    ImpactLevel,
    ProductivityLevel,
    TimeBucket,
)
from daily_tracker.services import analyzer_service
from daily_tracker.services.analyzer_service import (
    analyze_activity,
    analyze_commits,
    analyze_time_distribution,
    assess_commit_impact,
    bucket_for_hour,
    calculate_productivity,
    categorize_commit,
    generate_recommendations,
    generate_summary,
)


def _day(commits=(), prs=(), issues=()) -> ActivityData:
    return ActivityData(date="2026-02-13", commits=list(commits), pull_requests=list(prs), issues=list(issues))


class TestCategorizeCommit:
    """Verify keyword-prefix classification."""

    @pytest.mark.parametrize(
        "message, expected",
        [
            ("feat: add login", CommitCategory.FEATURE),
            ("Implement OAuth flow", CommitCategory.FEATURE),
            ("fix: null pointer", CommitCategory.FIX),
            ("Hotfix for prod outage", CommitCategory.FIX),
            ("refactor(api): split handlers", CommitCategory.REFACTOR),
            ("Optimize query plan", CommitCategory.REFACTOR),
            ("docs: usage section", CommitCategory.DOCS),
            ("style: black", CommitCategory.STYLE),
            ("lint fixes", CommitCategory.STYLE),
            ("test: cover parser", CommitCategory.TEST),
            ("spec for billing", CommitCategory.TEST),
            ("chore: release 1.2", CommitCategory.CHORE),
            ("Upgrade Django", CommitCategory.CHORE),
            ("config: staging URLs", CommitCategory.CONFIG),
            ("env vars for CI", CommitCategory.CONFIG),
        ],
    )
    def test_known_prefixes(self, message: str, expected: CommitCategory) -> None:
        assert categorize_commit(message) == expected

    def test_unrecognized_prefix_is_other(self) -> None:
        assert categorize_commit("wip: experiment") == CommitCategory.OTHER

    def test_case_insensitive(self) -> None:
        assert categorize_commit("FEAT: shout") == CommitCategory.FEATURE

    def test_keyword_must_be_at_start(self) -> None:
        assert categorize_commit("Merge branch 'fix/login'") == CommitCategory.OTHER

    def test_earlier_category_wins(self) -> None:
        # Starts with a feature keyword, mentions tests and docs later.
        assert categorize_commit("Add tests and docs for parser") == CommitCategory.FEATURE
        assert categorize_commit("Fix test setup") == CommitCategory.FIX

    def test_pattern_table_order(self) -> None:
        order = [category for category, _ in analyzer_service._COMMIT_PATTERNS]
        assert order == [
            CommitCategory.FEATURE,
            CommitCategory.FIX,
            CommitCategory.REFACTOR,
            CommitCategory.DOCS,
            CommitCategory.STYLE,
            CommitCategory.TEST,
            CommitCategory.CHORE,
            CommitCategory.CONFIG,
        ]


class TestAssessCommitImpact:
    """Verify the short-circuit impact rules."""

    def test_breaking_is_high(self) -> None:
        assert assess_commit_impact("BREAKING: remove legacy API") == ImpactLevel.HIGH

    def test_major_is_high(self) -> None:
        assert assess_commit_impact("Major rewrite of the scheduler") == ImpactLevel.HIGH

    def test_fix_is_low(self) -> None:
        assert assess_commit_impact("fix: off-by-one") == ImpactLevel.LOW

    def test_enhancement_is_medium(self) -> None:
        assert assess_commit_impact("enhancement: nicer errors") == ImpactLevel.MEDIUM

    def test_breaking_beats_fix(self) -> None:
        assert assess_commit_impact("fix breaking change in parser") == ImpactLevel.HIGH

    def test_minor_beats_patch(self) -> None:
        assert assess_commit_impact("minor patch to config") == ImpactLevel.MEDIUM

    def test_multiline_message_is_medium(self) -> None:
        assert assess_commit_impact("Tidy things\n\nline one\nline two") == ImpactLevel.MEDIUM

    def test_three_lines_is_not_enough(self) -> None:
        assert assess_commit_impact("Tidy things\n\nbody") == ImpactLevel.LOW

    def test_long_first_line_is_medium(self) -> None:
        assert assess_commit_impact("x" * 51) == ImpactLevel.MEDIUM
        assert assess_commit_impact("x" * 50) == ImpactLevel.LOW

    def test_keywords_only_read_from_first_line(self) -> None:
        assert assess_commit_impact("Rename module\nbreaking for callers") == ImpactLevel.LOW


class TestAnalyzeCommits:
    """Verify histograms and per-commit enrichment."""

    def test_histograms(self, sample_activity: ActivityData) -> None:
        analysis = analyze_commits(sample_activity.commits)
        assert analysis.by_category == {"feature": 1, "fix": 1, "docs": 1}
        assert analysis.by_repository == {"org/frontend": 1, "org/backend": 2}

    def test_category_order_is_first_seen(self) -> None:
        commits = [make_commit("docs: a"), make_commit("fix: b"), make_commit("docs: c")]
        assert list(analyze_commits(commits).by_category) == ["docs", "fix"]

    def test_category_counts_sum_to_commit_count(self, sample_activity: ActivityData) -> None:
        analysis = analyze_commits(sample_activity.commits)
        assert sum(analysis.by_category.values()) == len(sample_activity.commits)

    def test_detailed_commits_carry_category_and_impact(self) -> None:
        commit = make_commit("BREAKING: drop py2")
        detailed = analyze_commits([commit]).detailed_commits[0]
        assert detailed.sha == commit.sha
        assert detailed.message == commit.message
        assert detailed.category == CommitCategory.OTHER
        assert detailed.impact == ImpactLevel.HIGH

    def test_empty(self) -> None:
        analysis = analyze_commits([])
        assert analysis.by_category == {}
        assert analysis.by_repository == {}
        assert analysis.detailed_commits == []


class TestProductivity:
    """Verify weighted scoring and level thresholds."""

    def test_mixed_day_is_medium(self) -> None:
        activity = _day(
            commits=[make_commit() for _ in range(3)],
            prs=[make_pr()],
            issues=[make_issue(), make_issue()],
        )
        productivity = calculate_productivity(activity)
        assert productivity.score == 17
        assert productivity.level == ProductivityLevel.MEDIUM
        assert productivity.breakdown.commits == 6
        assert productivity.breakdown.pull_requests == 5
        assert productivity.breakdown.issues == 6

    def test_empty_day_is_none(self) -> None:
        productivity = calculate_productivity(_day())
        assert productivity.score == 0
        assert productivity.level == ProductivityLevel.NONE

    @pytest.mark.parametrize(
        "score, level",
        [
            (1, ProductivityLevel.LOW),
            (9, ProductivityLevel.LOW),
            (10, ProductivityLevel.MEDIUM),
            (19, ProductivityLevel.MEDIUM),
            (20, ProductivityLevel.HIGH),
        ],
    )
    def test_thresholds(self, score: int, level: ProductivityLevel) -> None:
        assert analyzer_service.productivity_level(score) == level


class TestTimeDistribution:
    """Verify local time-of-day bucketing."""

    @pytest.mark.parametrize(
        "hour, bucket",
        [
            (0, TimeBucket.NIGHT),
            (5, TimeBucket.NIGHT),
            (6, TimeBucket.MORNING),
            (7, TimeBucket.MORNING),
            (12, TimeBucket.AFTERNOON),
            (13, TimeBucket.AFTERNOON),
            (18, TimeBucket.EVENING),
            (19, TimeBucket.EVENING),
            (22, TimeBucket.NIGHT),
            (23, TimeBucket.NIGHT),
        ],
    )
    def test_bucket_for_hour(self, hour: int, bucket: TimeBucket) -> None:
        assert bucket_for_hour(hour) == bucket

    def test_mixed_records(self, sample_activity: ActivityData) -> None:
        dist = analyze_time_distribution(sample_activity, timezone.utc)
        assert dist.morning == 1
        assert dist.afternoon == 2
        assert dist.evening == 1
        assert dist.night == 1
        assert dist.total == sample_activity.total_activity

    def test_all_buckets_present_when_empty(self) -> None:
        dist = analyze_time_distribution(_day(), timezone.utc)
        assert dist.model_dump() == {"morning": 0, "afternoon": 0, "evening": 0, "night": 0}

    def test_converts_to_given_zone(self) -> None:
        # 23:00 UTC is 08:00 the next morning at UTC+9.
        activity = _day(commits=[make_commit(hour=23)])
        dist = analyze_time_distribution(activity, timezone(timedelta(hours=9)))
        assert dist.morning == 1
        assert dist.night == 0

    def test_naive_timestamp_taken_as_local(self) -> None:
        commit = Commit(repo="o/r", message="x", sha="1234567", url="u", timestamp=datetime(2026, 2, 13, 7))
        dist = analyze_time_distribution(_day(commits=[commit]), timezone(timedelta(hours=-5)))
        assert dist.morning == 1


class TestRecommendations:
    """Verify the ordered advisory checks."""

    def test_no_commits_no_prs(self) -> None:
        recs = generate_recommendations(_day())
        assert recs == [analyzer_service.RECOMMEND_START_TRACKING]

    def test_issues_alone_still_suggest_commits(self) -> None:
        recs = generate_recommendations(_day(issues=[make_issue()]))
        assert analyzer_service.RECOMMEND_START_TRACKING in recs

    def test_many_commits_with_pr(self) -> None:
        commits = [make_commit("feat: a"), make_commit("fix: b")] + [make_commit("chore: c") for _ in range(9)]
        recs = generate_recommendations(_day(commits=commits, prs=[make_pr()]))
        assert analyzer_service.RECOMMEND_GROUP_COMMITS in recs
        assert analyzer_service.RECOMMEND_OPEN_PRS not in recs
        assert analyzer_service.RECOMMEND_DIVERSIFY not in recs

    def test_exactly_ten_commits_is_not_many(self) -> None:
        commits = [make_commit("feat: a"), make_commit("fix: b")] + [make_commit() for _ in range(8)]
        recs = generate_recommendations(_day(commits=commits, prs=[make_pr()]))
        assert analyzer_service.RECOMMEND_GROUP_COMMITS not in recs

    def test_commits_without_prs(self) -> None:
        recs = generate_recommendations(_day(commits=[make_commit("feat: a"), make_commit("fix: b")]))
        assert recs == [analyzer_service.RECOMMEND_OPEN_PRS]

    def test_single_category_suggests_diversifying(self) -> None:
        commits = [make_commit("fix: a"), make_commit("fix: b"), make_commit("bug in c")]
        recs = generate_recommendations(_day(commits=commits, prs=[make_pr()]))
        assert recs == [analyzer_service.RECOMMEND_DIVERSIFY]

    def test_order_follows_checks(self) -> None:
        commits = [make_commit("fix: x") for _ in range(11)]
        recs = generate_recommendations(_day(commits=commits))
        assert recs == [
            analyzer_service.RECOMMEND_GROUP_COMMITS,
            analyzer_service.RECOMMEND_OPEN_PRS,
            analyzer_service.RECOMMEND_DIVERSIFY,
        ]


class TestSummary:
    """Verify counts, repositories and first/last activity."""

    def test_counts_and_repos(self, sample_activity: ActivityData) -> None:
        summary = generate_summary(sample_activity)
        assert summary.total_commits == 3
        assert summary.total_pull_requests == 1
        assert summary.total_issues == 1
        assert summary.repositories_worked_on == ["org/frontend", "org/backend"]

    def test_first_and_last_across_kinds(self) -> None:
        issue = make_issue(hour=9)
        commit = make_commit(hour=14)
        pr = make_pr(hour=22)
        summary = generate_summary(_day(commits=[commit], prs=[pr], issues=[issue]))
        assert summary.first_activity == issue
        assert summary.last_activity == pr

    def test_empty_day_has_no_first_or_last(self) -> None:
        summary = generate_summary(_day())
        assert summary.first_activity is None
        assert summary.last_activity is None
        assert summary.repositories_worked_on == []

    def test_ties_resolve_to_first_encountered(self) -> None:
        commit = make_commit(hour=10)
        pr = make_pr(hour=10)
        issue = make_issue(hour=10)
        summary = generate_summary(_day(commits=[commit], prs=[pr], issues=[issue]))
        assert summary.first_activity == commit
        assert summary.last_activity == commit

    def test_records_keep_their_kind(self, sample_activity: ActivityData) -> None:
        summary = generate_summary(sample_activity)
        assert summary.first_activity.kind == "commit"
        assert summary.last_activity.kind == "issue"

    def test_naive_and_aware_timestamps_mix(self) -> None:
        commit = make_commit(hour=9)
        pr = PullRequest(
            repo="org/backend",
            title="Add caching layer",
            number=42,
            state="open",
            url="https://github.com/org/backend/pull/42",
            timestamp="2026-02-13T10:00:00",
        )
        day = _day(commits=[commit], prs=[pr])

        in_utc = generate_summary(day, timezone.utc)
        assert in_utc.first_activity == commit
        assert in_utc.last_activity == pr

        # 10:00 in Tokyo is 01:00 UTC, before the 09:00 UTC commit.
        in_tokyo = generate_summary(day, ZoneInfo("Asia/Tokyo"))
        assert in_tokyo.first_activity == pr
        assert in_tokyo.last_activity == commit

        assert analyze_activity(day, timezone.utc).summary.total_pull_requests == 1


class TestAnalyzeActivity:
    """Verify the composed analysis."""

    def test_composes_all_parts(self, sample_activity: ActivityData) -> None:
        result = analyze_activity(sample_activity, timezone.utc)
        assert result.summary.total_commits == 3
        assert result.commit_analysis.by_category == {"feature": 1, "fix": 1, "docs": 1}
        assert result.productivity.score == 2 * 3 + 5 + 3
        assert result.time_distribution.total == 5
        assert result.recommendations == []

    def test_idempotent(self, sample_activity: ActivityData) -> None:
        first = analyze_activity(sample_activity, timezone.utc)
        second = analyze_activity(sample_activity, timezone.utc)
        assert first == second
        assert first.model_dump() == second.model_dump()

    def test_does_not_mutate_input(self, sample_activity: ActivityData) -> None:
        before = sample_activity.model_dump()
        analyze_activity(sample_activity, timezone.utc)
        assert sample_activity.model_dump() == before

    def test_result_serializes(self, sample_activity: ActivityData) -> None:
        data = analyze_activity(sample_activity, timezone.utc).model_dump(mode="json")
        assert data["summary"]["first_activity"]["kind"] == "commit"
        assert data["commit_analysis"]["detailed_commits"][0]["category"] == "feature"
        assert data["productivity"]["level"] == "medium"
