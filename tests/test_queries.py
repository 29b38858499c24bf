"""Tests for needs-review, staleness and age formatting."""

from pullpal.models import TrackedPR
from pullpal.tracker.queries import format_pr_age, get_prs_needing_review, get_stale_prs, is_stale
from tests.conftest import NOW, hours_ago


def _pr(number: int = 1, created_hours_ago: float = 30, **overrides) -> TrackedPR:
    return TrackedPR(number=number, title="T", created_at=hours_ago(created_hours_ago), **overrides)


class TestNeedsReview:
    def test_unreviewed_pr_needs_review(self) -> None:
        assert get_prs_needing_review([_pr()]) == [_pr()]

    def test_reviewed_pr_does_not(self) -> None:
        pr = _pr(review_count=1, last_reviewed_at=hours_ago(1))
        assert get_prs_needing_review([pr]) == []

    def test_count_without_timestamp_still_needs_review(self) -> None:
        assert len(get_prs_needing_review([_pr(review_count=2)])) == 1


class TestStale:
    def test_old_unreviewed_pr_is_stale_and_needs_review(self) -> None:
        pr = _pr(created_hours_ago=30)
        assert is_stale(pr, 24, NOW)
        assert get_stale_prs([pr], 24, NOW) == [pr]
        assert get_prs_needing_review([pr]) == [pr]

    def test_recent_review_clears_both(self) -> None:
        pr = _pr(created_hours_ago=30, review_count=1, last_reviewed_at=hours_ago(1))
        assert not is_stale(pr, 24, NOW)
        assert get_prs_needing_review([pr]) == []

    def test_old_review_makes_pr_stale_again(self) -> None:
        pr = _pr(created_hours_ago=72, review_count=1, last_reviewed_at=hours_ago(48))
        assert is_stale(pr, 24, NOW)

    def test_young_pr_never_stale(self) -> None:
        assert not is_stale(_pr(created_hours_ago=5), 24, NOW)

    def test_threshold_is_exclusive(self) -> None:
        assert not is_stale(_pr(created_hours_ago=24), 24, NOW)

    def test_custom_threshold(self) -> None:
        prs = [_pr(1, created_hours_ago=5), _pr(2, created_hours_ago=1)]
        assert [p.number for p in get_stale_prs(prs, 4, NOW)] == [1]


class TestFormatAge:
    def test_tiers(self) -> None:
        assert format_pr_age(_pr(created_hours_ago=0), NOW) == "just opened"
        assert format_pr_age(_pr(created_hours_ago=0.5), NOW) == "just opened"
        assert format_pr_age(_pr(created_hours_ago=5), NOW) == "5h old"
        assert format_pr_age(_pr(created_hours_ago=23.9), NOW) == "23h old"
        assert format_pr_age(_pr(created_hours_ago=48), NOW) == "2d old"
        assert format_pr_age(_pr(created_hours_ago=71), NOW) == "2d old"
