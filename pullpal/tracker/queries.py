"""Staleness, needs-review and age views over tracked PRs."""

from datetime import UTC, datetime, timedelta
from typing import Iterable, List

from pullpal.models import TrackedPR

HOURS_PER_DAY = 24


def get_prs_needing_review(prs: Iterable[TrackedPR]) -> List[TrackedPR]:
    """PRs awaiting a first review."""
    return [pr for pr in prs if pr.review_count == 0 or pr.last_reviewed_at is None]


def is_stale(pr: TrackedPR, hours_threshold: int = 24, now: datetime | None = None) -> bool:
    """True when pr is older than the threshold and has had no review within it.

    A PR reviewed once long ago becomes stale again once that review ages
    past the threshold.
    """
    now = now or datetime.now(UTC)
    threshold = timedelta(hours=hours_threshold)
    old_enough = now - pr.created_at > threshold
    no_recent_review = pr.last_reviewed_at is None or now - pr.last_reviewed_at > threshold
    return old_enough and no_recent_review


def get_stale_prs(
    prs: Iterable[TrackedPR],
    hours_threshold: int = 24,
    now: datetime | None = None,
) -> List[TrackedPR]:
    """PRs older than hours_threshold without a review in that window."""
    now = now or datetime.now(UTC)
    return [pr for pr in prs if is_stale(pr, hours_threshold, now)]


def format_pr_age(pr: TrackedPR, now: datetime | None = None) -> str:
    """Human-readable age: 'just opened', 'Nh old' or 'Nd old'."""
    hours = pr.age_hours(now)
    if hours < 1:
        return "just opened"
    if hours < HOURS_PER_DAY:
        return f"{hours}h old"
    return f"{hours // HOURS_PER_DAY}d old"
