"""Review and merge latency statistics and leaderboards.

Combines live tracker state (open, needing review, stale, open PRs per
author) with a sample of recently closed PRs from the source of truth
(review latency, merge latency, reviews per PR, reviews per reviewer).
The two leaderboards come from different populations on purpose: top
contributors count open PRs in the store, top reviewers count reviews in
the closed sample.
"""

import logging
from collections import Counter
from datetime import UTC, datetime, timedelta
from typing import List

from pullpal.adapters.base import GitPlatformAdapter, GitPlatformError
from pullpal.models import (
    ContributorCount,
    PeriodMetrics,
    PRMetrics,
    PullRequest,
    ReviewerCount,
    ReviewStats,
)
from pullpal.tracker.queries import get_prs_needing_review, get_stale_prs
from pullpal.tracker.store import PRStore

LOG = logging.getLogger("pullpal.services.metrics")

MS_PER_MINUTE = 60 * 1000
MS_PER_HOUR = 60 * MS_PER_MINUTE
TOP_N = 5
NOT_AVAILABLE = "N/A"


def _elapsed_ms(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() * 1000


def format_time_difference(milliseconds: float) -> str:
    """Format a duration: '45m' under an hour, '5h' under a day, else '1 day' / 'N days'."""
    hours = milliseconds / MS_PER_HOUR
    if hours < 1:
        return f"{int(milliseconds // MS_PER_MINUTE)}m"
    if hours < 24:
        return f"{int(hours)}h"
    days = int(hours // 24)
    if days == 1:
        return "1 day"
    return f"{days} days"


def _format_mean(values_ms: List[float]) -> str:
    if not values_ms:
        return NOT_AVAILABLE
    return format_time_difference(sum(values_ms) / len(values_ms))


class MetricsAggregator:
    """Computes PR metrics from the tracker store and the Git platform."""

    def __init__(
        self,
        store: PRStore,
        adapter: GitPlatformAdapter,
        stale_hours: int = 24,
        closed_sample_size: int = 50,
        merged_sample_size: int = 30,
    ) -> None:
        self._store = store
        self._adapter = adapter
        self._stale_hours = stale_hours
        self._closed_sample_size = closed_sample_size
        self._merged_sample_size = merged_sample_size

    def get_pr_metrics(self, owner: str, repo: str, now: datetime | None = None) -> PRMetrics:
        """Compute comprehensive PR metrics.

        Raises GitPlatformError when closed PRs cannot be listed. Merged PRs
        whose reviews cannot be fetched are left out of review time, review
        count and reviewer statistics.
        """
        full_name = f"{owner}/{repo}"
        tracked = self._store.all()
        needing_review = get_prs_needing_review(tracked)
        stale = get_stale_prs(tracked, self._stale_hours, now)

        closed = self._adapter.list_closed_prs(full_name, per_page=self._closed_sample_size)
        merged = [pr for pr in closed if pr.merged_at is not None][: self._merged_sample_size]

        review_times: List[float] = []
        total_reviews = 0
        fetched = 0
        reviewer_counts: Counter = Counter()
        for pr in merged:
            try:
                reviews = self._adapter.list_reviews(full_name, pr.number)
            except GitPlatformError as e:
                LOG.warning("Metrics: skipping PR #%s, reviews unavailable: %s", pr.number, e)
                continue
            fetched += 1
            total_reviews += len(reviews)
            submitted = [r for r in reviews if r.submitted_at is not None]
            if submitted:
                review_times.append(_elapsed_ms(pr.created_at, submitted[0].submitted_at))
            for review in reviews:
                reviewer_counts[review.reviewer] += 1

        merge_times = [_elapsed_ms(pr.created_at, pr.merged_at) for pr in merged]
        avg_reviews_per_pr = total_reviews / fetched if fetched else 0.0

        contributor_counts = Counter(pr.author for pr in tracked)

        return PRMetrics(
            total_open_prs=len(tracked),
            needing_review=len(needing_review),
            stale_prs=len(stale),
            average_review_time=_format_mean(review_times),
            average_merge_time=_format_mean(merge_times),
            review_stats=ReviewStats(
                total_reviewed=len(review_times),
                total_merged=len(merged),
                avg_reviews_per_pr=round(avg_reviews_per_pr, 1),
            ),
            top_contributors=[
                ContributorCount(author=author, open_prs=count)
                for author, count in contributor_counts.most_common(TOP_N)
            ],
            top_reviewers=[
                ReviewerCount(reviewer=reviewer, review_count=count)
                for reviewer, count in reviewer_counts.most_common(TOP_N)
            ],
        )

    def get_metrics_for_period(
        self,
        owner: str,
        repo: str,
        days: int = 7,
        now: datetime | None = None,
    ) -> PeriodMetrics:
        """Activity for PRs created in the last `days` days.

        Looks at the 100 most recently created PRs in any state. Raises
        GitPlatformError when they cannot be listed.
        """
        full_name = f"{owner}/{repo}"
        since = (now or datetime.now(UTC)) - timedelta(days=days)
        recent: List[PullRequest] = [
            pr for pr in self._adapter.list_prs(full_name, state="all", per_page=100) if pr.created_at >= since
        ]

        reviewed = 0
        for pr in recent:
            try:
                if self._adapter.list_reviews(full_name, pr.number):
                    reviewed += 1
            except GitPlatformError as e:
                LOG.warning("Period metrics: skipping reviews of PR #%s: %s", pr.number, e)

        merged = [pr for pr in recent if pr.merged_at is not None]
        return PeriodMetrics(
            days=days,
            prs_opened=len(recent),
            prs_merged=len(merged),
            prs_reviewed=reviewed,
            avg_time_to_merge=_format_mean([_elapsed_ms(pr.created_at, pr.merged_at) for pr in merged]),
        )
