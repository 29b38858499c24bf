"""Data models for tracked PRs, upstream PRs/reviews, notifications, metrics (Pydantic)."""

from pullpal.models.metrics import ContributorCount, PeriodMetrics, PRMetrics, ReviewerCount, ReviewStats
from pullpal.models.notification import (
    DailySummary,
    PRNotification,
    PRReviewNotification,
    StalePRNotification,
)
from pullpal.models.pr import PullRequest
from pullpal.models.review import Review
from pullpal.models.tracked import PRData, PRUpdate, TrackedPR

__all__ = [
    "ContributorCount",
    "DailySummary",
    "PRData",
    "PRMetrics",
    "PRNotification",
    "PRReviewNotification",
    "PRUpdate",
    "PeriodMetrics",
    "PullRequest",
    "Review",
    "ReviewStats",
    "ReviewerCount",
    "StalePRNotification",
    "TrackedPR",
]
