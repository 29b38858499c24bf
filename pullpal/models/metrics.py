"""Aggregated review metrics."""

from typing import List

from pydantic import BaseModel


class ReviewStats(BaseModel):
    total_reviewed: int
    total_merged: int
    avg_reviews_per_pr: float


class ContributorCount(BaseModel):
    """Author with number of currently open (tracked) PRs."""

    author: str
    open_prs: int


class ReviewerCount(BaseModel):
    """Reviewer with number of reviews in the closed-PR sample."""

    reviewer: str
    review_count: int


class PRMetrics(BaseModel):
    """Live open-PR counts combined with statistics of recently merged PRs."""

    total_open_prs: int
    needing_review: int
    stale_prs: int
    average_review_time: str
    average_merge_time: str
    review_stats: ReviewStats
    top_contributors: List[ContributorCount]
    top_reviewers: List[ReviewerCount]


class PeriodMetrics(BaseModel):
    """PR activity for PRs created within the last N days."""

    days: int
    prs_opened: int
    prs_merged: int
    prs_reviewed: int
    avg_time_to_merge: str
