"""Records handed to the notification channel."""

from pydantic import BaseModel


class PRNotification(BaseModel):
    """Pull request identity for a chat message."""

    number: int
    title: str
    url: str
    author: str
    owner: str
    repo: str


class PRReviewNotification(PRNotification):
    """Review submitted on a pull request."""

    reviewer: str
    review_state: str


class StalePRNotification(PRNotification):
    """Pull request waiting for attention (age is already formatted)."""

    age: str
    review_count: int


class DailySummary(BaseModel):
    """Daily counts of open pull requests."""

    total_open: int
    needing_review: int
    stale: int
    avg_review_time: str
