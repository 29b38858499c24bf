"""Pull request review submission."""

from datetime import datetime

from pydantic import BaseModel


class Review(BaseModel):
    """Review submitted on a pull request.

    submitted_at is None for pending (unsubmitted) reviews.
    """

    reviewer: str = "unknown"
    state: str = "commented"
    submitted_at: datetime | None = None
