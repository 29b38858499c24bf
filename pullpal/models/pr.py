"""Pull request as returned by the source of truth."""

from datetime import datetime

from pydantic import BaseModel


class PullRequest(BaseModel):
    """Pull request (open or closed) from the Git platform."""

    number: int
    title: str
    url: str = ""
    author: str = "unknown"
    state: str = "open"
    created_at: datetime
    updated_at: datetime | None = None
    is_draft: bool = False
    merged_at: datetime | None = None
