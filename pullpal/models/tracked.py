"""Tracked pull request record and typed partial update."""

from datetime import UTC, datetime
from typing import List

from pydantic import BaseModel, Field, field_validator

SECONDS_PER_HOUR = 3600


def _as_utc(value: datetime | None) -> datetime | None:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def _unique(values: List[str]) -> List[str]:
    """Drop duplicates keeping first-seen order."""
    return list(dict.fromkeys(values))


class PRData(BaseModel):
    """Pull request fields supplied when a PR is tracked.

    Identity (number, title, url, author, owner, repo) and created_at come
    from the PR's author metadata; created_at never changes for a PR.
    """

    number: int
    title: str
    url: str = ""
    author: str = "unknown"
    owner: str = ""
    repo: str = ""
    created_at: datetime
    is_draft: bool = False
    last_reviewed_at: datetime | None = None
    last_updated: datetime | None = None

    @field_validator("created_at", "last_reviewed_at", "last_updated")
    @classmethod
    def _timestamps_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class TrackedPR(PRData):
    """Open, non-draft pull request held by the tracker."""

    review_count: int = Field(default=0, ge=0)
    reviewers: List[str] = Field(default_factory=list)

    @field_validator("reviewers")
    @classmethod
    def _reviewers_unique(cls, value: List[str]) -> List[str]:
        return _unique(value)

    def age_hours(self, now: datetime | None = None) -> int:
        """Whole hours since created_at (recomputed on every call)."""
        now = now or datetime.now(UTC)
        return int((now - self.created_at).total_seconds() // SECONDS_PER_HOUR)

    @property
    def age(self) -> int:
        return self.age_hours()


class PRUpdate(BaseModel):
    """Partial update for a tracked PR.

    title, last_reviewed_at and last_updated replace the stored value when
    set (None leaves it untouched). review_count_delta is added to the
    stored count and new_reviewers is merged into the reviewer set.
    """

    title: str | None = None
    last_reviewed_at: datetime | None = None
    last_updated: datetime | None = None
    review_count_delta: int = Field(default=0, ge=0)
    new_reviewers: List[str] = Field(default_factory=list)

    @field_validator("last_reviewed_at", "last_updated")
    @classmethod
    def _timestamps_utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)

    def apply(self, pr: TrackedPR) -> TrackedPR:
        """Return a new record with this update merged into pr."""
        changes: dict = {}
        if self.title is not None:
            changes["title"] = self.title
        if self.last_reviewed_at is not None:
            changes["last_reviewed_at"] = self.last_reviewed_at
        if self.last_updated is not None:
            changes["last_updated"] = self.last_updated
        if self.review_count_delta:
            changes["review_count"] = pr.review_count + self.review_count_delta
        if self.new_reviewers:
            changes["reviewers"] = _unique([*pr.reviewers, *self.new_reviewers])
        return pr.model_copy(update=changes)
