"""Normalized GitHub webhook events for pull_request, pull_request_review
and pull_request_review_comment.

Tracker-relevant actions:
- pull_request: opened, ready_for_review, reopened, closed, converted_to_draft,
  synchronize, edited
- pull_request_review: submitted
- pull_request_review_comment: created
"""

from datetime import datetime
from typing import Any, Dict, Literal

from pydantic import BaseModel, ValidationError

from pullpal.models import PRData, PRNotification

SUPPORTED_EVENTS = ("pull_request", "pull_request_review", "pull_request_review_comment")


class InvalidEventError(ValueError):
    """Raised when a supported event payload lacks required fields."""

    pass


class PRSnapshot(BaseModel):
    """Pull request as embedded in the webhook payload."""

    number: int
    title: str = ""
    url: str = ""
    author: str = "unknown"
    state: str = "open"
    created_at: datetime
    updated_at: datetime | None = None
    is_draft: bool = False
    merged: bool = False


class ReviewSnapshot(BaseModel):
    """Review as embedded in a pull_request_review payload."""

    reviewer: str = "unknown"
    state: str = "commented"
    submitted_at: datetime | None = None


class WebhookEvent(BaseModel):
    """One signature-verified webhook delivery, reduced to what the tracker needs."""

    kind: Literal["pull_request", "pull_request_review", "pull_request_review_comment"]
    action: str
    owner: str
    repo: str
    pr: PRSnapshot
    review: ReviewSnapshot | None = None
    comment_at: datetime | None = None

    @property
    def pr_number(self) -> int:
        return self.pr.number

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def to_pr_data(self) -> PRData:
        return PRData(
            number=self.pr.number,
            title=self.pr.title,
            url=self.pr.url,
            author=self.pr.author,
            owner=self.owner,
            repo=self.repo,
            created_at=self.pr.created_at,
            is_draft=self.pr.is_draft,
        )

    def to_notification(self) -> PRNotification:
        return PRNotification(
            number=self.pr.number,
            title=self.pr.title,
            url=self.pr.url,
            author=self.pr.author,
            owner=self.owner,
            repo=self.repo,
        )


def _object(parent: Dict[str, Any], key: str, event: str) -> Dict[str, Any]:
    """Nested JSON object at parent[key]; {} when absent or null."""
    value = parent.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidEventError(f"{event} payload field '{key}' must be an object")
    return value


def _login(parent: Dict[str, Any], key: str, event: str) -> str:
    return _object(parent, key, event).get("login") or "unknown"


def parse_event(event: str, payload: Dict[str, Any]) -> WebhookEvent | None:
    """Build a WebhookEvent from a raw GitHub payload.

    Returns None for event kinds the tracker ignores. Raises
    InvalidEventError when a supported event is missing its pull request or
    has unparseable fields.
    """
    if event not in SUPPORTED_EVENTS:
        return None
    if not isinstance(payload, dict):
        raise InvalidEventError(f"{event} payload must be an object")
    pull = payload.get("pull_request")
    if not isinstance(pull, dict):
        raise InvalidEventError(f"{event} payload missing 'pull_request'")
    repo_payload = _object(payload, "repository", event)
    owner = _login(repo_payload, "owner", event) if repo_payload.get("owner") else ""
    author = _login(pull, "user", event)
    review_payload = _object(payload, "review", event) if payload.get("review") is not None else None
    comment_payload = _object(payload, "comment", event)
    try:
        return WebhookEvent(
            kind=event,
            action=payload.get("action") or "",
            owner=owner,
            repo=repo_payload.get("name") or "",
            pr=PRSnapshot(
                number=pull.get("number"),
                title=pull.get("title") or "",
                url=pull.get("html_url") or "",
                author=author,
                state=pull.get("state") or "open",
                created_at=pull.get("created_at"),
                updated_at=pull.get("updated_at"),
                is_draft=bool(pull.get("draft")),
                merged=bool(pull.get("merged")),
            ),
            review=(
                ReviewSnapshot(
                    reviewer=_login(review_payload, "user", event),
                    state=str(review_payload.get("state") or "commented").lower(),
                    submitted_at=review_payload.get("submitted_at"),
                )
                if review_payload is not None
                else None
            ),
            comment_at=comment_payload.get("created_at"),
        )
    except ValidationError as e:
        raise InvalidEventError(f"Invalid {event} payload: {e}") from e
