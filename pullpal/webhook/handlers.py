"""Handle GitHub webhook events (PR opened/closed/updated, review submitted,
review comment created).

Parses the payload into a WebhookEvent, applies it to the tracker through
EventIngestion and sends best-effort notifications.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Dict

from pullpal.models import PRReviewNotification, PRUpdate
from pullpal.notifier.base import Notifier
from pullpal.tracker.ingestion import EventIngestion
from pullpal.webhook.events import WebhookEvent, parse_event

LOG = logging.getLogger("pullpal.webhook.handlers")


def _handle_pull_request(
    event: WebhookEvent,
    ingestion: EventIngestion,
    notifier: Notifier,
    log: logging.Logger,
) -> None:
    action = event.action
    pr = event.pr
    if action == "opened":
        if pr.is_draft:
            log.debug("PR #%s opened as draft, not tracked", pr.number)
            return
        ingestion.track(event.to_pr_data())
        notifier.notify_pr_opened(event.to_notification())
    elif action == "ready_for_review":
        ingestion.track(event.to_pr_data())
        notifier.notify_pr_opened(event.to_notification())
    elif action == "reopened":
        ingestion.track(event.to_pr_data())
    elif action == "closed":
        ingestion.remove(pr.number)
        if pr.merged:
            notifier.notify_pr_merged(event.to_notification())
    elif action == "converted_to_draft":
        ingestion.remove(pr.number)
    elif action == "synchronize":
        # New commits pushed
        ingestion.update_status(pr.number, PRUpdate(last_updated=pr.updated_at or datetime.now(UTC)))
    elif action == "edited":
        ingestion.update_status(pr.number, PRUpdate(title=pr.title))
    else:
        log.debug("Unhandled pull_request action: %s", action)


def _handle_pull_request_review(
    event: WebhookEvent,
    ingestion: EventIngestion,
    notifier: Notifier,
    log: logging.Logger,
) -> None:
    if event.action != "submitted":
        log.debug("Unhandled pull_request_review action: %s", event.action)
        return
    review = event.review
    if review is None:
        log.warning("pull_request_review payload for PR #%s missing 'review'", event.pr_number)
        return
    updated = ingestion.update_status(
        event.pr_number,
        PRUpdate(
            last_reviewed_at=review.submitted_at or datetime.now(UTC),
            review_count_delta=1,
            new_reviewers=[review.reviewer],
        ),
    )
    if updated is None:
        return
    notifier.notify_pr_reviewed(
        PRReviewNotification(
            **event.to_notification().model_dump(),
            reviewer=review.reviewer,
            review_state=review.state,
        )
    )


def _handle_pull_request_review_comment(
    event: WebhookEvent,
    ingestion: EventIngestion,
    log: logging.Logger,
) -> None:
    if event.action != "created":
        log.debug("Unhandled pull_request_review_comment action: %s", event.action)
        return
    ingestion.update_status(event.pr_number, PRUpdate(last_updated=event.comment_at or datetime.now(UTC)))


def handle_github_event(
    config: Any,
    event: str,
    payload: Dict[str, Any],
    ingestion: EventIngestion,
    notifier: Notifier,
    log: logging.Logger | None = None,
) -> None:
    """Handle a GitHub webhook event.

    Supported events:
    - pull_request: opened/ready_for_review/reopened track the PR; closed and
      converted_to_draft stop tracking it; synchronize and edited update it.
    - pull_request_review (action=submitted): count the review and reviewer.
    - pull_request_review_comment (action=created): record activity time.

    Events for repositories other than config.bot.repository are ignored.
    Raises InvalidEventError for malformed payloads of supported events.
    """
    logger = log or LOG
    parsed = parse_event(event, payload)
    if parsed is None:
        logger.debug("Unhandled event type: %s", event)
        return
    logger.info("Received GitHub webhook: %s - %s (PR #%s)", event, parsed.action, parsed.pr_number)

    configured = getattr(config.bot, "repository", "")
    if parsed.owner and parsed.repo and parsed.full_name.lower() != configured.lower():
        logger.debug("Skipping %s: repository %s is not configured repo", event, parsed.full_name)
        return

    if parsed.kind == "pull_request":
        _handle_pull_request(parsed, ingestion, notifier, logger)
    elif parsed.kind == "pull_request_review":
        _handle_pull_request_review(parsed, ingestion, notifier, logger)
    else:
        _handle_pull_request_review_comment(parsed, ingestion, logger)
