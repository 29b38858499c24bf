"""Slack notifier (chat.postMessage over the Web API)."""

import logging
from datetime import date
from typing import List

import requests

from pullpal.models import DailySummary, PRNotification, PRReviewNotification, StalePRNotification
from pullpal.notifier.base import Notifier

LOG = logging.getLogger("pullpal.notifier.slack")

REVIEW_TEXT = {
    "approved": "approved this PR",
    "changes_requested": "requested changes",
    "commented": "commented on this PR",
}


def _pr_link(pr: PRNotification) -> str:
    return f"<{pr.url}|#{pr.number}: {pr.title}>"


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


class SlackNotifier(Notifier):
    """Posts plain-text messages to one Slack channel."""

    def __init__(self, token: str, channel: str = "#pull-requests", api_url: str = "https://slack.com/api") -> None:
        self._channel = channel
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        self._session.headers["Authorization"] = f"Bearer {token}"
        self._session.headers["Content-Type"] = "application/json; charset=utf-8"

    def _post(self, text: str, what: str) -> bool:
        """Send one message. Failures are logged, never retried or raised."""
        try:
            resp = self._session.post(
                f"{self._api_url}/chat.postMessage",
                json={"channel": self._channel, "text": text},
                timeout=10,
            )
            data = resp.json() if resp.status_code < 400 else {}
        except (requests.RequestException, ValueError) as e:
            LOG.error("Error sending Slack %s: %s", what, e)
            return False
        if resp.status_code >= 400 or not data.get("ok"):
            LOG.error("Slack rejected %s: %s", what, data.get("error") or resp.status_code)
            return False
        LOG.info("Slack %s sent", what)
        return True

    def notify_pr_opened(self, pr: PRNotification) -> None:
        self._post(
            f"New PR opened: {_pr_link(pr)}\nOpened by {pr.author} in {pr.owner}/{pr.repo}. Ready for review.",
            f"notification for PR #{pr.number}",
        )

    def notify_pr_reviewed(self, pr: PRReviewNotification) -> None:
        action = REVIEW_TEXT.get(pr.review_state.lower(), "reviewed this PR")
        self._post(
            f"PR reviewed: {_pr_link(pr)}\n{pr.reviewer} {action}",
            f"review notification for PR #{pr.number}",
        )

    def notify_pr_merged(self, pr: PRNotification) -> None:
        self._post(f"PR merged: {_pr_link(pr)}", f"merge notification for PR #{pr.number}")

    def notify_stale_prs(self, prs: List[StalePRNotification]) -> None:
        if not prs:
            return
        lines = [f"{_plural(len(prs), 'stale PR')} need attention:"]
        for pr in prs:
            lines.append(f"- {_pr_link(pr)} by {pr.author}, {pr.age}, {_plural(pr.review_count, 'review')}")
        self._post("\n".join(lines), f"stale PR notification ({len(prs)} PRs)")

    def send_daily_summary(self, summary: DailySummary) -> None:
        text = "\n".join(
            [
                f"Daily PR Summary ({date.today():%A, %B %d, %Y})",
                f"Open PRs: {summary.total_open}",
                f"Needing Review: {summary.needing_review}",
                f"Stale PRs: {summary.stale}",
                f"Avg Review Time: {summary.avg_review_time}",
            ]
        )
        self._post(text, "daily summary")
