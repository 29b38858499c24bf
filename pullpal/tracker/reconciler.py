"""Full resync of tracked PRs against the source of truth.

All network calls happen before the store lock is taken; the result is
applied in one critical section. Reconciliation replaces review_count,
reviewers and last_reviewed_at outright (ingestion only adds to them), so
running it twice with no upstream change leaves identical state.
"""

import logging
import threading
from typing import Dict, List

from pydantic import BaseModel, Field

from pullpal.adapters.base import GitPlatformAdapter, GitPlatformError
from pullpal.models import PRData, PullRequest, Review
from pullpal.tracker.ingestion import EventIngestion
from pullpal.tracker.store import PRStore

LOG = logging.getLogger("pullpal.tracker.reconciler")


class SyncResult(BaseModel):
    """Outcome of one reconciliation."""

    open_count: int = 0
    tracked: int = 0
    removed: List[int] = Field(default_factory=list)
    failed: List[int] = Field(default_factory=list)


def _last_submitted(reviews: List[Review]) -> Review | None:
    """Last review in submission order that has a submission time."""
    for review in reversed(reviews):
        if review.submitted_at is not None:
            return review
    return None


class Reconciler:
    """Brings the store in line with the currently open PRs upstream."""

    def __init__(self, store: PRStore, ingestion: EventIngestion, adapter: GitPlatformAdapter) -> None:
        self._store = store
        self._ingestion = ingestion
        self._adapter = adapter
        # One sync at a time, fetch through apply; separate from the store lock
        self._sync_lock = threading.Lock()

    def sync(self, owner: str, repo: str) -> SyncResult:
        """Reconcile tracked PRs with GitHub.

        Concurrent callers wait for the running sync to finish, then fetch
        their own snapshot, so an older snapshot is never applied over a
        newer one.

        Raises GitPlatformError when the open PR list cannot be fetched; the
        store is left untouched in that case. A PR whose reviews cannot be
        fetched is skipped and keeps its previous entry (or absence).
        """
        with self._sync_lock:
            return self._sync(owner, repo)

    def _sync(self, owner: str, repo: str) -> SyncResult:
        full_name = f"{owner}/{repo}"
        pull_requests = self._adapter.list_open_prs(full_name)
        LOG.info("Syncing %s open PRs from %s", len(pull_requests), full_name)

        ready = [pr for pr in pull_requests if not pr.is_draft]
        reviews_by_pr: Dict[int, List[Review]] = {}
        result = SyncResult(open_count=len(ready))
        for pr in ready:
            try:
                reviews_by_pr[pr.number] = self._adapter.list_reviews(full_name, pr.number)
            except GitPlatformError as e:
                LOG.warning("Sync: failed to get reviews for PR #%s: %s", pr.number, e)
                result.failed.append(pr.number)

        open_numbers = {pr.number for pr in ready}
        with self._store.locked():
            for number in self._store.numbers():
                if number not in open_numbers:
                    self._store.delete(number)
                    result.removed.append(number)
            for pr in ready:
                reviews = reviews_by_pr.get(pr.number)
                if reviews is None:
                    continue
                self._apply(owner, repo, pr, reviews)
            result.tracked = len(self._store)

        LOG.info(
            "Sync complete: %s PRs tracked, %s removed, %s skipped",
            result.tracked,
            len(result.removed),
            len(result.failed),
        )
        return result

    def _apply(self, owner: str, repo: str, pr: PullRequest, reviews: List[Review]) -> None:
        last_review = _last_submitted(reviews)
        last_reviewed_at = last_review.submitted_at if last_review else None
        self._ingestion.track(
            PRData(
                number=pr.number,
                title=pr.title,
                url=pr.url,
                author=pr.author,
                owner=owner,
                repo=repo,
                created_at=pr.created_at,
                is_draft=pr.is_draft,
                last_reviewed_at=last_reviewed_at,
                last_updated=pr.updated_at,
            )
        )
        reviewers = [r.reviewer for r in reviews]
        self._store.update(
            pr.number,
            lambda tracked: tracked.model_copy(
                update={
                    "review_count": len(reviews),
                    "reviewers": list(dict.fromkeys(reviewers)),
                    "last_reviewed_at": last_reviewed_at,
                }
            ),
        )
