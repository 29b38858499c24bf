"""Apply single-PR mutations from webhook notifications to the store.

Ingestion trusts the event payload verbatim and never calls the source of
truth; reconciliation corrects whatever a lossy event stream gets wrong.
"""

import logging

from pullpal.models import PRData, PRUpdate, TrackedPR
from pullpal.tracker.store import PRStore

LOG = logging.getLogger("pullpal.tracker.ingestion")


class EventIngestion:
    """Create, update and remove tracked PRs."""

    def __init__(self, store: PRStore) -> None:
        self._store = store

    def track(self, pr_data: PRData) -> TrackedPR | None:
        """Add or replace a PR, keeping its accumulated reviewers and review count.

        Drafts are never tracked: tracking a draft drops any existing entry.
        Returns the stored record, or None for a draft.
        """
        with self._store.locked():
            if pr_data.is_draft:
                if self._store.delete(pr_data.number):
                    LOG.info("PR #%s is a draft, removed from tracking", pr_data.number)
                else:
                    LOG.debug("Skipping draft PR #%s", pr_data.number)
                return None
            existing = self._store.get(pr_data.number)
            pr = TrackedPR(
                **pr_data.model_dump(),
                reviewers=existing.reviewers if existing else [],
                review_count=existing.review_count if existing else 0,
            )
            self._store.upsert(pr)
        LOG.info("Tracking PR #%s: %s", pr.number, pr.title)
        return pr

    def update_status(self, number: int, update: PRUpdate) -> TrackedPR | None:
        """Merge an update into a tracked PR.

        Unknown PR numbers are dropped with a warning (not queued, not
        retried). Returns the updated record or None.
        """
        pr = self._store.update(number, update)
        if pr is None:
            LOG.warning("PR #%s not found in tracker", number)
            return None
        LOG.info("Updated PR #%s status", number)
        return pr

    def remove(self, number: int) -> None:
        """Stop tracking a PR (merged or closed). No-op when absent."""
        if self._store.delete(number):
            LOG.info("Removed PR #%s from tracking", number)
        else:
            LOG.debug("PR #%s was not tracked", number)
