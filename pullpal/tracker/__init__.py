"""PR lifecycle tracker: store, webhook ingestion, reconciliation, queries."""

from pullpal.tracker.ingestion import EventIngestion
from pullpal.tracker.queries import format_pr_age, get_prs_needing_review, get_stale_prs, is_stale
from pullpal.tracker.reconciler import Reconciler, SyncResult
from pullpal.tracker.store import PRStore

__all__ = [
    "EventIngestion",
    "PRStore",
    "Reconciler",
    "SyncResult",
    "format_pr_age",
    "get_prs_needing_review",
    "get_stale_prs",
    "is_stale",
]
