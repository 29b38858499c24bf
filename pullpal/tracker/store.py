"""In-memory store of tracked pull requests.

One record per PR number. A single re-entrant lock guards the whole map:
every operation takes it, and writers that need several steps to appear
atomic (the reconciler) hold it through locked(). Records are pydantic
models replaced wholesale on write and copied on read, so readers only
ever see complete writes.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List

from pullpal.models import PRUpdate, TrackedPR

LOG = logging.getLogger("pullpal.tracker.store")


class PRStore:
    """Process-wide map of PR number to TrackedPR.

    Volatile: rebuilt by reconciliation on startup.
    """

    def __init__(self) -> None:
        self._prs: Dict[int, TrackedPR] = {}
        self._lock = threading.RLock()

    @contextmanager
    def locked(self) -> Iterator["PRStore"]:
        """Hold the store lock across several operations."""
        with self._lock:
            yield self

    def get(self, number: int) -> TrackedPR | None:
        with self._lock:
            pr = self._prs.get(number)
            return pr.model_copy(deep=True) if pr is not None else None

    def upsert(self, pr: TrackedPR) -> None:
        with self._lock:
            self._prs[pr.number] = pr.model_copy(deep=True)

    def update(self, number: int, change: PRUpdate | Callable[[TrackedPR], TrackedPR]) -> TrackedPR | None:
        """Merge a change into an existing record.

        change is a PRUpdate or a function returning the new record.
        Returns the updated record, or None when number is not tracked.
        """
        with self._lock:
            current = self._prs.get(number)
            if current is None:
                return None
            updated = change.apply(current) if isinstance(change, PRUpdate) else change(current)
            self._prs[number] = updated
            return updated.model_copy(deep=True)

    def delete(self, number: int) -> bool:
        """Remove a record. Returns False when it was not tracked."""
        with self._lock:
            return self._prs.pop(number, None) is not None

    def all(self) -> List[TrackedPR]:
        """Snapshot of all records, ordered by PR number."""
        with self._lock:
            return [self._prs[n].model_copy(deep=True) for n in sorted(self._prs)]

    def numbers(self) -> List[int]:
        with self._lock:
            return sorted(self._prs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._prs)

    def __contains__(self, number: object) -> bool:
        with self._lock:
            return number in self._prs
