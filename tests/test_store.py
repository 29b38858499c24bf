"""Tests for PRStore (upsert, update, delete, snapshots, locking)."""

import threading

from pullpal.models import PRUpdate, TrackedPR
from pullpal.tracker.store import PRStore
from tests.conftest import hours_ago


def _pr(number: int, **overrides) -> TrackedPR:
    fields = {"number": number, "title": f"PR {number}", "author": "alice", "created_at": hours_ago(10)}
    fields.update(overrides)
    return TrackedPR(**fields)


def test_upsert_then_get() -> None:
    store = PRStore()
    store.upsert(_pr(1))
    pr = store.get(1)
    assert pr is not None
    assert pr.title == "PR 1"
    assert 1 in store
    assert len(store) == 1


def test_get_missing_returns_none() -> None:
    assert PRStore().get(42) is None


def test_upsert_replaces_existing() -> None:
    store = PRStore()
    store.upsert(_pr(1, title="old"))
    store.upsert(_pr(1, title="new"))
    assert len(store) == 1
    assert store.get(1).title == "new"


def test_reads_are_copies() -> None:
    """Mutating a returned record does not change the store."""
    store = PRStore()
    store.upsert(_pr(1, reviewers=["bob"]))
    snapshot = store.get(1)
    snapshot.reviewers.append("mallory")
    store.all()[0].reviewers.append("eve")
    assert store.get(1).reviewers == ["bob"]


def test_update_merges_prupdate() -> None:
    store = PRStore()
    store.upsert(_pr(1, review_count=1))
    updated = store.update(1, PRUpdate(review_count_delta=2))
    assert updated.review_count == 3
    assert store.get(1).review_count == 3


def test_update_accepts_function() -> None:
    store = PRStore()
    store.upsert(_pr(1))
    store.update(1, lambda pr: pr.model_copy(update={"review_count": 9}))
    assert store.get(1).review_count == 9


def test_update_missing_returns_none() -> None:
    store = PRStore()
    assert store.update(5, PRUpdate(review_count_delta=1)) is None
    assert 5 not in store


def test_delete() -> None:
    store = PRStore()
    store.upsert(_pr(1))
    assert store.delete(1) is True
    assert store.delete(1) is False
    assert store.get(1) is None


def test_all_and_numbers_sorted() -> None:
    store = PRStore()
    for n in (3, 1, 2):
        store.upsert(_pr(n))
    assert [pr.number for pr in store.all()] == [1, 2, 3]
    assert store.numbers() == [1, 2, 3]


def test_locked_is_reentrant() -> None:
    store = PRStore()
    with store.locked():
        store.upsert(_pr(1))
        with store.locked():
            store.delete(1)
    assert len(store) == 0


def test_concurrent_updates_are_not_lost() -> None:
    """Deltas from many threads all land."""
    store = PRStore()
    store.upsert(_pr(1))

    def worker() -> None:
        for _ in range(200):
            store.update(1, PRUpdate(review_count_delta=1))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert store.get(1).review_count == 1600


def test_locked_blocks_other_threads() -> None:
    """A writer holding locked() is not interleaved with another thread's write."""
    store = PRStore()
    store.upsert(_pr(1))
    started = threading.Event()
    done = threading.Event()

    def other() -> None:
        started.set()
        store.delete(1)
        done.set()

    with store.locked():
        t = threading.Thread(target=other)
        t.start()
        started.wait(timeout=2)
        assert not done.wait(timeout=0.2)
        assert 1 in store
    t.join(timeout=2)
    assert done.is_set()
    assert 1 not in store
