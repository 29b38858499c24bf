"""Tests for scheduled jobs: stale PR check, daily summary, job loop."""

import logging
from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest

from pullpal.adapters.base import GitPlatformError
from pullpal.app import PullPal
from pullpal.models import DailySummary, PullRequest, Review, StalePRNotification
from pullpal.scheduler import check_stale_prs, run_job_loop, send_daily_summary, start_scheduler
from tests.conftest import FakeGitHub, hours_ago, make_pull_request


# Jobs compare against the wall clock, so fixtures are relative to it too
def _open_pr(number: int, created_hours_ago: float) -> PullRequest:
    now = datetime.now(UTC)
    return make_pull_request(number, created_at=hours_ago(created_hours_ago, now), updated_at=now)


def _review(reviewer: str, submitted_hours_ago: float) -> Review:
    return Review(reviewer=reviewer, state="approved", submitted_at=hours_ago(submitted_hours_ago, datetime.now(UTC)))


class TestCheckStalePrs:
    def test_syncs_then_notifies_stale(self, app: PullPal, github: FakeGitHub, notifier: MagicMock) -> None:
        github.open_prs = [_open_pr(1, 50), _open_pr(2, 1)]

        stale = check_stale_prs(app)

        assert [n.number for n in stale] == [1]
        notifier.notify_stale_prs.assert_called_once()
        sent = notifier.notify_stale_prs.call_args[0][0]
        assert isinstance(sent[0], StalePRNotification)
        assert sent[0].age == "2d old"
        assert sent[0].review_count == 0

    def test_recently_reviewed_not_reported(self, app: PullPal, github: FakeGitHub, notifier: MagicMock) -> None:
        github.open_prs = [_open_pr(1, 50)]
        github.reviews = {1: [_review("bob", 0.5)]}

        assert check_stale_prs(app) == []
        notifier.notify_stale_prs.assert_not_called()

    def test_sync_failure_propagates(self, app: PullPal, github: FakeGitHub, notifier: MagicMock) -> None:
        github.fail_listing = True
        with pytest.raises(GitPlatformError):
            check_stale_prs(app)
        notifier.notify_stale_prs.assert_not_called()


def test_daily_summary(app: PullPal, github: FakeGitHub, notifier: MagicMock) -> None:
    github.open_prs = [
        _open_pr(1, 50),
        _open_pr(2, 3),
        _open_pr(3, 5),
    ]
    github.reviews = {3: [_review("bob", 1)]}

    summary = send_daily_summary(app)

    assert summary == DailySummary(total_open=3, needing_review=2, stale=1, avg_review_time="N/A")
    notifier.send_daily_summary.assert_called_once_with(summary)


class TestRunJobLoop:
    def test_failed_cycle_does_not_stop_loop(self, caplog: pytest.LogCaptureFixture) -> None:
        """A job error is logged and the next tick still runs."""
        job = MagicMock(side_effect=[GitPlatformError("502: Bad Gateway"), None])
        with patch("pullpal.scheduler.time.sleep", side_effect=[None, None, StopIteration]) as sleep:
            with caplog.at_level(logging.ERROR):
                with pytest.raises(StopIteration):
                    run_job_loop("GitHub sync", job, 900)

        assert job.call_count == 2
        sleep.assert_called_with(900)
        assert "Scheduled job GitHub sync failed" in caplog.text

    def test_sleeps_before_first_run(self) -> None:
        job = MagicMock()
        with patch("pullpal.scheduler.time.sleep", side_effect=StopIteration):
            with pytest.raises(StopIteration):
                run_job_loop("stale PR check", job, 60)
        job.assert_not_called()


def test_start_scheduler_starts_daemon_threads(app: PullPal) -> None:
    app.config.scheduler.initial_sync = False
    with patch("pullpal.scheduler.run_job_loop") as loop:
        threads = start_scheduler(app)
        for thread in threads:
            thread.join(timeout=2)

    assert len(threads) == 3
    assert all(t.daemon for t in threads)
    intervals = sorted(c[0][2] for c in loop.call_args_list)
    assert intervals == [900, 3600, 86400]


def test_initial_sync_runs_in_background(app: PullPal, github: FakeGitHub) -> None:
    github.open_prs = [_open_pr(4, 1)]
    with patch("pullpal.scheduler.run_job_loop"):
        threads = start_scheduler(app)
        for thread in threads:
            thread.join(timeout=2)

    assert len(threads) == 4
    assert app.store.numbers() == [4]
