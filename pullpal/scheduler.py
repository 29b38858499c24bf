"""Scheduled jobs: periodic reconciliation, stale PR check, daily summary.

Each job runs in its own daemon thread on its own interval. A failed cycle
is logged and the loop carries on with the next tick.
"""

import logging
import threading
import time
from typing import Any, Callable, List

from pullpal.models import DailySummary, StalePRNotification
from pullpal.tracker.queries import format_pr_age, get_prs_needing_review, get_stale_prs

LOG = logging.getLogger("pullpal.scheduler")


def check_stale_prs(app: Any) -> List[StalePRNotification]:
    """Sync with GitHub, then notify about stale PRs.

    Raises GitPlatformError when the sync cannot list open PRs.
    """
    LOG.info("Running stale PR check...")
    app.reconciler.sync(app.owner, app.repo)
    stale = get_stale_prs(app.store.all(), app.stale_hours)
    if not stale:
        LOG.info("No stale PRs found")
        return []
    LOG.info("Found %s stale PR(s)", len(stale))
    notifications = [
        StalePRNotification(
            number=pr.number,
            title=pr.title,
            url=pr.url,
            author=pr.author,
            owner=pr.owner,
            repo=pr.repo,
            age=format_pr_age(pr),
            review_count=pr.review_count,
        )
        for pr in stale
    ]
    app.notifier.notify_stale_prs(notifications)
    return notifications


def send_daily_summary(app: Any) -> DailySummary:
    """Sync, compute metrics and post the daily summary."""
    LOG.info("Generating daily metrics summary...")
    app.reconciler.sync(app.owner, app.repo)
    metrics = app.metrics.get_pr_metrics(app.owner, app.repo)
    tracked = app.store.all()
    summary = DailySummary(
        total_open=len(tracked),
        needing_review=len(get_prs_needing_review(tracked)),
        stale=len(get_stale_prs(tracked, app.stale_hours)),
        avg_review_time=metrics.average_review_time,
    )
    app.notifier.send_daily_summary(summary)
    return summary


def periodic_sync(app: Any) -> None:
    LOG.info("Running periodic GitHub sync...")
    app.reconciler.sync(app.owner, app.repo)


def run_job_loop(name: str, job: Callable[[], Any], interval_seconds: int) -> None:
    """Loop: every interval_seconds run job; errors are logged, never fatal."""
    while True:
        time.sleep(interval_seconds)
        LOG.info("Triggered: %s", name)
        try:
            job()
        except Exception as e:
            LOG.exception("Scheduled job %s failed: %s", name, e)


def _start_thread(name: str, job: Callable[[], Any], interval_seconds: int) -> threading.Thread:
    thread = threading.Thread(
        target=run_job_loop,
        args=(name, job, interval_seconds),
        name=f"pullpal-{name.replace(' ', '-')}",
        daemon=True,
    )
    thread.start()
    return thread


def start_scheduler(app: Any) -> List[threading.Thread]:
    """Start one daemon thread per job; run the initial sync in the background."""
    cfg = app.config.scheduler
    jobs = [
        ("stale PR check", lambda: check_stale_prs(app), cfg.stale_check_interval_seconds),
        ("daily summary", lambda: send_daily_summary(app), cfg.daily_summary_interval_seconds),
        ("GitHub sync", lambda: periodic_sync(app), cfg.sync_interval_seconds),
    ]
    threads = [_start_thread(name, job, interval) for name, job, interval in jobs]
    LOG.info(
        "Scheduled tasks configured: stale check every %ss, daily summary every %ss, sync every %ss",
        cfg.stale_check_interval_seconds,
        cfg.daily_summary_interval_seconds,
        cfg.sync_interval_seconds,
    )
    if cfg.initial_sync:
        threads.append(_start_initial_sync(app))
    return threads


def _start_initial_sync(app: Any) -> threading.Thread:
    def _initial() -> None:
        LOG.info("Running initial sync...")
        try:
            periodic_sync(app)
        except Exception as e:
            LOG.exception("Initial sync failed: %s", e)

    thread = threading.Thread(target=_initial, name="pullpal-initial-sync", daemon=True)
    thread.start()
    return thread
