"""
PullPal daemon: webhook server plus scheduled jobs.

Listens for GitHub webhooks and keeps the in-memory PR tracker current;
reconciles with GitHub on startup and on an interval, checks for stale PRs
and posts a daily summary. Tracker state is rebuilt from GitHub on every
start.
"""

from pullpal.app import PullPal, build_app
from pullpal.config import AppConfig
from pullpal.logging import PullPalLogging
from pullpal.scheduler import start_scheduler
from pullpal.webhook.server import run_webhook_server


def run_daemon(config: AppConfig, app: PullPal | None = None) -> None:
    """Run the scheduler threads and the webhook server (blocks)."""
    logs = PullPalLogging(config.logging)
    logs.setup()
    log = logs.get_logger("pullpal.daemon")
    app = app or build_app(config)

    if not config.webhook.enabled:
        log.warning("Webhook disabled in config; tracker relies on periodic sync only.")
    log.info(
        "PullPal started | repo=%s | webhook=%s | scheduler=%s | stale_hours=%s",
        config.bot.repository,
        config.webhook.enabled,
        config.scheduler.enabled,
        config.tracker.stale_pr_hours,
    )

    if config.scheduler.enabled:
        threads = start_scheduler(app)
    else:
        threads = []
    if config.webhook.enabled:
        run_webhook_server(app)
    else:
        for thread in threads:
            thread.join()
