"""Composition root: builds the store and everything that reads or writes it.

One PullPal instance per process. Tests build their own with fake
adapters and notifiers instead of touching process-global state.
"""

import logging

from pullpal.adapters.base import GitPlatformAdapter
from pullpal.adapters.github import GitHubAdapter
from pullpal.config import AppConfig
from pullpal.notifier.base import Notifier, NullNotifier
from pullpal.notifier.slack import SlackNotifier
from pullpal.services.metrics import MetricsAggregator
from pullpal.tracker.ingestion import EventIngestion
from pullpal.tracker.reconciler import Reconciler
from pullpal.tracker.store import PRStore

LOG = logging.getLogger("pullpal.app")


class PullPal:
    """Wired tracker components for one repository."""

    def __init__(
        self,
        config: AppConfig,
        adapter: GitPlatformAdapter,
        notifier: Notifier,
        store: PRStore | None = None,
    ) -> None:
        self.config = config
        self.adapter = adapter
        self.notifier = notifier
        self.store = store if store is not None else PRStore()
        self.ingestion = EventIngestion(self.store)
        self.reconciler = Reconciler(self.store, self.ingestion, adapter)
        self.metrics = MetricsAggregator(
            self.store,
            adapter,
            stale_hours=config.tracker.stale_pr_hours,
            closed_sample_size=config.metrics.closed_sample_size,
            merged_sample_size=config.metrics.merged_sample_size,
        )

    @property
    def owner(self) -> str:
        return self.config.bot.owner

    @property
    def repo(self) -> str:
        return self.config.bot.repo_name

    @property
    def stale_hours(self) -> int:
        return self.config.tracker.stale_pr_hours


def build_app(config: AppConfig) -> PullPal:
    """Create GitHub adapter and notifier from config and wire the tracker."""
    token = config.github_token_resolved
    if not token:
        LOG.warning("No GitHub token configured; API calls are unauthenticated")
    adapter = GitHubAdapter(token=token, api_url=config.github.api_url)

    slack_token = config.slack_token_resolved
    if slack_token:
        notifier: Notifier = SlackNotifier(slack_token, channel=config.slack.channel, api_url=config.slack.api_url)
    else:
        LOG.info("Slack notifications disabled (no SLACK_BOT_TOKEN)")
        notifier = NullNotifier()
    return PullPal(config, adapter, notifier)
