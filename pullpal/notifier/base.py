"""Abstract notification channel."""

from abc import ABC, abstractmethod
from typing import List

from pullpal.models import DailySummary, PRNotification, PRReviewNotification, StalePRNotification


class Notifier(ABC):
    """Best-effort delivery of PR notifications.

    Implementations log delivery failures and never raise them.
    """

    @abstractmethod
    def notify_pr_opened(self, pr: PRNotification) -> None:
        ...

    @abstractmethod
    def notify_pr_reviewed(self, pr: PRReviewNotification) -> None:
        ...

    @abstractmethod
    def notify_pr_merged(self, pr: PRNotification) -> None:
        ...

    @abstractmethod
    def notify_stale_prs(self, prs: List[StalePRNotification]) -> None:
        ...

    @abstractmethod
    def send_daily_summary(self, summary: DailySummary) -> None:
        ...


class NullNotifier(Notifier):
    """Used when no chat token is configured: drops every notification."""

    def notify_pr_opened(self, pr: PRNotification) -> None:
        pass

    def notify_pr_reviewed(self, pr: PRReviewNotification) -> None:
        pass

    def notify_pr_merged(self, pr: PRNotification) -> None:
        pass

    def notify_stale_prs(self, prs: List[StalePRNotification]) -> None:
        pass

    def send_daily_summary(self, summary: DailySummary) -> None:
        pass
