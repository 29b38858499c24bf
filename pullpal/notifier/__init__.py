"""Notification channels for PR events, stale reminders and summaries."""

from pullpal.notifier.base import Notifier, NullNotifier
from pullpal.notifier.slack import SlackNotifier

__all__ = ["Notifier", "NullNotifier", "SlackNotifier"]
