"""PullPal: pull request review lifecycle tracker and stale PR reminders."""

__version__ = "1.0.0"
