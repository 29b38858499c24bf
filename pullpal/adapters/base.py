"""Abstract base for Git platform adapters (source of truth for PR state)."""

from abc import ABC, abstractmethod
from typing import List

from pullpal.models import PullRequest, Review


class GitPlatformError(Exception):
    """Raised when a Git platform API call fails."""

    pass


class GitPlatformAdapter(ABC):
    """Read-only interface to the platform holding authoritative PR state.

    repo is the full name, e.g. owner/repo.
    """

    @abstractmethod
    def list_open_prs(self, repo: str) -> List[PullRequest]:
        """List all currently open pull requests (drafts included)."""
        ...

    @abstractmethod
    def list_reviews(self, repo: str, pr_number: int) -> List[Review]:
        """List reviews of a PR in submission order."""
        ...

    @abstractmethod
    def list_closed_prs(self, repo: str, per_page: int = 50, page: int = 1) -> List[PullRequest]:
        """List closed pull requests, most recently updated first."""
        ...

    def list_prs(self, repo: str, state: str = "all", per_page: int = 100) -> List[PullRequest]:
        """List pull requests in any state, most recently created first. Override if needed."""
        raise NotImplementedError("list_prs")
