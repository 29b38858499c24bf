"""Git platform adapters (source of truth for pull request state)."""

from pullpal.adapters.base import GitPlatformAdapter, GitPlatformError
from pullpal.adapters.github import GitHubAdapter

__all__ = ["GitHubAdapter", "GitPlatformAdapter", "GitPlatformError"]
