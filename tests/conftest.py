"""Shared fixtures: fixed clock, in-memory GitHub stand-in, wired app."""

from datetime import UTC, datetime, timedelta
from typing import Dict, List
from unittest.mock import MagicMock

import pytest

from pullpal.adapters.base import GitPlatformAdapter, GitPlatformError
from pullpal.app import PullPal
from pullpal.config import AppConfig, BotConfig
from pullpal.models import PRData, PullRequest, Review
from pullpal.notifier.base import Notifier

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


def hours_ago(hours: float, now: datetime = NOW) -> datetime:
    return now - timedelta(hours=hours)


def make_pr_data(number: int = 1, created_hours_ago: float = 30, **overrides) -> PRData:
    fields = {
        "number": number,
        "title": f"PR {number}",
        "url": f"https://github.com/octo/repo/pull/{number}",
        "author": "alice",
        "owner": "octo",
        "repo": "repo",
        "created_at": hours_ago(created_hours_ago),
    }
    fields.update(overrides)
    return PRData(**fields)


def make_pull_request(number: int, created_hours_ago: float = 30, **overrides) -> PullRequest:
    fields = {
        "number": number,
        "title": f"PR {number}",
        "url": f"https://github.com/octo/repo/pull/{number}",
        "author": "alice",
        "created_at": hours_ago(created_hours_ago),
        "updated_at": hours_ago(2),
    }
    fields.update(overrides)
    return PullRequest(**fields)


def make_review(reviewer: str, submitted_hours_ago: float | None, state: str = "approved") -> Review:
    submitted_at = hours_ago(submitted_hours_ago) if submitted_hours_ago is not None else None
    return Review(reviewer=reviewer, state=state, submitted_at=submitted_at)


class FakeGitHub(GitPlatformAdapter):
    """In-memory source of truth with switchable failures."""

    def __init__(self) -> None:
        self.open_prs: List[PullRequest] = []
        self.closed_prs: List[PullRequest] = []
        self.all_prs: List[PullRequest] = []
        self.reviews: Dict[int, List[Review]] = {}
        self.failing_reviews: set[int] = set()
        self.fail_listing = False
        self.review_calls: List[int] = []

    def list_open_prs(self, repo: str) -> List[PullRequest]:
        if self.fail_listing:
            raise GitPlatformError("502: Bad Gateway")
        return list(self.open_prs)

    def list_reviews(self, repo: str, pr_number: int) -> List[Review]:
        self.review_calls.append(pr_number)
        if pr_number in self.failing_reviews:
            raise GitPlatformError(f"404: reviews of #{pr_number} not found")
        return list(self.reviews.get(pr_number, []))

    def list_closed_prs(self, repo: str, per_page: int = 50, page: int = 1) -> List[PullRequest]:
        if self.fail_listing:
            raise GitPlatformError("502: Bad Gateway")
        return list(self.closed_prs[:per_page])

    def list_prs(self, repo: str, state: str = "all", per_page: int = 100) -> List[PullRequest]:
        if self.fail_listing:
            raise GitPlatformError("502: Bad Gateway")
        return list(self.all_prs[:per_page])


@pytest.fixture
def github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(bot=BotConfig(repository="octo/repo"))


@pytest.fixture
def notifier() -> MagicMock:
    return MagicMock(spec=Notifier)


@pytest.fixture
def app(config: AppConfig, github: FakeGitHub, notifier: MagicMock) -> PullPal:
    return PullPal(config, github, notifier)
