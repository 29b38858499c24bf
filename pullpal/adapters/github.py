"""GitHub API adapter."""

from datetime import datetime
from typing import Any, Dict, List

import requests

from pullpal.adapters.base import GitPlatformAdapter, GitPlatformError
from pullpal.models import PullRequest, Review

MAX_PER_PAGE = 100
# Safety cap for open PR pagination
MAX_PAGES = 20


def _parse_iso(s: str | None) -> datetime | None:
    if not s:
        return None
    return datetime.fromisoformat(s.replace("Z", "+00:00"))


def _pr_from_api(data: Dict[str, Any]) -> PullRequest:
    user = data.get("user") or {}
    return PullRequest(
        number=data["number"],
        title=data.get("title") or "",
        url=data.get("html_url") or "",
        author=user.get("login") or "unknown",
        state=data.get("state", "open"),
        created_at=_parse_iso(data["created_at"]),
        updated_at=_parse_iso(data.get("updated_at")),
        is_draft=bool(data.get("draft")),
        merged_at=_parse_iso(data.get("merged_at")),
    )


def _review_from_api(data: Dict[str, Any]) -> Review:
    user = data.get("user") or {}
    return Review(
        reviewer=user.get("login") or "unknown",
        state=(data.get("state") or "commented").lower(),
        submitted_at=_parse_iso(data.get("submitted_at")),
    )


class GitHubAdapter(GitPlatformAdapter):
    """GitHub REST API implementation."""

    def __init__(self, token: str | None, api_url: str = "https://api.github.com") -> None:
        self._api_url = api_url.rstrip("/")
        self._session = requests.Session()
        if token:
            self._session.headers["Authorization"] = f"token {token}"
        self._session.headers["Accept"] = "application/vnd.github.v3+json"

    def _request(
        self,
        method: str,
        path: str,
        params: Dict[str, Any] | None = None,
    ) -> requests.Response:
        url = f"{self._api_url}{path}" if path.startswith("/") else f"{self._api_url}/{path}"
        try:
            resp = self._session.request(method, url, params=params, timeout=30)
        except requests.RequestException as e:
            raise GitPlatformError(f"{method} {path} failed: {e}") from e
        if resp.status_code >= 400:
            msg = resp.text or resp.reason or str(resp.status_code)
            try:
                msg = resp.json().get("message", msg)
            except (ValueError, AttributeError):
                pass
            raise GitPlatformError(f"{resp.status_code}: {msg}")
        return resp

    def _list_pulls(self, repo: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        resp = self._request("GET", f"/repos/{repo}/pulls", params=params)
        return resp.json() or []

    def list_open_prs(self, repo: str) -> List[PullRequest]:
        prs: List[PullRequest] = []
        for page in range(1, MAX_PAGES + 1):
            data = self._list_pulls(repo, {"state": "open", "per_page": MAX_PER_PAGE, "page": page})
            prs.extend(_pr_from_api(d) for d in data)
            if len(data) < MAX_PER_PAGE:
                break
        return prs

    def list_reviews(self, repo: str, pr_number: int) -> List[Review]:
        resp = self._request(
            "GET",
            f"/repos/{repo}/pulls/{pr_number}/reviews",
            params={"per_page": MAX_PER_PAGE},
        )
        data = resp.json() or []
        return [_review_from_api(d) for d in data]

    def list_closed_prs(self, repo: str, per_page: int = 50, page: int = 1) -> List[PullRequest]:
        data = self._list_pulls(
            repo,
            {
                "state": "closed",
                "per_page": min(per_page, MAX_PER_PAGE),
                "page": page,
                "sort": "updated",
                "direction": "desc",
            },
        )
        return [_pr_from_api(d) for d in data]

    def list_prs(self, repo: str, state: str = "all", per_page: int = 100) -> List[PullRequest]:
        data = self._list_pulls(
            repo,
            {
                "state": state,
                "per_page": min(per_page, MAX_PER_PAGE),
                "sort": "created",
                "direction": "desc",
            },
        )
        return [_pr_from_api(d) for d in data]
