"""Thin client for the GitHub REST API."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import requests

PUBLIC_HOST = "github.com"
PUBLIC_API_ROOT = "https://api.github.com"
_ACCEPT = "application/vnd.github+json"
_TIMEOUT_SECONDS = 30


class GithubApiError(Exception):
    """Raised when a GitHub API request fails; carries the HTTP status when there is one."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


def _rfc3339(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class GithubClient:
    """Fetches raw GitHub API payloads as decoded JSON."""

    def __init__(self, session: requests.Session | None = None, host: str = PUBLIC_HOST) -> None:
        self.session = session if session is not None else requests.Session()
        self.host = host
        if host == PUBLIC_HOST:
            self.base_url = PUBLIC_API_ROOT
        else:
            self.base_url = f"https://{host}/api/v3"

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(
                url, params=params, headers={"Accept": _ACCEPT}, timeout=_TIMEOUT_SECONDS
            )
        except requests.RequestException as exc:
            raise GithubApiError(f"GET {url} failed: {exc}") from exc
        if not response.ok:
            try:
                message = response.json().get("message", response.text)
            except (ValueError, AttributeError):
                message = response.text
            raise GithubApiError(
                f"GET {url}: {response.status_code} {message}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GithubApiError(
                f"GET {url}: response is not JSON", status_code=response.status_code
            ) from exc

    def _repo_path(self, owner: str, repo: str, *rest: Any) -> str:
        return "/".join(["repos", _segment(owner), _segment(repo), *(_segment(r) for r in rest)])

    def get_authorized_user(self) -> dict[str, Any]:
        return self._get("user")

    def list_organization_members(
        self, organization: str, role: str | None = None
    ) -> list[dict[str, Any]]:
        params = {"role": role} if role else None
        return self._get(f"orgs/{_segment(organization)}/members", params)

    def list_repository_branches(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return self._get(self._repo_path(owner, repo, "branches"))

    def get_repository_branch(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        return self._get(self._repo_path(owner, repo, "branches", branch))

    def get_commit(self, owner: str, repo: str, sha: str) -> dict[str, Any]:
        return self._get(self._repo_path(owner, repo, "commits", sha))

    def list_commits(
        self, owner: str, repo: str, since: datetime | None = None
    ) -> list[dict[str, Any]]:
        params = {"since": _rfc3339(since)} if since is not None else None
        return self._get(self._repo_path(owner, repo, "commits"), params)

    def get_branch_protection(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        return self._get(self._repo_path(owner, repo, "branches", branch, "protection"))

    def get_signatures_of_protected_branch(
        self, owner: str, repo: str, branch: str
    ) -> dict[str, Any]:
        return self._get(
            self._repo_path(owner, repo, "branches", branch, "protection", "required_signatures")
        )

    def list_repository_collaborators(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return self._get(self._repo_path(owner, repo, "collaborators"))

    def list_pull_requests_with_commit(
        self, owner: str, repo: str, sha: str
    ) -> list[dict[str, Any]]:
        return self._get(self._repo_path(owner, repo, "commits", sha, "pulls"))

    def list_pull_request_reviews(
        self, owner: str, repo: str, number: int
    ) -> list[dict[str, Any]]:
        return self._get(self._repo_path(owner, repo, "pulls", number, "reviews"))

    def list_repository_topics(self, owner: str, repo: str) -> list[str]:
        payload = self._get(self._repo_path(owner, repo, "topics")) or {}
        return list(payload.get("names") or [])

    def list_pull_request_commits(
        self, owner: str, repo: str, number: int
    ) -> list[dict[str, Any]]:
        return self._get(self._repo_path(owner, repo, "pulls", number, "commits"))

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        return self._get(self._repo_path(owner, repo))

    def get_organization(self, owner: str) -> dict[str, Any]:
        return self._get(f"orgs/{_segment(owner)}")

    def get_workflows(self, owner: str, repo: str) -> dict[str, Any]:
        return self._get(self._repo_path(owner, repo, "actions", "workflows"))

    def get_content(
        self, owner: str, repo: str, path: str, ref: str | None = None
    ) -> tuple[dict[str, Any] | None, list[dict[str, Any]] | None]:
        """Return (file, None) for a file or (None, entries) for a directory."""
        url_path = f"{self._repo_path(owner, repo, 'contents')}/{quote(path.lstrip('/'), safe='/')}"
        params = {"ref": ref} if ref else None
        payload = self._get(url_path, params)
        if isinstance(payload, list):
            return None, payload
        return payload, None

    def list_organization_hooks(self, owner: str) -> list[dict[str, Any]]:
        return self._get(f"orgs/{_segment(owner)}/hooks")

    def list_repository_hooks(self, owner: str, repo: str) -> list[dict[str, Any]]:
        return self._get(self._repo_path(owner, repo, "hooks"))

    def list_organization_packages(self, owner: str, package_type: str) -> list[dict[str, Any]]:
        return self._get(
            f"orgs/{_segment(owner)}/packages",
            {"state": "active", "package_type": package_type},
        )