"""Thin client for the GitLab REST API."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import requests

PUBLIC_HOST = "gitlab.com"
_TIMEOUT_SECONDS = 30


class GitlabApiError(Exception):
    """Raised when a GitLab API request fails; carries the HTTP status when there is one."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _segment(value: Any) -> str:
    return quote(str(value), safe="")


class GitlabClient:
    """Fetches raw GitLab API payloads as decoded JSON."""

    def __init__(self, session: requests.Session | None = None, host: str = PUBLIC_HOST) -> None:
        self.session = session if session is not None else requests.Session()
        self.host = host
        self.base_url = f"https://{host}/api/v4"

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self.base_url}/{path}"
        try:
            response = self.session.get(url, params=params, timeout=_TIMEOUT_SECONDS)
        except requests.RequestException as exc:
            raise GitlabApiError(f"GET {url} failed: {exc}") from exc
        if not response.ok:
            try:
                message = response.json().get("message", response.text)
            except (ValueError, AttributeError):
                message = response.text
            raise GitlabApiError(
                f"GET {url}: {response.status_code} {message}",
                status_code=response.status_code,
            )
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GitlabApiError(
                f"GET {url}: response is not JSON", status_code=response.status_code
            ) from exc

    def get_authorized_user(self) -> dict[str, Any]:
        """Return the profile of the user with id 1."""
        return self._get("users/1")

    def list_repository_branches(self, owner: str, repo_id: str) -> list[dict[str, Any]]:
        return self._get(f"projects/{_segment(repo_id)}/repository/branches")

    def get_branch_protection(self, owner: str, repo: str, branch: str) -> dict[str, Any]:
        return self._get(f"projects/{_segment(repo)}/protected_branches/{_segment(branch)}")

    def get_approval_configuration(self, project: str) -> dict[str, Any]:
        return self._get(f"projects/{_segment(project)}/approvals")

    def get_project_approval_rules(self, project: str) -> list[dict[str, Any]]:
        return self._get(f"projects/{_segment(project)}/approval_rules")

    def get_project_push_rules(self, project: str) -> dict[str, Any]:
        return self._get(f"projects/{_segment(project)}/push_rule")

    def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        return self._get(f"projects/{_segment(f'{owner}/{repo}')}")

    def get_organization(self, owner: str) -> dict[str, Any]:
        return self._get(f"groups/{_segment(owner)}")