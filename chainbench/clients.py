"""Selects the SCM adapter for a repository URL and gathers its assets."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from typing import Any, Protocol, TypeVar, runtime_checkable
from urllib.parse import urlsplit

from chainbench.github_adapter import GithubAdapter
from chainbench.github_client import GithubApiError, GithubClient
from chainbench.gitlab_adapter import GitlabAdapter
from chainbench.gitlab_client import GitlabApiError, GitlabClient
from chainbench.models import (
    AssetsData,
    Branch,
    Organization,
    PackageRegistry,
    Protection,
    Repository,
    User,
)
from chainbench.pipelines import Pipeline, PipelineParseError
from chainbench.utils import get_branch_name, get_http_client

logger = logging.getLogger(__name__)

GITHUB_ENDPOINT = "github.com"
GITLAB_ENDPOINT = "gitlab.com"

GITHUB_PLATFORM = "github"
GITLAB_PLATFORM = "gitlab"

T = TypeVar("T")

_FETCH_ERRORS = (GithubApiError, GitlabApiError, PipelineParseError, ValueError, re.error)


@runtime_checkable
class ClientAdapter(Protocol):
    """What every SCM adapter offers to the benchmark."""

    def list_supported_checks_ids(self) -> list[str] | None: ...

    def get_repository(self, owner: str, repo: str, branch: str) -> Repository | None: ...

    def list_repository_branches(self, owner: str, repo: str) -> list[Branch] | None: ...

    def get_branch_protection(
        self, owner: str, repo: Repository, branch: str
    ) -> Protection | None: ...

    def get_organization(self, owner: str) -> Organization | None: ...

    def get_registry(self, organization: Organization | None) -> PackageRegistry | None: ...

    def list_organization_members(self, organization: str) -> list[User] | None: ...

    def get_pipelines(self, owner: str, repo: str, branch: str) -> list[Pipeline] | None: ...

    def get_authorized_user(self) -> User | None: ...


class RepoUrlError(ValueError):
    """Raised when a repository URL cannot be split into host, namespace and name."""


def _attempt(action: Callable[..., T], *args: Any) -> tuple[T | None, bool]:
    """Run a fetch whose failure is tolerated; return its result and whether it succeeded."""
    try:
        return action(*args), True
    except _FETCH_ERRORS as exc:
        logger.debug("ignored fetch failure: %s", exc)
        return None, False


def _fetching_finished(what: str) -> None:
    logger.info("Fetching %s Finished", what)


def fetch_client_data(
    access_token: str, repo_url: str, scm_platform: str, branch: str
) -> tuple[AssetsData, list[str] | None]:
    """Collect every asset of the repository; return them with the ids of the supported checks.

    A None list of check ids means every check is supported.
    """
    host, org_name, repo_name = get_repo_info(repo_url)

    if host == GITHUB_ENDPOINT:
        scm_platform = GITHUB_PLATFORM
    elif host == GITLAB_ENDPOINT:
        scm_platform = GITLAB_PLATFORM

    adapter = get_client_adapter(scm_platform, access_token, host)
    authorized_user, _ = _attempt(adapter.get_authorized_user)

    repo, _ = _attempt(adapter.get_repository, org_name, repo_name, branch)
    _fetching_finished("Repository Settings")

    protection = None
    pipelines = None
    org = None
    registry = None

    if repo is not None:
        branch_name = get_branch_name(repo.default_branch or "", branch)

        _fetching_finished("Branch Protection Settings")
        protection, _ = _attempt(adapter.get_branch_protection, org_name, repo, branch_name)

        pipelines, _ = _attempt(adapter.get_pipelines, org_name, repo_name, branch_name)
        _fetching_finished("Pipelines")

        if repo.owner is not None and repo.owner.type == "Organization":
            org, _ = _attempt(adapter.get_organization, org_name)
            _fetching_finished("Organization Settings")

            registry, _ = _attempt(adapter.get_registry, org)

            members, ok = _attempt(adapter.list_organization_members, org_name)
            if ok and org is not None:
                org.members = members
                _fetching_finished("Members")

    checks_ids = adapter.list_supported_checks_ids()

    assets = AssetsData(
        authorized_user=authorized_user,
        organization=org,
        repository=repo,
        branch_protections=protection,
        pipelines=pipelines,
        registry=registry,
    )
    return assets, checks_ids


def get_repo_info(repo_url: str) -> tuple[str, str, str]:
    """Split a repository URL into (host, namespace, repository name).

    Raises RepoUrlError when the URL has no scheme or too few path segments.
    """
    try:
        parts = urlsplit(repo_url)
    except ValueError as exc:
        logger.error("error in parsing repoUrl %s: %s", repo_url, exc)
        raise RepoUrlError(str(exc)) from exc
    if not parts.scheme:
        logger.error("error in parsing repoUrl %s", repo_url)
        raise RepoUrlError("error in parsing the host")

    path = parts.path.split("/")
    if len(path) < 3:
        raise RepoUrlError(f"missing org/repo in the repository url: {repo_url}")
    *namespace_parts, repo = path
    namespace = "/".join(namespace_parts).lstrip("/")
    host = parts.netloc.rpartition("@")[2]
    return host, namespace, repo


def get_client_adapter(scm_platform: str, access_token: str, host: str) -> ClientAdapter:
    """Build the adapter for the platform, authenticated with the access token.

    Raises ValueError for a platform that has no adapter.
    """
    session = get_http_client(access_token)
    if scm_platform == GITHUB_PLATFORM:
        return GithubAdapter(GithubClient(session, host))
    if scm_platform == GITLAB_PLATFORM:
        session.headers["PRIVATE-TOKEN"] = access_token
        return GitlabAdapter(GitlabClient(session, host))
    raise ValueError(f"unsupported SCM platform: {scm_platform!r}")