"""Collects GitHub assets into the platform-neutral models."""

from __future__ import annotations

import base64
import binascii
import logging
from datetime import datetime, timedelta, timezone

from chainbench.github_client import GithubApiError, GithubClient
from chainbench.github_mapper import (
    to_branch_protection,
    to_branches,
    to_commit,
    to_commits,
    to_hooks,
    to_organization,
    to_pipeline,
    to_registry,
    to_repository,
    to_user,
    to_users,
)
from chainbench.models import (
    Branch,
    Organization,
    PackageRegistry,
    Protection,
    Repository,
    RepositoryCommit,
    User,
)
from chainbench.pipelines import Pipeline
from chainbench.utils import get_branch_name

logger = logging.getLogger(__name__)

SECURITY_MD_NAMES = ("SECURITY.md", "security.md", "Security.md")
PACKAGE_TYPES = ("npm", "maven", "rubygems", "nuget", "docker", "container")
COMMITS_HISTORY_MONTHS = 3


def _months_before(moment: datetime, months: int) -> datetime:
    """Step back whole months, letting overflowing days roll into the next month."""
    total = moment.year * 12 + moment.month - 1 - months
    year, month_index = divmod(total, 12)
    first = moment.replace(year=year, month=month_index + 1, day=1)
    return first + timedelta(days=moment.day - 1)


def patch_admin_roles(all_members: list[User], admins: list[User]) -> list[User]:
    """Mark every member who is also an admin with the admin role."""
    admin_logins = {admin.login for admin in admins}
    for member in all_members:
        if member.login in admin_logins:
            member.role = "admin"
    return all_members


class GithubAdapter:
    """Reads repository, organization and pipeline settings from GitHub."""

    def __init__(self, client: GithubClient) -> None:
        self.client = client

    def get_authorized_user(self) -> User | None:
        try:
            user = self.client.get_authorized_user()
        except GithubApiError:
            logger.error("error in authenticated user data", exc_info=True)
            raise
        return to_user(user)

    def get_repository(self, owner: str, repo: str, branch: str) -> Repository | None:
        try:
            payload = self.client.get_repository(owner, repo)
        except GithubApiError:
            logger.error("error in fetching repository data", exc_info=True)
            raise

        since = _months_before(datetime.now(timezone.utc), COMMITS_HISTORY_MONTHS)
        try:
            commits = self.client.list_commits(owner, repo, since)
        except GithubApiError as exc:
            logger.warning("failed to fetch commits data: %s", exc)
            commits = None

        try:
            branches = self.list_repository_branches(owner, repo)
        except GithubApiError as exc:
            logger.warning("failed to fetch branches data: %s", exc)
            branches = None

        has_security_md = self._contains_security_md(
            owner, repo, get_branch_name((payload or {}).get("default_branch") or "", branch)
        )

        try:
            collaborators = self.client.list_repository_collaborators(owner, repo)
        except GithubApiError as exc:
            logger.warning("failed to fetch collaborators data: %s", exc)
            collaborators = None

        try:
            hooks = self.client.list_repository_hooks(owner, repo)
        except GithubApiError as exc:
            logger.warning("failed to fetch hooks data: %s", exc)
            hooks = None

        return to_repository(
            payload,
            branches,
            to_users(collaborators),
            to_hooks(hooks),
            to_commits(commits),
            has_security_md,
        )

    def list_repository_branches(self, owner: str, repo: str) -> list[Branch] | None:
        """List branches, each with its full head commit; branches whose commit fails are left out."""
        try:
            branches = self.client.list_repository_branches(owner, repo)
        except GithubApiError:
            logger.error("error in fetching branches", exc_info=True)
            raise

        enhanced = []
        for branch in branches or ():
            sha = (branch.get("commit") or {}).get("sha") or ""
            try:
                commit = self.client.get_commit(owner, repo, sha)
            except GithubApiError as exc:
                logger.warning("failed to fetch branches commit: %s", exc)
                continue
            enhanced.append(
                {"name": branch.get("name"), "commit": commit, "protected": branch.get("protected")}
            )
        return to_branches(enhanced)

    def _contains_security_md(self, owner: str, repo: str, branch: str | None) -> bool:
        for name in SECURITY_MD_NAMES:
            try:
                file_content, _ = self.client.get_content(owner, repo, name, branch)
            except GithubApiError:
                continue
            if file_content is not None:
                return True
        return False

    def get_commit(self, owner: str, repo: str, sha: str) -> RepositoryCommit | None:
        try:
            commit = self.client.get_commit(owner, repo, sha)
        except GithubApiError:
            logger.error("error in fetching commit", exc_info=True)
            raise
        return to_commit(commit)

    def get_branch_protection(
        self, owner: str, repo: Repository, branch: str
    ) -> Protection | None:
        try:
            protection = self.client.get_branch_protection(owner, repo.name, branch)
        except GithubApiError:
            logger.error("error in fetching branch protection", exc_info=True)
            raise

        try:
            signatures = self.client.get_signatures_of_protected_branch(owner, repo.name, branch)
        except GithubApiError as exc:
            logger.warning("failed to fetch commit signature protection: %s", exc)
            signatures = None
        return to_branch_protection(protection, signatures)

    def get_organization(self, owner: str) -> Organization | None:
        try:
            org = self.client.get_organization(owner)
        except GithubApiError:
            logger.error("error in fetching organization", exc_info=True)
            raise

        try:
            hooks = self.client.list_organization_hooks(owner)
        except GithubApiError as exc:
            logger.warning("failed to fetch organization hooks: %s", exc)
            hooks = None
        return to_organization(org, to_hooks(hooks))

    def list_organization_members(self, organization: str) -> list[User]:
        try:
            all_members = self.client.list_organization_members(organization)
        except GithubApiError:
            logger.error("error in fetching members", exc_info=True)
            raise
        try:
            admins = self.client.list_organization_members(organization, role="admin")
        except GithubApiError:
            logger.error("error in fetching admins", exc_info=True)
            raise
        return patch_admin_roles(to_users(all_members), to_users(admins))

    def get_registry(self, organization: Organization | None) -> PackageRegistry:
        """Collect the organization's active packages; a failed listing leaves no packages."""
        if organization is None:
            raise ValueError("organization is required to read its registry")

        packages: list | None = []
        for package_type in PACKAGE_TYPES:
            try:
                found = self.client.list_organization_packages(organization.login, package_type)
            except GithubApiError as exc:
                logger.warning("failed to fetch org packages: %s", exc)
                packages = None
                break
            packages.extend(found or ())
        return to_registry(packages, organization.two_factor_requirement_enabled)

    def get_pipelines(self, owner: str, repo: str, branch: str) -> list[Pipeline]:
        try:
            workflows = self.client.get_workflows(owner, repo)
        except GithubApiError:
            logger.error("error in fetching workflows", exc_info=True)
            raise

        pipelines = []
        for workflow in (workflows or {}).get("workflows") or ():
            path = workflow.get("path")
            if not path:
                continue
            content = self.get_file_content(owner, repo, path, branch)
            if content is None:
                continue
            pipelines.append(to_pipeline(content))
        return pipelines

    def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> bytes | None:
        """Return the decoded file, or None when the file does not exist."""
        try:
            file_content, _ = self.client.get_content(owner, repo, path, ref)
        except GithubApiError as exc:
            if exc.status_code == 404:
                logger.warning("file %s not found", path)
                return None
            logger.error("error in fetching file content", exc_info=True)
            raise

        if file_content is None or file_content.get("content") is None:
            raise ValueError(f"{path} is not a file")
        try:
            return base64.b64decode(file_content["content"])
        except (binascii.Error, ValueError):
            logger.error("error in decoding file content", exc_info=True)
            raise

    def list_supported_checks_ids(self) -> list[str] | None:
        """Every check is supported on GitHub, which None stands for."""
        return None