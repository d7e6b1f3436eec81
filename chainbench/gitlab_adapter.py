"""Collects GitLab assets into the platform-neutral models."""

from __future__ import annotations

import logging

from chainbench.gitlab_client import GitlabApiError, GitlabClient
from chainbench.gitlab_mapper import (
    to_branch_protection,
    to_branches,
    to_organization,
    to_repository,
    to_user,
)
from chainbench.models import (
    Branch,
    Organization,
    PackageRegistry,
    Protection,
    Repository,
    User,
)
from chainbench.pipelines import Pipeline

logger = logging.getLogger(__name__)

SUPPORTED_CHECKS_IDS = (
    "1.1.3", "1.1.4", "1.1.6", "1.1.11", "1.1.12", "1.1.13", "1.1.16", "1.3.5", "1.3.8",
)


class GitlabAdapter:
    """Reads project, group and branch protection settings from GitLab."""

    def __init__(self, client: GitlabClient) -> None:
        self.client = client

    def get_authorized_user(self) -> User | None:
        try:
            user = self.client.get_authorized_user()
        except GitlabApiError:
            logger.error("error in authenticated user data", exc_info=True)
            raise
        return to_user(user)

    def get_repository(self, owner: str, repo: str, branch: str) -> Repository | None:
        """Read a project and its branches; collaborators, hooks and commits are not read."""
        try:
            payload = self.client.get_repository(owner, repo)
        except GitlabApiError:
            logger.error("error in fetching repository data", exc_info=True)
            raise

        project_id = str(int((payload or {}).get("id") or 0))
        try:
            branches = self.list_repository_branches(owner, project_id)
        except GitlabApiError as exc:
            logger.warning("failed to fetch branches data: %s", exc)
            branches = None

        return to_repository(payload, branches, None, None, None, False)

    def list_repository_branches(self, owner: str, repo: str) -> list[Branch] | None:
        try:
            branches = self.client.list_repository_branches(owner, repo)
        except GitlabApiError:
            logger.error("error in fetching branches", exc_info=True)
            raise
        enhanced = [
            {"name": b.get("name"), "commit": b.get("commit"), "protected": b.get("protected")}
            for b in branches or ()
        ]
        return to_branches(enhanced)

    def get_organization(self, owner: str) -> Organization | None:
        try:
            group = self.client.get_organization(owner)
        except GitlabApiError:
            logger.error("error in fetching organization", exc_info=True)
            raise
        return to_organization(group, None)

    def get_branch_protection(
        self, owner: str, repo: Repository, branch: str
    ) -> Protection | None:
        project_id = str(repo.id)
        try:
            protection = self.client.get_branch_protection(owner, project_id, branch)
        except GitlabApiError:
            logger.error("error in fetching branch protection", exc_info=True)
            raise

        try:
            approval_config = self.client.get_approval_configuration(project_id)
        except GitlabApiError as exc:
            logger.warning("failed to fetch approval configuration: %s", exc)
            approval_config = None

        try:
            push_rules = self.client.get_project_push_rules(project_id)
        except GitlabApiError as exc:
            logger.warning("failed to fetch push rules: %s", exc)
            push_rules = None

        try:
            approval_rules = self.client.get_project_approval_rules(project_id)
        except GitlabApiError as exc:
            logger.warning("failed to fetch approval rules: %s", exc)
            approval_rules = None

        try:
            project = self.client.get_repository(owner, repo.name)
        except GitlabApiError as exc:
            logger.warning("failed to fetch project: %s", exc)
            project = None

        return to_branch_protection(project, protection, approval_config, approval_rules, push_rules)

    def list_organization_members(self, organization: str) -> list[User] | None:
        """Group members are not read from GitLab, so there are none to report."""
        return None

    def get_registry(self, organization: Organization | None) -> PackageRegistry | None:
        """The GitLab package registry is not read, so there is none to report."""
        return None

    def get_pipelines(self, owner: str, repo: str, branch: str) -> list[Pipeline] | None:
        """GitLab pipelines are not read, so there are none to report."""
        return None

    def list_supported_checks_ids(self) -> list[str]:
        """Return the ids of the checks that GitLab data can answer."""
        return list(SUPPORTED_CHECKS_IDS)