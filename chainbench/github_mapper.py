"""Conversion of GitHub REST API payloads into the platform-neutral models."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import fields
from datetime import datetime
from typing import Any

from chainbench.models import (
    AdminEnforcement,
    App,
    Branch,
    BranchRestrictions,
    CommitAuthor,
    DismissalRestrictions,
    Hook,
    HookConfig,
    InstallationPermissions,
    License,
    Organization,
    Package,
    PackageRegistry,
    Plan,
    Protection,
    PullRequestReviewsEnforcement,
    Repository,
    RepositoryCommit,
    RequiredStatusChecks,
    Team,
    User,
)
from chainbench.pipelines import Pipeline, parse_github_workflow
from chainbench.utils import parse_timestamp

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]

_DIGITS = re.compile(r"[+-]?\d+")
_HOOK_CONFIG_KEYS = ("content_type", "insecure_ssl", "url", "secret")


def _timestamp(value: Any) -> datetime | None:
    """Read a timestamp given as a datetime, Unix seconds or an RFC3339 string."""
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str) and not _DIGITS.fullmatch(value):
        return parse_timestamp(f'"{value}"')
    return parse_timestamp(value)


def _enabled(payload: Payload, key: str) -> bool:
    section = payload.get(key) or {}
    return bool(section.get("enabled", False))


def to_repository(
    repo: Payload | None,
    branches: list[Branch] | None,
    collaborators: list[User] | None,
    hooks: list[Hook] | None,
    commits: list[RepositoryCommit] | None,
    is_contains_security_md: bool,
) -> Repository | None:
    """Build a Repository from a GitHub repository payload and related assets."""
    if repo is None:
        return None
    return Repository(
        id=repo.get("id"),
        node_id=repo.get("node_id"),
        owner=to_user(repo.get("owner")),
        name=repo.get("name"),
        description=repo.get("description"),
        default_branch=repo.get("default_branch"),
        master_branch=repo.get("master_branch"),
        created_at=_timestamp(repo.get("created_at")),
        pushed_at=_timestamp(repo.get("pushed_at")),
        updated_at=_timestamp(repo.get("updated_at")),
        language=repo.get("language"),
        fork=repo.get("fork"),
        forks_count=repo.get("forks_count"),
        network_count=repo.get("network_count"),
        open_issues_count=repo.get("open_issues_count"),
        stargazers_count=repo.get("stargazers_count"),
        subscribers_count=repo.get("subscribers_count"),
        size=repo.get("size"),
        auto_init=repo.get("auto_init"),
        allow_rebase_merge=repo.get("allow_rebase_merge"),
        allow_squash_merge=repo.get("allow_squash_merge"),
        allow_merge_commit=repo.get("allow_merge_commit"),
        topics=repo.get("topics"),
        license=to_license(repo.get("license")),
        is_private=repo.get("private"),
        has_issues=repo.get("has_issues"),
        license_template=repo.get("license_template"),
        gitignore_template=repo.get("gitignore_template"),
        archived=repo.get("archived"),
        team_id=repo.get("team_id"),
        url=repo.get("url"),
        branches=branches,
        collaborators=collaborators,
        is_contains_security_md=is_contains_security_md,
        commits=commits,
        hooks=hooks,
    )


def to_license(license: Payload | None) -> License | None:
    """Build a License; its key carries the licence name."""
    if license is None:
        return None
    return License(
        key=license.get("name"),
        name=license.get("name"),
        url=license.get("url"),
        spdx_id=license.get("spdx_id"),
        html_url=license.get("html_url"),
        featured=license.get("featured"),
        description=license.get("description"),
        implementation=license.get("implementation"),
        permissions=license.get("permissions"),
        conditions=license.get("conditions"),
        limitations=license.get("limitations"),
        body=license.get("body"),
    )


def to_plan(plan: Payload | None) -> Plan | None:
    if plan is None:
        return None
    return Plan(
        name=plan.get("name"),
        space=plan.get("space"),
        collaborators=plan.get("collaborators"),
        private_repos=plan.get("private_repos"),
    )


def to_organization(org: Payload | None, hooks: list[Hook] | None) -> Organization | None:
    """Build an Organization; GitHub always limits repository and issue deletion."""
    if org is None:
        return None
    return Organization(
        login=org.get("login"),
        id=org.get("id"),
        node_id=org.get("node_id"),
        name=org.get("name"),
        description=org.get("description"),
        public_repos=org.get("public_repos"),
        created_at=_timestamp(org.get("created_at")),
        updated_at=_timestamp(org.get("updated_at")),
        total_private_repos=org.get("total_private_repos"),
        owned_private_repos=org.get("owned_private_repos"),
        collaborators=org.get("collaborators"),
        type=org.get("type"),
        plan=to_plan(org.get("plan")),
        default_repo_permission=org.get("default_repository_permission"),
        default_repo_settings=org.get("default_repository_settings"),
        members_can_create_repos=org.get("members_can_create_repositories"),
        members_can_create_public_repos=org.get("members_can_create_public_repositories"),
        members_can_create_private_repos=org.get("members_can_create_private_repositories"),
        members_can_create_internal_repos=org.get("members_can_create_internal_repositories"),
        two_factor_requirement_enabled=org.get("two_factor_requirement_enabled"),
        is_verified=org.get("is_verified"),
        is_repository_deletion_limited=True,
        is_issue_deletion_limited=True,
        hooks=hooks,
    )


def to_branch_protection(
    protection: Payload | None, signatures: Payload | None
) -> Protection | None:
    """Build a Protection from a branch protection and its signature settings."""
    if protection is None:
        return None
    enforce_admins = protection.get("enforce_admins") or {}
    return Protection(
        required_status_checks=to_required_status_checks(
            protection.get("required_status_checks")
        ),
        required_pull_request_reviews=to_pull_request_reviews_enforcement(
            protection.get("required_pull_request_reviews")
        ),
        enforce_admins=AdminEnforcement(enabled=bool(enforce_admins.get("enabled", False))),
        restrictions=to_branch_restrictions(protection.get("restrictions")),
        require_linear_history=_enabled(protection, "required_linear_history"),
        allow_force_pushes=_enabled(protection, "allow_force_pushes"),
        allow_deletions=_enabled(protection, "allow_deletions"),
        required_conversation_resolution=_enabled(
            protection, "required_conversation_resolution"
        ),
        required_signed_commit=bool((signatures or {}).get("enabled") or False),
    )


def to_branches(branches: Iterable[Payload] | None) -> list[Branch] | None:
    """Map branches; an empty or missing list gives None."""
    if branches is None:
        return None
    return [to_branch(branch) for branch in branches] or None


def to_branch(branch: Payload | None) -> Branch | None:
    if branch is None:
        return None
    return Branch(
        name=branch.get("name"),
        commit=to_commit(branch.get("commit")),
        protected=branch.get("protected"),
    )


def to_registry(
    packages: Iterable[Payload] | None, two_factor_requirement_enabled: bool | None
) -> PackageRegistry:
    registry = PackageRegistry(two_factor_requirement_enabled=two_factor_requirement_enabled)
    if packages is not None:
        registry.packages = to_packages(packages)
    return registry


def to_packages(packages: Iterable[Payload] | None) -> list[Package] | None:
    if packages is None:
        return None
    return [to_package(package) for package in packages]


def to_package(package: Payload | None) -> Package | None:
    if package is None:
        return None
    return Package(
        id=package.get("id"),
        name=package.get("name"),
        package_type=package.get("package_type"),
        html_url=package.get("html_url"),
        created_at=_timestamp(package.get("created_at")),
        updated_at=_timestamp(package.get("updated_at")),
        owner=to_user(package.get("owner")),
        version=(package.get("package_version") or {}).get("version"),
        url=package.get("url"),
        version_count=package.get("version_count"),
        visibility=package.get("visibility"),
        repository=to_repository(package.get("repository"), None, None, None, None, False),
    )


def to_branch_restrictions(restrictions: Payload | None) -> BranchRestrictions | None:
    if restrictions is None:
        return None
    return BranchRestrictions(
        users=to_users(restrictions.get("users")),
        teams=to_teams(restrictions.get("teams")),
        apps=to_apps(restrictions.get("apps")),
    )


def to_commit(commit: Payload | None) -> RepositoryCommit | None:
    if commit is None:
        return None
    return RepositoryCommit(
        node_id=commit.get("node_id"),
        sha=commit.get("sha"),
        author=to_author(commit),
        committer=to_commit_author((commit.get("commit") or {}).get("committer")),
        url=commit.get("url"),
        verification=None,
    )


def to_commits(commits: Iterable[Payload] | None) -> list[RepositoryCommit]:
    return [to_commit(commit) for commit in commits or ()]


def to_author(commit: Payload | None) -> CommitAuthor | None:
    """Return the git author of a commit, with the login of the GitHub account behind it."""
    if commit is None:
        return None
    git_commit = commit.get("commit")
    if git_commit is None:
        return None
    author = to_commit_author(git_commit.get("author"))
    if author is not None:
        author.login = (commit.get("author") or {}).get("login")
    return author


def to_commit_author(author: Payload | None) -> CommitAuthor | None:
    if author is None:
        return None
    return CommitAuthor(
        date=_timestamp(author.get("date")),
        name=author.get("name"),
        email=author.get("email"),
        login=author.get("username"),
    )


def to_user(user: Payload | None) -> User | None:
    """Build a User; its following URL carries the followers URL."""
    if user is None:
        return None
    return User(
        login=user.get("login"),
        id=user.get("id"),
        node_id=user.get("node_id"),
        avatar_url=user.get("avatar_url"),
        html_url=user.get("html_url"),
        gravatar_id=user.get("gravatar_id"),
        name=user.get("name"),
        company=user.get("company"),
        blog=user.get("blog"),
        location=user.get("location"),
        email=user.get("email"),
        hireable=user.get("hireable"),
        bio=user.get("bio"),
        public_repos=user.get("public_repos"),
        public_gists=user.get("public_gists"),
        followers=user.get("followers"),
        following=user.get("following"),
        created_at=_timestamp(user.get("created_at")),
        updated_at=_timestamp(user.get("updated_at")),
        suspended_at=_timestamp(user.get("suspended_at")),
        type=user.get("type"),
        site_admin=user.get("site_admin"),
        total_private_repos=user.get("total_private_repos"),
        owned_private_repos=user.get("owned_private_repos"),
        private_gists=user.get("private_gists"),
        disk_usage=user.get("disk_usage"),
        collaborators=user.get("collaborators"),
        plan=to_plan(user.get("plan")),
        url=user.get("url"),
        events_url=user.get("events_url"),
        following_url=user.get("followers_url"),
        followers_url=user.get("followers_url"),
        gists_url=user.get("gists_url"),
        organizations_url=user.get("organizations_url"),
        received_events_url=user.get("received_events_url"),
        repos_url=user.get("repos_url"),
        starred_url=user.get("starred_url"),
        subscriptions_url=user.get("subscriptions_url"),
        permissions=user.get("permissions"),
    )


def to_users(users: Iterable[Payload] | None) -> list[User]:
    return [to_user(user) for user in users or ()]


def to_teams(teams: Iterable[Payload] | None) -> list[Team]:
    return [to_team(team) for team in teams or ()]


def to_team(team: Payload | None) -> Team | None:
    if team is None:
        return None
    return Team(
        id=team.get("id"),
        name=team.get("name"),
        description=team.get("description"),
        url=team.get("url"),
        slug=team.get("slug"),
        permission=team.get("permission"),
        permissions=team.get("permissions"),
        privacy=team.get("privacy"),
        members_count=team.get("members_count"),
        repos_count=team.get("repos_count"),
    )


def to_apps(apps: Iterable[Payload] | None) -> list[App]:
    return [to_app(app) for app in apps or ()]


def to_app(app: Payload | None) -> App | None:
    if app is None:
        return None
    return App(
        id=app.get("id"),
        slug=app.get("slug"),
        node_id=app.get("node_id"),
        owner=to_user(app.get("owner")),
        name=app.get("name"),
        description=app.get("description"),
        external_url=app.get("external_url"),
        html_url=app.get("html_url"),
        created_at=_timestamp(app.get("created_at")),
        updated_at=_timestamp(app.get("updated_at")),
        permissions=to_installation_permissions(app.get("permissions")),
        events=app.get("events"),
    )


def to_installation_permissions(
    permissions: Payload | None,
) -> InstallationPermissions | None:
    """Build app permissions; organization hooks carry the organization administration level."""
    if permissions is None:
        return None
    values = {f.name: permissions.get(f.name) for f in fields(InstallationPermissions)}
    values["organization_hooks"] = permissions.get("organization_administration")
    return InstallationPermissions(**values)


def to_pull_request_reviews_enforcement(
    review: Payload | None,
) -> PullRequestReviewsEnforcement | None:
    if review is None:
        return None
    return PullRequestReviewsEnforcement(
        dismissal_restrictions=to_dismissal_restrictions(review.get("dismissal_restrictions")),
        dismiss_stale_reviews=bool(review.get("dismiss_stale_reviews", False)),
        require_code_owner_reviews=bool(review.get("require_code_owner_reviews", False)),
        required_approving_review_count=int(review.get("required_approving_review_count") or 0),
    )


def to_required_status_checks(status_checks: Payload | None) -> RequiredStatusChecks | None:
    if status_checks is None:
        return None
    return RequiredStatusChecks(strict=bool(status_checks.get("strict", False)))


def to_dismissal_restrictions(dismissal: Payload | None) -> DismissalRestrictions | None:
    if dismissal is None:
        return None
    return DismissalRestrictions(users=to_users(dismissal.get("users")))


def to_pipeline(content: bytes | str) -> Pipeline:
    """Parse a GitHub Actions workflow file."""
    return parse_github_workflow(content)


def to_hooks(hooks: Iterable[Payload] | None) -> list[Hook] | None:
    """Map hooks; an empty or missing list gives None."""
    if hooks is None:
        return None
    return [to_hook(hook) for hook in hooks] or None


def to_hook(hook: Payload | None) -> Hook | None:
    if hook is None:
        return None
    return Hook(
        created_at=_timestamp(hook.get("created_at")),
        updated_at=_timestamp(hook.get("updated_at")),
        url=hook.get("url"),
        id=hook.get("id"),
        type=hook.get("type"),
        name=hook.get("name"),
        test_url=hook.get("test_url"),
        ping_url=hook.get("ping_url"),
        last_response=hook.get("last_response"),
        events=hook.get("events"),
        active=hook.get("active"),
        config=to_hook_config(hook.get("config")),
    )


def to_hook_config(config: Mapping[str, Any] | None) -> HookConfig | None:
    """Read the known settings of a hook config; values that are not text are logged and dropped."""
    if config is None:
        return None
    values: dict[str, str | None] = {}
    for key in _HOOK_CONFIG_KEYS:
        value = config.get(key)
        if value is not None and not isinstance(value, str):
            logger.error("error in parsing hook config: %s expects a string, got %r", key, value)
            continue
        values[key] = value
    return HookConfig(**values)