"""Conversion of GitLab REST API payloads into the platform-neutral models."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from chainbench.models import (
    AdminEnforcement,
    Branch,
    Hook,
    License,
    Organization,
    Protection,
    PullRequestReviewsEnforcement,
    Repository,
    RepositoryCommit,
    User,
)
from chainbench.utils import parse_timestamp

Payload = Mapping[str, Any]

_SQUASH_ENABLED = ("always", "default_on")
_REBASE_MERGE = "rebase_merge"
_NO_FAST_FORWARD_MERGE = "merge"
_NO_ONE_PROJECT_CREATION = "noone"


def _text(payload: Payload, key: str) -> str:
    return payload.get(key) or ""


def _number(payload: Payload, key: str) -> int:
    return int(payload.get(key) or 0)


def _flag(payload: Payload, key: str) -> bool:
    return bool(payload.get(key) or False)


def _timestamp(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return parse_timestamp(f'"{value}"')
    return parse_timestamp(value)


def to_user(user: Payload | None) -> User | None:
    if user is None:
        return None
    return User(
        login=_text(user, "username"),
        id=_number(user, "id"),
        avatar_url=_text(user, "avatar_url"),
        html_url=_text(user, "website_url"),
        name=_text(user, "name"),
        location=_text(user, "location"),
        email=_text(user, "email"),
        bio=_text(user, "bio"),
        created_at=_timestamp(user.get("created_at")),
        type="User",
        site_admin=_flag(user, "is_admin"),
        url=_text(user, "web_url"),
    )


def to_users(users: Iterable[Payload] | None) -> list[User]:
    return [to_user(user) for user in users or ()]


def to_repository(
    repo: Payload | None,
    branches: list[Branch] | None,
    collaborators: list[User] | None,
    hooks: list[Hook] | None,
    commits: list[RepositoryCommit] | None,
    is_contains_security_md: bool,
) -> Repository | None:
    """Build a Repository from a GitLab project; projects are always owned by a group."""
    if repo is None:
        return None
    open_issues = _number(repo, "open_issues_count")
    merge_method = repo.get("merge_method")
    last_activity = _timestamp(repo.get("last_activity_at"))
    return Repository(
        id=_number(repo, "id"),
        owner=User(type="Organization"),
        name=_text(repo, "path"),
        description=_text(repo, "description"),
        default_branch=_text(repo, "default_branch"),
        created_at=_timestamp(repo.get("created_at")),
        pushed_at=last_activity,
        updated_at=last_activity,
        open_issues_count=open_issues,
        stargazers_count=_number(repo, "star_count"),
        allow_squash_merge=repo.get("squash_option") in _SQUASH_ENABLED,
        allow_rebase_merge=merge_method == _REBASE_MERGE,
        allow_merge_commit=merge_method == _NO_FAST_FORWARD_MERGE,
        topics=repo.get("topics"),
        license=to_license(repo.get("license")),
        is_private=not _flag(repo, "public"),
        has_issues=open_issues > 0,
        archived=_flag(repo, "archived"),
        url=_text(repo, "web_url"),
        branches=branches,
        collaborators=collaborators,
        is_contains_security_md=is_contains_security_md,
        commits=commits,
        hooks=hooks,
    )


def to_branches(branches: Iterable[Payload] | None) -> list[Branch] | None:
    """Map branches; an empty or missing list gives None."""
    if branches is None:
        return None
    return [to_branch(branch) for branch in branches] or None


def to_branch(branch: Payload | None) -> Branch | None:
    if branch is None:
        return None
    return Branch(name=_text(branch, "name"), protected=_flag(branch, "protected"))


def to_branch_protection(
    project: Payload | None,
    protection: Payload | None,
    approval_config: Payload | None,
    approval_rules: list[Payload] | None,
    push_rules: Payload | None,
) -> Protection | None:
    """Build a Protection; signed commits count only when the push rules cover the default branch.

    Raises re.error when the push rules hold an invalid branch name pattern.
    """
    project = project or {}
    approval_config = approval_config or {}
    push_rules = push_rules or {}
    branch_pattern = re.compile(_text(push_rules, "branch_name_regex"))
    matches_default = branch_pattern.search(_text(project, "default_branch")) is not None
    approving_review_count = _number(approval_rules[0], "approvals_required") if approval_rules else 0
    if protection is None:
        return None
    return Protection(
        enforce_admins=AdminEnforcement(enabled=False),
        required_pull_request_reviews=PullRequestReviewsEnforcement(
            dismiss_stale_reviews=_flag(approval_config, "reset_approvals_on_push"),
            require_code_owner_reviews=_flag(protection, "code_owner_approval_required"),
            required_approving_review_count=approving_review_count,
        ),
        allow_force_pushes=_flag(protection, "allow_force_push"),
        required_conversation_resolution=_flag(
            project, "only_allow_merge_if_all_discussions_are_resolved"
        ),
        required_signed_commit=matches_default and _flag(push_rules, "reject_unsigned_commits"),
    )


def to_license(license: Payload | None) -> License | None:
    """Build a License; the nickname is its name and the full name its description."""
    if license is None:
        return None
    return License(
        key=_text(license, "key"),
        name=_text(license, "nickname"),
        description=_text(license, "name"),
        url=_text(license, "source_url"),
    )


def to_organization(group: Payload | None, hooks: list[Hook] | None) -> Organization | None:
    """Build an Organization from a GitLab group."""
    if group is None:
        return None
    return Organization(
        id=_number(group, "id"),
        name=_text(group, "name"),
        description=_text(group, "description"),
        created_at=_timestamp(group.get("created_at")),
        type="Organization",
        default_repo_permission="inherit",
        members_can_create_repos=group.get("project_creation_level") != _NO_ONE_PROJECT_CREATION,
        two_factor_requirement_enabled=_flag(group, "require_two_factor_authentication"),
        is_repository_deletion_limited=False,
        is_issue_deletion_limited=False,
        hooks=hooks,
    )