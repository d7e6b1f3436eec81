"""Platform-neutral models of the assets a benchmark inspects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Plan:
    name: str | None = None
    space: int | None = None
    collaborators: int | None = None
    private_repos: int | None = None


@dataclass
class User:
    login: str | None = None
    id: int | None = None
    node_id: str | None = None
    avatar_url: str | None = None
    html_url: str | None = None
    gravatar_id: str | None = None
    name: str | None = None
    company: str | None = None
    blog: str | None = None
    location: str | None = None
    email: str | None = None
    hireable: bool | None = None
    bio: str | None = None
    public_repos: int | None = None
    public_gists: int | None = None
    followers: int | None = None
    following: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    suspended_at: datetime | None = None
    type: str | None = None
    site_admin: bool | None = None
    total_private_repos: int | None = None
    owned_private_repos: int | None = None
    private_gists: int | None = None
    disk_usage: int | None = None
    collaborators: int | None = None
    plan: Plan | None = None
    url: str | None = None
    events_url: str | None = None
    following_url: str | None = None
    followers_url: str | None = None
    gists_url: str | None = None
    organizations_url: str | None = None
    received_events_url: str | None = None
    repos_url: str | None = None
    starred_url: str | None = None
    subscriptions_url: str | None = None
    permissions: dict[str, bool] | None = None
    role: str = ""


@dataclass
class License:
    key: str | None = None
    name: str | None = None
    url: str | None = None
    spdx_id: str | None = None
    html_url: str | None = None
    featured: bool | None = None
    description: str | None = None
    implementation: str | None = None
    permissions: list[str] | None = None
    conditions: list[str] | None = None
    limitations: list[str] | None = None
    body: str | None = None


@dataclass
class CommitAuthor:
    date: datetime | None = None
    name: str | None = None
    email: str | None = None
    login: str | None = None


@dataclass
class SignatureVerification:
    verified: bool | None = None
    reason: str | None = None
    signature: str | None = None
    payload: str | None = None


@dataclass
class RepositoryCommit:
    node_id: str | None = None
    sha: str | None = None
    author: CommitAuthor | None = None
    committer: CommitAuthor | None = None
    url: str | None = None
    verification: SignatureVerification | None = None


@dataclass
class Branch:
    name: str | None = None
    commit: RepositoryCommit | None = None
    protected: bool | None = None


@dataclass
class HookConfig:
    content_type: str | None = None
    insecure_ssl: str | None = None
    url: str | None = None
    secret: str | None = None


@dataclass
class Hook:
    created_at: datetime | None = None
    updated_at: datetime | None = None
    url: str | None = None
    id: int | None = None
    type: str | None = None
    name: str | None = None
    test_url: str | None = None
    ping_url: str | None = None
    last_response: dict[str, Any] | None = None
    events: list[str] | None = None
    active: bool | None = None
    config: HookConfig | None = None


@dataclass
class Repository:
    id: int | None = None
    node_id: str | None = None
    owner: User | None = None
    name: str | None = None
    description: str | None = None
    default_branch: str | None = None
    master_branch: str | None = None
    created_at: datetime | None = None
    pushed_at: datetime | None = None
    updated_at: datetime | None = None
    language: str | None = None
    fork: bool | None = None
    forks_count: int | None = None
    network_count: int | None = None
    open_issues_count: int | None = None
    stargazers_count: int | None = None
    subscribers_count: int | None = None
    size: int | None = None
    auto_init: bool | None = None
    allow_rebase_merge: bool | None = None
    allow_squash_merge: bool | None = None
    allow_merge_commit: bool | None = None
    topics: list[str] | None = None
    license: License | None = None
    is_private: bool | None = None
    has_issues: bool | None = None
    license_template: str | None = None
    gitignore_template: str | None = None
    archived: bool | None = None
    team_id: int | None = None
    url: str | None = None
    branches: list[Branch] | None = None
    collaborators: list[User] | None = None
    is_contains_security_md: bool = False
    commits: list[RepositoryCommit] | None = None
    hooks: list[Hook] | None = None


@dataclass
class Organization:
    login: str | None = None
    id: int | None = None
    node_id: str | None = None
    name: str | None = None
    description: str | None = None
    public_repos: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    total_private_repos: int | None = None
    owned_private_repos: int | None = None
    collaborators: int | None = None
    type: str | None = None
    plan: Plan | None = None
    default_repo_permission: str | None = None
    default_repo_settings: str | None = None
    members_can_create_repos: bool | None = None
    members_can_create_public_repos: bool | None = None
    members_can_create_private_repos: bool | None = None
    members_can_create_internal_repos: bool | None = None
    two_factor_requirement_enabled: bool | None = None
    is_verified: bool | None = None
    is_repository_deletion_limited: bool | None = None
    is_issue_deletion_limited: bool | None = None
    hooks: list[Hook] | None = None
    members: list[User] | None = None


@dataclass
class AdminEnforcement:
    enabled: bool = False


@dataclass
class RequiredStatusChecks:
    strict: bool = False


@dataclass
class DismissalRestrictions:
    users: list[User] | None = None


@dataclass
class PullRequestReviewsEnforcement:
    dismissal_restrictions: DismissalRestrictions | None = None
    dismiss_stale_reviews: bool = False
    require_code_owner_reviews: bool = False
    required_approving_review_count: int = 0


@dataclass
class Team:
    id: int | None = None
    name: str | None = None
    description: str | None = None
    url: str | None = None
    slug: str | None = None
    permission: str | None = None
    permissions: dict[str, bool] | None = None
    privacy: str | None = None
    members_count: int | None = None
    repos_count: int | None = None


@dataclass
class InstallationPermissions:
    actions: str | None = None
    administration: str | None = None
    blocking: str | None = None
    checks: str | None = None
    contents: str | None = None
    content_references: str | None = None
    deployments: str | None = None
    emails: str | None = None
    environments: str | None = None
    followers: str | None = None
    issues: str | None = None
    metadata: str | None = None
    members: str | None = None
    organization_administration: str | None = None
    organization_hooks: str | None = None
    organization_plan: str | None = None
    organization_pre_receive_hooks: str | None = None
    organization_projects: str | None = None
    organization_secrets: str | None = None
    organization_self_hosted_runners: str | None = None
    organization_user_blocking: str | None = None
    packages: str | None = None
    pages: str | None = None
    pull_requests: str | None = None
    repository_hooks: str | None = None
    repository_projects: str | None = None
    repository_pre_receive_hooks: str | None = None
    secrets: str | None = None
    secret_scanning_alerts: str | None = None
    security_events: str | None = None
    single_file: str | None = None
    statuses: str | None = None
    team_discussions: str | None = None
    vulnerability_alerts: str | None = None
    workflows: str | None = None


@dataclass
class App:
    id: int | None = None
    slug: str | None = None
    node_id: str | None = None
    owner: User | None = None
    name: str | None = None
    description: str | None = None
    external_url: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    permissions: InstallationPermissions | None = None
    events: list[str] | None = None


@dataclass
class BranchRestrictions:
    users: list[User] | None = None
    teams: list[Team] | None = None
    apps: list[App] | None = None


@dataclass
class Protection:
    required_status_checks: RequiredStatusChecks | None = None
    required_pull_request_reviews: PullRequestReviewsEnforcement | None = None
    enforce_admins: AdminEnforcement | None = None
    restrictions: BranchRestrictions | None = None
    require_linear_history: bool = False
    allow_force_pushes: bool = False
    allow_deletions: bool = False
    required_conversation_resolution: bool = False
    required_signed_commit: bool = False


@dataclass
class Package:
    id: int | None = None
    name: str | None = None
    package_type: str | None = None
    html_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    owner: User | None = None
    version: int | None = None
    url: str | None = None
    version_count: int | None = None
    visibility: str | None = None
    repository: Repository | None = None


@dataclass
class PackageRegistry:
    two_factor_requirement_enabled: bool | None = None
    packages: list[Package] | None = None


@dataclass
class AssetsData:
    authorized_user: User | None = None
    users: list[User] | None = None
    organization: Organization | None = None
    repository: Repository | None = None
    branch_protections: Protection | None = None
    pipelines: list[Any] | None = None
    registry: PackageRegistry | None = None
    extra: dict[str, Any] = field(default_factory=dict)