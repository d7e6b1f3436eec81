"""Builders of asset fixtures for exercising benchmark checks."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from chainbench.models import (
    AdminEnforcement,
    AssetsData,
    Branch,
    BranchRestrictions,
    CommitAuthor,
    DismissalRestrictions,
    Hook,
    HookConfig,
    Organization,
    Package,
    PackageRegistry,
    Protection,
    PullRequestReviewsEnforcement,
    Repository,
    RepositoryCommit,
    RequiredStatusChecks,
    SignatureVerification,
    User,
)
from chainbench.pipeline_builders import AUTHORIZED_USER_MOCK_ID, PipelineBuilder
from chainbench.pipelines import Pipeline

DEFAULT_HOOK_URL = "https://endpoint.com"
OLD_COMMIT_MONTHS = 3


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _months_before(moment: datetime, months: int) -> datetime:
    """Step back whole months, letting overflowing days roll into the next month."""
    total = moment.year * 12 + moment.month - 1 - months
    year, month_index = divmod(total, 12)
    first = moment.replace(year=year, month=month_index + 1, day=1)
    return first + timedelta(days=moment.day - 1)


def _package_hook(url: str, insecure_ssl: str, secret: str | None) -> Hook:
    return Hook(
        url=url,
        config=HookConfig(url=url, insecure_ssl=insecure_ssl, secret=secret),
        events=["package"],
    )


def _authorized_user() -> User:
    return User(id=AUTHORIZED_USER_MOCK_ID)


class BranchBuilder:
    """Builds a branch whose head commit was made just now."""

    def __init__(self) -> None:
        self._branch = Branch(
            commit=RepositoryCommit(
                sha="GD2",
                author=CommitAuthor(),
                committer=CommitAuthor(date=_now()),
                verification=SignatureVerification(),
            )
        )

    def with_old_commit(self) -> BranchBuilder:
        self._branch.commit.committer.date = _months_before(_now(), OLD_COMMIT_MONTHS)
        return self

    def build(self) -> Branch:
        return self._branch


class BranchProtectionBuilder:
    """Builds a branch protection with every safeguard switched on."""

    def __init__(self) -> None:
        self._protection = Protection(
            enforce_admins=AdminEnforcement(enabled=True),
            required_status_checks=RequiredStatusChecks(strict=True),
            required_pull_request_reviews=PullRequestReviewsEnforcement(
                required_approving_review_count=2,
                require_code_owner_reviews=True,
                dismiss_stale_reviews=True,
                dismissal_restrictions=DismissalRestrictions(users=[]),
            ),
            restrictions=BranchRestrictions(users=[User(name="default")], teams=[], apps=[]),
            required_signed_commit=True,
            required_conversation_resolution=True,
            allow_force_pushes=True,
            allow_deletions=True,
        )

    def with_status_check_enabled(self, enabled: bool) -> BranchProtectionBuilder:
        if not enabled:
            self._protection.required_status_checks = None
        return self

    def with_strict_mode(self, enabled: bool) -> BranchProtectionBuilder:
        if self._protection.required_status_checks is not None:
            self._protection.required_status_checks.strict = enabled
        return self

    def with_minimum_reviewers_before_merge(self, count: int) -> BranchProtectionBuilder:
        self._protection.required_pull_request_reviews.required_approving_review_count = count
        return self

    def with_code_owners_review(self, required: bool) -> BranchProtectionBuilder:
        self._protection.required_pull_request_reviews.require_code_owner_reviews = required
        return self

    def with_dismiss_stale_reviews(self, dismiss: bool) -> BranchProtectionBuilder:
        self._protection.required_pull_request_reviews.dismiss_stale_reviews = dismiss
        return self

    def with_dismissal_restrictions(self, restricted: bool) -> BranchProtectionBuilder:
        if not restricted:
            self._protection.required_pull_request_reviews.dismissal_restrictions = None
        return self

    def with_required_signed_commits(self, enabled: bool) -> BranchProtectionBuilder:
        self._protection.required_signed_commit = enabled
        return self

    def with_resolve_conversations(self, required: bool) -> BranchProtectionBuilder:
        self._protection.required_conversation_resolution = required
        return self

    def with_enforce_admin(self, enforce: bool) -> BranchProtectionBuilder:
        self._protection.enforce_admins = AdminEnforcement(enabled=enforce)
        return self

    def with_push_restrictions(self, restricted: bool) -> BranchProtectionBuilder:
        if not restricted:
            self._protection.restrictions = None
        return self

    def with_delete_branch(self, allowed: bool) -> BranchProtectionBuilder:
        self._protection.allow_deletions = allowed
        return self

    def with_force_push(self, allowed: bool) -> BranchProtectionBuilder:
        self._protection.allow_force_pushes = allowed
        return self

    def build(self) -> Protection:
        return self._protection


class OrganizationBuilder:
    """Builds a well-configured organization with two admins and two members."""

    def __init__(self) -> None:
        self._org = Organization(
            two_factor_requirement_enabled=True,
            is_verified=True,
            default_repo_permission="read",
            members_can_create_repos=False,
            is_repository_deletion_limited=True,
            is_issue_deletion_limited=True,
            hooks=[_package_hook(DEFAULT_HOOK_URL, "0", "**")],
            members=[
                User(role="admin", login="user0"),
                User(role="admin", login="user1"),
                User(role="member", login="user2"),
                User(role="member", login="user3"),
            ],
        )

    def with_mfa_enabled(self, enabled: bool) -> OrganizationBuilder:
        self._org.two_factor_requirement_enabled = enabled
        return self

    def with_verified_badge(self, enabled: bool) -> OrganizationBuilder:
        self._org.is_verified = enabled
        return self

    def with_repos_default_permissions(self, permission: str) -> OrganizationBuilder:
        """Set the default permission; an empty one removes it."""
        self._org.default_repo_permission = permission or None
        return self

    def with_members_can_create_repos(self, allowed: bool) -> OrganizationBuilder:
        self._org.members_can_create_repos = allowed
        return self

    def with_repos_deletion_limitation(self, limited: bool) -> OrganizationBuilder:
        self._org.is_repository_deletion_limited = limited
        return self

    def with_issues_deletion_limitation(self, limited: bool) -> OrganizationBuilder:
        self._org.is_issue_deletion_limited = limited
        return self

    def with_members(self, role: str, count: int) -> OrganizationBuilder:
        """Replace the members with ``count`` users of one role; zero leaves none."""
        self._org.members = [User(role=role, login=f"user{i}") for i in range(count)] or None
        return self

    def with_package_webhooks(
        self, url: str, insecure_ssl: str, secret: str | None
    ) -> OrganizationBuilder:
        self._org.hooks = [_package_hook(url, insecure_ssl, secret)]
        return self

    def with_no_package_webhooks(self) -> OrganizationBuilder:
        self._org.hooks = None
        return self

    def with_no_members(self) -> OrganizationBuilder:
        self._org.members = None
        return self

    def build(self) -> Organization:
        return self._org


class PackageRegistryBuilder:
    """Builds a registry with two-factor authentication and one private npm package."""

    def __init__(self) -> None:
        self._registry = PackageRegistry(
            two_factor_requirement_enabled=True,
            packages=[
                Package(
                    package_type="npm",
                    visibility="private",
                    repository=Repository(is_private=True),
                )
            ],
        )

    def with_two_factor_authentication_enabled(self, enabled: bool) -> PackageRegistryBuilder:
        self._registry.two_factor_requirement_enabled = enabled
        return self

    def with_packages(
        self, package_type: str, visibility: str, is_repo_private: bool, repo_id: int
    ) -> PackageRegistryBuilder:
        package = Package(
            package_type=package_type,
            visibility=visibility,
            repository=Repository(id=repo_id, is_private=is_repo_private),
        )
        if self._registry.packages is None:
            self._registry.packages = [package]
        else:
            self._registry.packages.append(package)
        return self

    def with_no_packages(self) -> PackageRegistryBuilder:
        self._registry.packages = None
        return self

    def build(self) -> PackageRegistry:
        return self._registry


class RepositoryBuilder:
    """Builds a private, well-configured repository with recent activity."""

    def __init__(self) -> None:
        self._repo = Repository(
            allow_rebase_merge=True,
            allow_squash_merge=True,
            allow_merge_commit=False,
            collaborators=[
                User(id=AUTHORIZED_USER_MOCK_ID, permissions={"admin": True}),
                User(id=1, permissions={"admin": True}),
            ],
            is_private=True,
            is_contains_security_md=True,
            hooks=[_package_hook(DEFAULT_HOOK_URL, "0", "**")],
            commits=[
                RepositoryCommit(author=CommitAuthor(login=f"user{i}")) for i in range(4)
            ],
            branches=[BranchBuilder().build()],
        )

    def with_id(self, repo_id: int) -> RepositoryBuilder:
        self._repo.id = repo_id
        return self

    def with_allow_rebase_merge(self, enabled: bool) -> RepositoryBuilder:
        self._repo.allow_rebase_merge = enabled
        return self

    def with_no_repo_permissions(self) -> RepositoryBuilder:
        self._repo.allow_rebase_merge = None
        return self

    def with_admin_collaborator(self, admin: bool, count: int) -> RepositoryBuilder:
        """Replace the collaborators with ``count`` users, the first being the authorized user."""
        self._repo.collaborators = [
            User(id=AUTHORIZED_USER_MOCK_ID + i, permissions={"admin": admin})
            for i in range(count)
        ]
        return self

    def with_no_collaborator(self) -> RepositoryBuilder:
        self._repo.collaborators = None
        return self

    def with_allow_squash_merge(self, enabled: bool) -> RepositoryBuilder:
        self._repo.allow_squash_merge = enabled
        return self

    def with_allow_merge_commit(self, enabled: bool) -> RepositoryBuilder:
        self._repo.allow_merge_commit = enabled
        return self

    def with_private(self, is_private: bool) -> RepositoryBuilder:
        self._repo.is_private = is_private
        return self

    def with_security_md_file(self, present: bool) -> RepositoryBuilder:
        self._repo.is_contains_security_md = present
        return self

    def with_commit(self, login: str) -> RepositoryBuilder:
        commit = RepositoryCommit(author=CommitAuthor(login=login))
        if self._repo.commits is None:
            self._repo.commits = []
        self._repo.commits.append(commit)
        return self

    def with_no_commits(self) -> RepositoryBuilder:
        self._repo.commits = None
        return self

    def with_package_webhooks(
        self, url: str, insecure_ssl: str, secret: str | None
    ) -> RepositoryBuilder:
        self._repo.hooks = [_package_hook(url, insecure_ssl, secret)]
        return self

    def with_branch(self, branch: Branch) -> RepositoryBuilder:
        if self._repo.branches is None:
            self._repo.branches = []
        self._repo.branches.append(branch)
        return self

    def build(self) -> Repository:
        return self._repo


class AssetsDataBuilder:
    """Builds the assets of a repository that passes every check."""

    def __init__(self) -> None:
        self._assets = AssetsData(
            organization=OrganizationBuilder().build(),
            repository=RepositoryBuilder().build(),
            branch_protections=BranchProtectionBuilder().build(),
            authorized_user=_authorized_user(),
            pipelines=[PipelineBuilder().build()],
            registry=PackageRegistry(packages=[]),
        )

    def with_repository(self, repo: Repository | None) -> AssetsDataBuilder:
        self._assets.repository = repo
        return self

    def with_authorized_user(self) -> AssetsDataBuilder:
        self._assets.authorized_user = _authorized_user()
        return self

    def with_organization(self, org: Organization | None) -> AssetsDataBuilder:
        self._assets.organization = org
        return self

    def with_users(self, users: list[User] | None) -> AssetsDataBuilder:
        self._assets.users = users
        return self

    def with_branch_protections(self, protection: Protection | None) -> AssetsDataBuilder:
        self._assets.branch_protections = protection
        return self

    def with_package_registry(self, registry: PackageRegistry | None) -> AssetsDataBuilder:
        self._assets.registry = registry
        return self

    def with_pipeline(self, pipeline: Pipeline) -> AssetsDataBuilder:
        if self._assets.pipelines is None:
            self._assets.pipelines = []
        self._assets.pipelines.append(pipeline)
        return self

    def with_zero_pipelines(self) -> AssetsDataBuilder:
        self._assets.pipelines = []
        return self

    def with_no_pipelines_data(self) -> AssetsDataBuilder:
        self._assets.pipelines = None
        return self

    def with_no_repository_data(self) -> AssetsDataBuilder:
        self._assets.repository = None
        return self

    def with_no_registry_data(self) -> AssetsDataBuilder:
        self._assets.registry = None
        return self

    def with_no_organization(self) -> AssetsDataBuilder:
        self._assets.organization = None
        return self

    def with_branch(self, branch: Branch) -> AssetsDataBuilder:
        repo = self._assets.repository
        if repo.branches is None:
            repo.branches = []
        repo.branches.append(branch)
        return self

    def build(self) -> AssetsData:
        return self._assets