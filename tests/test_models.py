from dataclasses import asdict, replace

from chainbench.models import (
    AdminEnforcement,
    AssetsData,
    Branch,
    CommitAuthor,
    Hook,
    HookConfig,
    Organization,
    Package,
    PackageRegistry,
    Protection,
    PullRequestReviewsEnforcement,
    Repository,
    RepositoryCommit,
    User,
)


def _repository(login="user0"):
    return Repository(
        name="myrepo",
        branches=[Branch(name="main", commit=RepositoryCommit(sha="GD2"))],
        commits=[RepositoryCommit(author=CommitAuthor(login=login))],
        hooks=[Hook(url="https://endpoint.com", config=HookConfig(insecure_ssl="0"))],
        collaborators=[],
        is_contains_security_md=True,
    )


def test_user_defaults_are_unset():
    user = User(login="liorvais")
    assert user.role == ""
    assert user.id is None
    assert user.permissions is None


def test_nested_structures_compare_by_value():
    assert _repository() == _repository()
    assert _repository("user1") != _repository()
    assert _repository("user1").commits[0].author.login == "user1"


def test_empty_list_differs_from_missing_list():
    assert Repository(collaborators=[]) != Repository()
    assert Repository().collaborators is None


def test_protection_asdict_keeps_nesting():
    protection = Protection(
        enforce_admins=AdminEnforcement(enabled=True),
        required_pull_request_reviews=PullRequestReviewsEnforcement(
            required_approving_review_count=2, dismiss_stale_reviews=True
        ),
        required_signed_commit=True,
    )
    data = asdict(protection)
    assert data["enforce_admins"] == {"enabled": True}
    assert data["required_pull_request_reviews"]["required_approving_review_count"] == 2
    assert data["required_pull_request_reviews"]["dismissal_restrictions"] is None
    assert data["allow_force_pushes"] is False


def test_replace_leaves_original_untouched():
    org = Organization(name="org1", two_factor_requirement_enabled=True)
    changed = replace(org, two_factor_requirement_enabled=False)
    assert org.two_factor_requirement_enabled is True
    assert changed.two_factor_requirement_enabled is False
    assert changed.name == "org1"


def test_members_can_be_patched_in_place():
    org = Organization(members=[User(login="user0"), User(login="user1")])
    org.members[1].role = "admin"
    assert [member.role for member in org.members] == ["", "admin"]


def test_assets_data_holds_registry_packages():
    registry = PackageRegistry(
        two_factor_requirement_enabled=True,
        packages=[Package(package_type="npm", visibility="private",
                          repository=Repository(is_private=True))],
    )
    assets = AssetsData(registry=registry, repository=_repository())
    assert assets.registry.packages[0].repository.is_private is True
    assert assets.organization is None
    assert AssetsData().extra == {}
    assert AssetsData().extra is not AssetsData().extra