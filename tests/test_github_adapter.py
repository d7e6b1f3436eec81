import base64
from datetime import datetime, timedelta, timezone

import pytest

from chainbench.github_adapter import GithubAdapter, patch_admin_roles
from chainbench.github_client import GithubApiError
from chainbench.models import Organization, Repository, User
from chainbench.pipelines import PipelineParseError


class FakeClient:
    """Answers client calls from a table and records them."""

    def __init__(self, **answers):
        self.answers = answers
        self.calls = []

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        def call(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            answer = self.answers.get(name)
            if callable(answer):
                answer = answer(*args, **kwargs)
            if isinstance(answer, BaseException):
                raise answer
            return answer

        return call

    def called(self, name):
        return [call for call in self.calls if call[0] == name]


def _not_found(*_args, **_kwargs):
    return GithubApiError("not found", status_code=404)


def _security_md_only_lowercase(owner, repo, path, ref):
    if path == "security.md":
        return {"name": path, "content": ""}, None
    return GithubApiError("not found", status_code=404)


REPO = {"name": "repo1", "default_branch": "main", "owner": {"login": "org1", "type": "Organization"}}


def _repository_client(**overrides):
    answers = dict(
        get_repository=REPO,
        list_commits=[{"sha": "c1", "commit": {"author": {"name": "dev"}}, "author": {"login": "dev"}}],
        list_repository_branches=[{"name": "main", "commit": {"sha": "abc"}, "protected": True}],
        get_commit={"sha": "abc", "commit": {"committer": {"name": "dev"}}},
        get_content=_security_md_only_lowercase,
        list_repository_collaborators=[{"login": "dev", "permissions": {"admin": True}}],
        list_repository_hooks=[{"url": "https://example.com/hook", "config": {"url": "https://example.com/hook"}}],
    )
    answers.update(overrides)
    return FakeClient(**answers)


def test_patch_admin_roles():
    login = "liorvais"
    actual = patch_admin_roles([User(login=login)], [User(login=login)])
    assert actual == [User(login=login, role="admin")]


def test_patch_admin_roles_leaves_other_members():
    members = [User(login="a"), User(login="b")]
    actual = patch_admin_roles(members, [User(login="b")])
    assert [member.role for member in actual] == ["", "admin"]


def test_get_authorized_user_maps_payload():
    adapter = GithubAdapter(FakeClient(get_authorized_user={"login": "me", "id": 7}))
    assert adapter.get_authorized_user() == User(login="me", id=7)


def test_get_authorized_user_raises_client_error():
    adapter = GithubAdapter(FakeClient(get_authorized_user=GithubApiError("denied", 401)))
    with pytest.raises(GithubApiError):
        adapter.get_authorized_user()


def test_get_repository_collects_assets():
    client = _repository_client()
    repo = GithubAdapter(client).get_repository("org1", "repo1", "")

    assert repo.name == "repo1"
    assert repo.owner.type == "Organization"
    assert repo.is_contains_security_md is True
    assert [b.name for b in repo.branches] == ["main"]
    assert repo.branches[0].commit.sha == "abc"
    assert repo.branches[0].protected is True
    assert [c.sha for c in repo.commits] == ["c1"]
    assert repo.commits[0].author.login == "dev"
    assert repo.collaborators[0].permissions == {"admin": True}
    assert repo.hooks[0].config.url == "https://example.com/hook"


def test_get_repository_reads_security_md_from_default_branch():
    client = _repository_client()
    GithubAdapter(client).get_repository("org1", "repo1", "")
    refs = {args[3] for _, args, _ in client.called("get_content")}
    assert refs == {"main"}


def test_get_repository_reads_security_md_from_requested_branch():
    client = _repository_client()
    GithubAdapter(client).get_repository("org1", "repo1", "dev")
    refs = {args[3] for _, args, _ in client.called("get_content")}
    assert refs == {"dev"}


def test_get_repository_without_security_md():
    client = _repository_client(get_content=_not_found)
    repo = GithubAdapter(client).get_repository("org1", "repo1", "")
    assert repo.is_contains_security_md is False
    assert [args[2] for _, args, _ in client.called("get_content")] == [
        "SECURITY.md",
        "security.md",
        "Security.md",
    ]


def test_get_repository_commits_since_three_months_ago():
    client = _repository_client()
    GithubAdapter(client).get_repository("org1", "repo1", "")
    (_, args, _), = client.called("list_commits")
    since = args[2]
    now = datetime.now(timezone.utc)
    assert now - timedelta(days=93) <= since <= now - timedelta(days=88)


def test_get_repository_survives_secondary_failures():
    failure = GithubApiError("boom", 500)
    client = _repository_client(
        list_commits=failure,
        list_repository_branches=failure,
        list_repository_collaborators=failure,
        list_repository_hooks=failure,
    )
    repo = GithubAdapter(client).get_repository("org1", "repo1", "")
    assert repo.name == "repo1"
    assert repo.commits == []
    assert repo.branches is None
    assert repo.collaborators == []
    assert repo.hooks is None


def test_get_repository_raises_when_repository_fails():
    client = _repository_client(get_repository=GithubApiError("boom", 500))
    with pytest.raises(GithubApiError):
        GithubAdapter(client).get_repository("org1", "repo1", "")


def test_list_repository_branches_skips_failed_commits():
    def commit(owner, repo, sha):
        if sha == "bad":
            return GithubApiError("boom", 500)
        return {"sha": sha}

    client = FakeClient(
        list_repository_branches=[
            {"name": "main", "commit": {"sha": "good"}},
            {"name": "broken", "commit": {"sha": "bad"}},
        ],
        get_commit=commit,
    )
    branches = GithubAdapter(client).list_repository_branches("o", "r")
    assert [(b.name, b.commit.sha) for b in branches] == [("main", "good")]


def test_get_commit_maps_and_raises():
    adapter = GithubAdapter(FakeClient(get_commit={"sha": "abc"}))
    assert adapter.get_commit("o", "r", "abc").sha == "abc"
    failing = GithubAdapter(FakeClient(get_commit=GithubApiError("boom", 500)))
    with pytest.raises(GithubApiError):
        failing.get_commit("o", "r", "abc")


def test_get_branch_protection_uses_repository_name():
    client = FakeClient(
        get_branch_protection={"required_status_checks": {"strict": True}},
        get_signatures_of_protected_branch={"enabled": True},
    )
    protection = GithubAdapter(client).get_branch_protection("o", Repository(name="repo1"), "main")
    assert protection.required_status_checks.strict is True
    assert protection.required_signed_commit is True
    assert client.called("get_branch_protection")[0][1] == ("o", "repo1", "main")


def test_get_branch_protection_without_signatures():
    client = FakeClient(
        get_branch_protection={"allow_deletions": {"enabled": True}},
        get_signatures_of_protected_branch=GithubApiError("boom", 403),
    )
    protection = GithubAdapter(client).get_branch_protection("o", Repository(name="r"), "main")
    assert protection.allow_deletions is True
    assert protection.required_signed_commit is False


def test_get_organization_tolerates_hook_failure():
    client = FakeClient(
        get_organization={"login": "org1"},
        list_organization_hooks=GithubApiError("boom", 403),
    )
    org = GithubAdapter(client).get_organization("org1")
    assert org.login == "org1"
    assert org.hooks is None
    assert org.is_repository_deletion_limited is True


def test_list_organization_members_marks_admins():
    def members(organization, role=None):
        if role == "admin":
            return [{"login": "boss"}]
        return [{"login": "boss"}, {"login": "dev"}]

    members_list = GithubAdapter(FakeClient(list_organization_members=members)).list_organization_members("org1")
    assert [(m.login, m.role) for m in members_list] == [("boss", "admin"), ("dev", "")]


def test_get_registry_requires_organization():
    with pytest.raises(ValueError):
        GithubAdapter(FakeClient()).get_registry(None)


def test_get_registry_collects_every_package_type():
    client = FakeClient(
        list_organization_packages=lambda owner, kind: [{"name": f"{kind}-pkg", "package_type": kind}]
    )
    org = Organization(login="org1", two_factor_requirement_enabled=True)
    registry = GithubAdapter(client).get_registry(org)
    kinds = ["npm", "maven", "rubygems", "nuget", "docker", "container"]
    assert [args[1] for _, args, _ in client.called("list_organization_packages")] == kinds
    assert [p.package_type for p in registry.packages] == kinds
    assert registry.two_factor_requirement_enabled is True


def test_get_registry_drops_packages_on_failure():
    def packages(owner, kind):
        if kind == "maven":
            return GithubApiError("boom", 403)
        return [{"name": "p"}]

    org = Organization(login="org1", two_factor_requirement_enabled=False)
    registry = GithubAdapter(FakeClient(list_organization_packages=packages)).get_registry(org)
    assert registry.packages is None
    assert registry.two_factor_requirement_enabled is False


WORKFLOW = b"name: pipeline1\njobs:\n  build:\n    steps:\n      - uses: checkout@v1\n"


def test_get_pipelines_parses_workflows():
    def content(owner, repo, path, ref):
        if path == "gone.yml":
            return GithubApiError("not found", 404)
        return {"content": base64.b64encode(WORKFLOW).decode()}, None

    client = FakeClient(
        get_workflows={"workflows": [{"path": ""}, {"path": "gone.yml"}, {"path": "ci.yml"}]},
        get_content=content,
    )
    pipelines = GithubAdapter(client).get_pipelines("o", "r", "main")
    assert [p.name for p in pipelines] == ["pipeline1"]
    assert pipelines[0].jobs[0].steps[0].task.name == "checkout"
    assert [args[2] for _, args, _ in client.called("get_content")] == ["gone.yml", "ci.yml"]


def test_get_pipelines_raises_on_invalid_workflow():
    client = FakeClient(
        get_workflows={"workflows": [{"path": "ci.yml"}]},
        get_content=({"content": base64.b64encode(b"- just\n- a list\n").decode()}, None),
    )
    with pytest.raises(PipelineParseError):
        GithubAdapter(client).get_pipelines("o", "r", "main")


def test_get_file_content_round_trip():
    encoded = base64.b64encode(WORKFLOW).decode()
    wrapped = "\n".join(encoded[i:i + 20] for i in range(0, len(encoded), 20))
    adapter = GithubAdapter(FakeClient(get_content=({"content": wrapped}, None)))
    assert adapter.get_file_content("o", "r", "ci.yml", "main") == WORKFLOW


def test_get_file_content_missing_file_is_none():
    adapter = GithubAdapter(FakeClient(get_content=_not_found))
    assert adapter.get_file_content("o", "r", "ci.yml", "main") is None


def test_get_file_content_other_errors_raise():
    adapter = GithubAdapter(FakeClient(get_content=GithubApiError("boom", 500)))
    with pytest.raises(GithubApiError) as info:
        adapter.get_file_content("o", "r", "ci.yml", "main")
    assert info.value.status_code == 500


def test_all_checks_supported():
    assert GithubAdapter(FakeClient()).list_supported_checks_ids() is None