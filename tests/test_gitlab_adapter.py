import pytest

from chainbench.gitlab_adapter import GitlabAdapter
from chainbench.gitlab_client import GitlabApiError
from chainbench.models import Branch, Repository


class FakeClient:
    def __init__(self, **answers):
        self.answers = answers
        self.calls = []

    def _answer(self, name, *args):
        self.calls.append((name, args))
        value = self.answers.get(name)
        if isinstance(value, Exception):
            raise value
        return value

    def get_authorized_user(self):
        return self._answer("get_authorized_user")

    def list_repository_branches(self, owner, repo_id):
        return self._answer("list_repository_branches", owner, repo_id)

    def get_branch_protection(self, owner, repo, branch):
        return self._answer("get_branch_protection", owner, repo, branch)

    def get_approval_configuration(self, project):
        return self._answer("get_approval_configuration", project)

    def get_project_approval_rules(self, project):
        return self._answer("get_project_approval_rules", project)

    def get_project_push_rules(self, project):
        return self._answer("get_project_push_rules", project)

    def get_repository(self, owner, repo):
        return self._answer("get_repository", owner, repo)

    def get_organization(self, owner):
        return self._answer("get_organization", owner)


def test_get_authorized_user_maps_username():
    adapter = GitlabAdapter(FakeClient(get_authorized_user={"id": 5, "username": "alice"}))
    user = adapter.get_authorized_user()
    assert (user.login, user.id) == ("alice", 5)


def test_get_authorized_user_error_propagates():
    adapter = GitlabAdapter(FakeClient(get_authorized_user=GitlabApiError("boom", 401)))
    with pytest.raises(GitlabApiError):
        adapter.get_authorized_user()


def test_get_repository_lists_branches_by_project_id():
    client = FakeClient(
        get_repository={"id": 433, "path": "repo"},
        list_repository_branches=[{"name": "main", "protected": True}],
    )
    repo = GitlabAdapter(client).get_repository("group", "repo", "")
    assert repo.name == "repo"
    assert repo.branches == [Branch(name="main", protected=True)]
    assert ("list_repository_branches", ("group", "433")) in client.calls


def test_get_repository_survives_branch_failure():
    client = FakeClient(
        get_repository={"id": 433, "path": "repo"},
        list_repository_branches=GitlabApiError("forbidden", 403),
    )
    repo = GitlabAdapter(client).get_repository("group", "repo", "main")
    assert repo.branches is None
    assert repo.id == 433


def test_get_repository_error_propagates():
    adapter = GitlabAdapter(FakeClient(get_repository=GitlabApiError("missing", 404)))
    with pytest.raises(GitlabApiError):
        adapter.get_repository("group", "repo", "main")


def test_get_organization():
    adapter = GitlabAdapter(FakeClient(get_organization={"id": 9, "name": "team"}))
    org = adapter.get_organization("team")
    assert (org.id, org.name, org.hooks) == (9, "team", None)


def test_get_branch_protection_collects_settings():
    client = FakeClient(
        get_branch_protection={"allow_force_push": True},
        get_approval_configuration={"reset_approvals_on_push": True},
        get_project_approval_rules=[{"approvals_required": 2}],
        get_project_push_rules={"reject_unsigned_commits": True},
        get_repository={"default_branch": "main"},
    )
    protection = GitlabAdapter(client).get_branch_protection(
        "group", Repository(id=433, name="repo"), "main"
    )
    assert protection.allow_force_pushes is True
    assert protection.required_pull_request_reviews.dismiss_stale_reviews is True
    assert protection.required_pull_request_reviews.required_approving_review_count == 2
    assert protection.required_signed_commit is True
    assert ("get_branch_protection", ("group", "433", "main")) in client.calls


def test_get_branch_protection_tolerates_missing_extras():
    failure = GitlabApiError("forbidden", 403)
    client = FakeClient(
        get_branch_protection={"allow_force_push": False},
        get_approval_configuration=failure,
        get_project_approval_rules=failure,
        get_project_push_rules=failure,
        get_repository=failure,
    )
    protection = GitlabAdapter(client).get_branch_protection(
        "group", Repository(id=433, name="repo"), "main"
    )
    assert protection.required_signed_commit is False
    assert protection.required_pull_request_reviews.required_approving_review_count == 0


def test_get_branch_protection_error_propagates():
    client = FakeClient(get_branch_protection=GitlabApiError("missing", 404))
    with pytest.raises(GitlabApiError):
        GitlabAdapter(client).get_branch_protection("group", Repository(id=1, name="repo"), "main")


def test_unread_assets_are_none():
    adapter = GitlabAdapter(FakeClient())
    assert adapter.list_organization_members("team") is None
    assert adapter.get_registry(None) is None
    assert adapter.get_pipelines("group", "repo", "main") is None


def test_list_supported_checks_ids():
    assert GitlabAdapter(FakeClient()).list_supported_checks_ids() == [
        "1.1.3", "1.1.4", "1.1.6", "1.1.11", "1.1.12", "1.1.13", "1.1.16", "1.3.5", "1.3.8",
    ]