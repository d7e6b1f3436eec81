# chainbench

`chainbench` gathers the settings of a source-code repository that matter
for software supply chain security: repository options, branch protection,
organization policy, members, webhooks, package registry and CI pipelines.
It talks to GitHub (including GitHub Enterprise) and GitLab (including
self-managed instances) and maps everything into one set of plain data
classes in `chainbench.models`, ready for checks to run against.

## Installation

Install the package together with its dependencies, `requests` and
`pyyaml`, using your usual Python packaging tool. The `test` extra adds
`pytest` and `responses` for running the test suite.

## Fetching the data of a repository

```python
from chainbench.clients import fetch_client_data

assets, supported_checks = fetch_client_data(
    access_token="token",
    repo_url="https://git.example.com/group/subgroup/project",
    scm_platform="gitlab",
    branch="",
)

print(assets.repository.name)
print(assets.branch_protections)
print(assets.organization)
```

The platform is taken from the URL when the host is `github.com` or
`gitlab.com`; for any other host, `scm_platform` (`"github"` or `"gitlab"`)
decides which API is used, and any other value raises `ValueError`. An
empty `branch` means the repository's default branch.

`assets` is an `AssetsData` holding the authorized user, the repository,
the branch protection, the pipelines and, when the repository is owned by
an organization, the organization (with its members) and its package
registry.

`supported_checks` is `None` when every check applies to the platform
(GitHub), or a list of check identifiers when only some do (GitLab).

Data that cannot be fetched — a missing permission on the token, a deleted
workflow file, an organization without packages — is left empty (`None`)
rather than failing the whole run. A repository URL that cannot be split
raises `RepoUrlError`.

## Splitting a repository URL

```python
from chainbench.clients import RepoUrlError, get_repo_info

host, namespace, project = get_repo_info(
    "https://git.example.com/rootgroup/subgroup/project"
)
# ("git.example.com", "rootgroup/subgroup", "project")

try:
    get_repo_info("git.example.com/rootgroup/project")
except RepoUrlError as error:
    print(error)  # error in parsing the host
```

Nested GitLab groups are kept whole in `namespace`.

## Working with a platform directly

The adapters return the package's own models and can be used on their own:

```python
from chainbench.clients import get_client_adapter

adapter = get_client_adapter("github", "token", "github.com")
repo = adapter.get_repository("some-org", "some-repo", "")
protection = adapter.get_branch_protection("some-org", repo, repo.default_branch)
pipelines = adapter.get_pipelines("some-org", "some-repo", repo.default_branch)
```

`chainbench.github_adapter.GithubAdapter` and
`chainbench.gitlab_adapter.GitlabAdapter` wrap
`chainbench.github_client.GithubClient` and
`chainbench.gitlab_client.GitlabClient`, thin REST clients over a
`requests` session that return the decoded JSON. API failures surface as
`GithubApiError` and `GitlabApiError`, carrying the HTTP status in
`status_code`. The conversion from API payloads to models lives in
`chainbench.github_mapper` and `chainbench.gitlab_mapper`.

GitHub Actions workflow files are parsed into `chainbench.pipelines.Pipeline`
objects (jobs, steps, tasks with their version type, shell scripts, file
positions and timeouts) by `parse_github_workflow`, which raises
`PipelineParseError` on content that is not a workflow.

## Building test data

`chainbench.builders` (`AssetsDataBuilder`, `RepositoryBuilder`,
`OrganizationBuilder`, `BranchBuilder`, `BranchProtectionBuilder`,
`PackageRegistryBuilder`) and `chainbench.pipeline_builders`
(`PipelineBuilder`, `JobBuilder`) provide fluent builders that start from a
well-configured setup and let you weaken one setting at a time — convenient
for testing checks:

```python
from chainbench.builders import AssetsDataBuilder, BranchProtectionBuilder

assets = (
    AssetsDataBuilder()
    .with_branch_protections(
        BranchProtectionBuilder()
        .with_force_push(True)
        .with_minimum_reviewers_before_merge(1)
        .build()
    )
    .with_zero_pipelines()
    .build()
)
```

## What this package does not do

- It collects data only. It has no benchmark checks of its own, produces no
  report and has no command-line interface; it is used as a library.
- On GitLab it does not read group members, the package registry, CI
  pipelines, repository collaborators, webhooks, commits or a security
  policy file; those fields stay empty. The authorized user on GitLab is the
  profile of the user with id 1.