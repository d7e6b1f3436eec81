import pytest

from chainbench.pipelines import (
    FileLocation,
    FileReference,
    Job,
    Metadata,
    Pipeline,
    PipelineParseError,
    Step,
    Task,
    parse_github_workflow,
)

WORKFLOW = (
    b"name: pipeline1\n\n\njobs:\n  build:\n    name: Build\n    steps:  \n"
    b"      - name: checkout\n        uses: checkout@v1"
)


def test_parses_worked_example():
    expected = Pipeline(
        name="pipeline1",
        jobs=[
            Job(
                id="build",
                name="Build",
                steps=[
                    Step(
                        name="checkout",
                        type="task",
                        task=Task(name="checkout", version="v1", version_type="tag"),
                        file_reference=FileReference(
                            start_ref=FileLocation(line=8, column=9),
                            end_ref=FileLocation(line=9, column=26),
                        ),
                    )
                ],
                file_reference=FileReference(
                    start_ref=FileLocation(line=5, column=3),
                    end_ref=FileLocation(line=9, column=26),
                ),
                continue_on_error=False,
                timeout_ms=21600000,
            )
        ],
    )
    assert parse_github_workflow(WORKFLOW) == expected


def test_text_and_bytes_give_same_pipeline():
    assert parse_github_workflow(WORKFLOW.decode()) == parse_github_workflow(WORKFLOW)


def test_commit_pinned_action_and_shell_step():
    sha = "a" * 40
    content = (
        "jobs:\n"
        "  test:\n"
        "    continue-on-error: true\n"
        "    steps:\n"
        f"      - uses: khulnasoft-lab/vul-action@{sha}\n"
        "      - name: run tests\n"
        "        run: make test\n"
    )
    job = parse_github_workflow(content).jobs[0]
    assert job.continue_on_error is True
    assert job.metadata == Metadata()
    task_step, shell_step = job.steps
    assert task_step.type == "task"
    assert task_step.task == Task(name="khulnasoft-lab/vul-action", version=sha, version_type="commit")
    assert shell_step.type == "shell"
    assert shell_step.shell.script == "make test"
    assert shell_step.task is None


def test_branch_and_unversioned_actions():
    content = "jobs:\n  a:\n    steps:\n      - uses: owner/action@main\n      - uses: ./local\n"
    steps = parse_github_workflow(content).jobs[0].steps
    assert steps[0].task.version_type == "branch"
    assert steps[1].task.version is None
    assert steps[1].task.name == "./local"


def test_timeout_minutes_override():
    content = "jobs:\n  a:\n    timeout-minutes: 10\n    steps: []\n"
    job = parse_github_workflow(content).jobs[0]
    assert job.timeout_ms == 600000
    assert job.steps == []


def test_jobs_keep_document_order():
    content = "jobs:\n  zeta:\n    name: Z\n  alpha:\n    name: A\n"
    assert [job.id for job in parse_github_workflow(content).jobs] == ["zeta", "alpha"]


def test_workflow_without_jobs():
    assert parse_github_workflow("name: empty\n") == Pipeline(name="empty", jobs=None)


@pytest.mark.parametrize(
    "content",
    ["jobs: [\n", "", "- just\n- a list\n", "jobs:\n  a:\n    steps: nope\n", "jobs: 3\n"],
)
def test_invalid_workflows_raise(content):
    with pytest.raises(PipelineParseError):
        parse_github_workflow(content)