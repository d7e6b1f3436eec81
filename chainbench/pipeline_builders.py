"""Builders of pipeline fixtures for exercising benchmark checks."""

from __future__ import annotations

import copy

from chainbench.pipelines import Job, Metadata, Pipeline, Shell, Step, Task

AUTHORIZED_USER_MOCK_ID = 1234
SBOM_TASK = "CycloneDX/gh-dotnet-generate-sbom"
ARGON_SCANNER_ACTION = "argonsecurity/scanner-action"
VUL_SCANNER_ACTION = "khulnasoft-lab/vul-action"

_VULNERABILITY_SCANNERS = frozenset({ARGON_SCANNER_ACTION, VUL_SCANNER_ACTION})


def _task_step(name: str, version_type: str) -> Step:
    return Step(name=name, type="task", task=Task(name=name, version_type=version_type))


class JobBuilder:
    """Builds a build job that runs a vulnerability scanner and an SBOM generator."""

    def __init__(self) -> None:
        self._job = Job(
            steps=[
                _task_step(ARGON_SCANNER_ACTION, "commit"),
                _task_step(SBOM_TASK, "commit"),
            ],
            metadata=Metadata(build=True),
        )

    def with_task(self, name: str, version_type: str) -> JobBuilder:
        self._append_step(_task_step(name, version_type))
        return self

    def with_no_vulnerability_scanner_task(self) -> JobBuilder:
        self._job.steps = [
            step for step in self._job.steps or () if step.name not in _VULNERABILITY_SCANNERS
        ]
        return self

    def with_shell_command(self, name: str, command: str) -> JobBuilder:
        self._append_step(Step(name=name, type="shell", shell=Shell(script=command)))
        return self

    def set_as_build_job(self, build_job: bool) -> JobBuilder:
        self._job.metadata.build = build_job
        return self

    def with_no_tasks(self) -> JobBuilder:
        self._job.steps = []
        return self

    def _append_step(self, step: Step) -> None:
        if self._job.steps is None:
            self._job.steps = []
        self._job.steps.append(step)

    def build(self) -> Job:
        """Return a copy of the job, independent of later changes to the builder."""
        return copy.deepcopy(self._job)


class PipelineBuilder:
    """Builds a pipeline holding one default build job."""

    def __init__(self) -> None:
        self._pipeline = Pipeline(jobs=[JobBuilder().build()])

    def with_no_jobs(self) -> PipelineBuilder:
        self._pipeline.jobs = []
        return self

    def with_job(self, job: Job) -> PipelineBuilder:
        if self._pipeline.jobs is None:
            self._pipeline.jobs = []
        self._pipeline.jobs.append(copy.copy(job))
        return self

    def build(self) -> Pipeline:
        return self._pipeline