"""Pipeline model and a parser for GitHub Actions workflow files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import yaml
from yaml.constructor import SafeConstructor
from yaml.error import Mark
from yaml.nodes import MappingNode, Node, ScalarNode, SequenceNode

DEFAULT_TIMEOUT_MINUTES = 360

_COMMIT_SHA = re.compile(r"[0-9a-fA-F]{40}")
_TAG = re.compile(r"v?\d+(\.\d+)*([-+].*)?")


@dataclass
class FileLocation:
    line: int = 0
    column: int = 0


@dataclass
class FileReference:
    start_ref: FileLocation | None = None
    end_ref: FileLocation | None = None


@dataclass
class Task:
    name: str | None = None
    version: str | None = None
    version_type: str = ""


@dataclass
class Shell:
    script: str | None = None


@dataclass
class Step:
    name: str | None = None
    id: str | None = None
    type: str = ""
    task: Task | None = None
    shell: Shell | None = None
    file_reference: FileReference | None = None


@dataclass
class Metadata:
    build: bool = False


@dataclass
class Job:
    id: str | None = None
    name: str | None = None
    steps: list[Step] | None = None
    metadata: Metadata = field(default_factory=Metadata)
    file_reference: FileReference | None = None
    continue_on_error: bool | None = None
    timeout_ms: int | None = None


@dataclass
class Pipeline:
    name: str | None = None
    jobs: list[Job] | None = None


class PipelineParseError(ValueError):
    """Raised when a workflow file cannot be read as a pipeline."""


def _location(mark: Mark) -> FileLocation:
    return FileLocation(line=mark.line + 1, column=mark.column + 1)


def _last_mark(node: Node) -> Mark:
    if isinstance(node, MappingNode) and node.value:
        return _last_mark(node.value[-1][1])
    if isinstance(node, SequenceNode) and node.value:
        return _last_mark(node.value[-1])
    return node.end_mark


def _reference(start: Node, end: Node) -> FileReference:
    return FileReference(start_ref=_location(start.start_mark), end_ref=_location(_last_mark(end)))


class _Reader:
    def __init__(self) -> None:
        self._constructor = SafeConstructor()

    def value(self, node: Node) -> Any:
        return self._constructor.construct_object(node, deep=True)

    def text(self, fields: dict[str, Node], key: str) -> str | None:
        node = fields.get(key)
        if node is None:
            return None
        value = self.value(node)
        return None if value is None else str(value)


def _fields(node: Node, what: str) -> dict[str, Node]:
    if not isinstance(node, MappingNode):
        raise PipelineParseError(f"{what} must be a mapping")
    return {str(key.value): value for key, value in node.value if isinstance(key, ScalarNode)}


def _version_type(version: str) -> str:
    if _COMMIT_SHA.fullmatch(version):
        return "commit"
    if _TAG.fullmatch(version):
        return "tag"
    return "branch"


def _parse_task(uses: str) -> Task:
    name, sep, version = uses.partition("@")
    if not sep:
        return Task(name=name, version_type="none")
    return Task(name=name, version=version, version_type=_version_type(version))


def _parse_step(node: Node, reader: _Reader) -> Step:
    fields = _fields(node, "step")
    step = Step(
        name=reader.text(fields, "name"),
        id=reader.text(fields, "id"),
        file_reference=_reference(node, node),
    )
    uses = reader.text(fields, "uses")
    run = reader.text(fields, "run")
    if uses is not None:
        step.type = "task"
        step.task = _parse_task(uses)
    elif run is not None:
        step.type = "shell"
        step.shell = Shell(script=run)
    return step


def _parse_job(key: Node, node: Node, reader: _Reader) -> Job:
    fields = _fields(node, f"job {key.value!r}")
    steps = None
    if "steps" in fields:
        steps_node = fields["steps"]
        if not isinstance(steps_node, SequenceNode):
            raise PipelineParseError(f"steps of job {key.value!r} must be a list")
        steps = [_parse_step(step, reader) for step in steps_node.value]

    continue_on_error = False
    if "continue-on-error" in fields:
        continue_on_error = reader.value(fields["continue-on-error"]) is True

    timeout = DEFAULT_TIMEOUT_MINUTES
    if "timeout-minutes" in fields:
        value = reader.value(fields["timeout-minutes"])
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            timeout = value

    return Job(
        id=str(key.value),
        name=reader.text(fields, "name"),
        steps=steps,
        file_reference=_reference(key, node),
        continue_on_error=continue_on_error,
        timeout_ms=int(timeout * 60_000),
    )


def parse_github_workflow(content: bytes | str) -> Pipeline:
    """Parse a GitHub Actions workflow into a Pipeline.

    Raises PipelineParseError when the content is not a valid workflow document.
    """
    try:
        root = yaml.compose(content, Loader=yaml.SafeLoader)
    except yaml.YAMLError as exc:
        raise PipelineParseError(f"invalid workflow: {exc}") from exc
    if root is None:
        raise PipelineParseError("workflow is empty")
    reader = _Reader()
    fields = _fields(root, "workflow")

    jobs = None
    if "jobs" in fields:
        jobs_node = fields["jobs"]
        if not isinstance(jobs_node, MappingNode):
            raise PipelineParseError("jobs must be a mapping")
        jobs = [_parse_job(key, value, reader) for key, value in jobs_node.value]

    return Pipeline(name=reader.text(fields, "name"), jobs=jobs)