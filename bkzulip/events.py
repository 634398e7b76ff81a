"""Normalized Buildkite events.

The wire payload is flat and all-optional (see :mod:`bkzulip.schemas`). It is
converted once, at the edge, into one of a closed set of frozen event
variants so that the renderer and router never have to guess which
sub-records are meaningful for a given kind.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from bkzulip.schemas import (
    BuildkiteAgent,
    BuildkiteAnnotation,
    BuildkiteBuild,
    BuildkiteJob,
    BuildkitePipeline,
    BuildkiteWebhookEvent,
)


class EventKind(str, Enum):
    """Every Buildkite event name this app knows how to classify."""

    BUILD_CREATED = "build.created"
    BUILD_SCHEDULED = "build.scheduled"
    BUILD_STARTED = "build.started"
    BUILD_RUNNING = "build.running"
    BUILD_BLOCKED = "build.blocked"
    BUILD_UNBLOCKED = "build.unblocked"
    BUILD_CANCELED = "build.canceled"
    BUILD_REBUILT = "build.rebuilt"
    BUILD_FINISHED = "build.finished"
    BUILD_PASSED = "build.passed"
    BUILD_FAILED = "build.failed"

    JOB_SCHEDULED = "job.scheduled"
    JOB_ASSIGNED = "job.assigned"
    JOB_STARTED = "job.started"
    JOB_FINISHED = "job.finished"
    JOB_CANCELED = "job.canceled"
    JOB_RETRIED = "job.retried"
    JOB_TIMED_OUT = "job.timed_out"

    AGENT_CONNECTED = "agent.connected"
    AGENT_DISCONNECTED = "agent.disconnected"

    ANNOTATION_CREATED = "annotation.created"
    ANNOTATION_UPDATED = "annotation.updated"
    ANNOTATION_DELETED = "annotation.deleted"

    PIPELINE_CREATED = "pipeline.created"
    PIPELINE_UPDATED = "pipeline.updated"
    PIPELINE_DELETED = "pipeline.deleted"

    @property
    def family(self) -> str:
        return self.value.partition(".")[0]

    @property
    def verb(self) -> str:
        return self.value.partition(".")[2]

    @classmethod
    def parse(cls, value: str | None) -> Optional["EventKind"]:
        """Return the matching kind, or ``None`` for names we do not know."""
        try:
            return cls(value)
        except ValueError:
            return None


class BuildState(str, Enum):
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    CANCELED = "canceled"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "BuildState":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class AnnotationStyle(str, Enum):
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"
    OTHER = "other"

    @classmethod
    def parse(cls, value: str | None) -> "AnnotationStyle":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Provider:
    id: str | None = None
    repository_url: str | None = None
    # `owner/repo` slug from provider.settings.repository
    repository_slug: str | None = None


@dataclass(frozen=True)
class Pipeline:
    name: str | None = None
    slug: str | None = None
    web_url: str | None = None
    repository: str | None = None
    provider: Provider | None = None


@dataclass(frozen=True)
class Build:
    number: int | None = None
    state: BuildState = BuildState.UNKNOWN
    message: str | None = None
    commit: str | None = None
    branch: str | None = None
    web_url: str | None = None


@dataclass(frozen=True)
class Job:
    name: str | None = None
    command: str | None = None
    # None means the job has not reported an exit code
    exit_status: int | None = None
    web_url: str | None = None


@dataclass(frozen=True)
class Agent:
    name: str | None = None
    hostname: str | None = None


@dataclass(frozen=True)
class Annotation:
    style: AnnotationStyle = AnnotationStyle.OTHER
    context: str | None = None


@dataclass(frozen=True, kw_only=True)
class Event:
    """Common shape: every event may name the pipeline it belongs to."""

    kind: EventKind | None
    pipeline: Pipeline | None = None

    @property
    def name(self) -> str:
        return self.kind.value if self.kind else ""


@dataclass(frozen=True, kw_only=True)
class BuildEvent(Event):
    kind: EventKind
    build: Build | None = None


@dataclass(frozen=True, kw_only=True)
class JobEvent(Event):
    kind: EventKind
    job: Job | None = None


@dataclass(frozen=True, kw_only=True)
class AgentEvent(Event):
    kind: EventKind
    agent: Agent | None = None


@dataclass(frozen=True, kw_only=True)
class AnnotationEvent(Event):
    kind: EventKind
    annotation: Annotation | None = None


@dataclass(frozen=True, kw_only=True)
class PipelineEvent(Event):
    kind: EventKind


@dataclass(frozen=True, kw_only=True)
class UnknownEvent(Event):
    """An event name Buildkite sent that this app does not classify."""

    kind: None = None
    raw_kind: str = ""

    @property
    def name(self) -> str:
        return self.raw_kind


# ---------------------------------------------------------------------------
# Wire -> normalized conversion
# ---------------------------------------------------------------------------


def _pipeline(data: BuildkitePipeline | None) -> Pipeline | None:
    if data is None:
        return None
    provider = None
    if data.provider is not None:
        settings = data.provider.settings
        provider = Provider(
            id=data.provider.id,
            repository_url=data.provider.repository_url,
            repository_slug=settings.repository if settings else None,
        )
    return Pipeline(
        name=data.name,
        slug=data.slug,
        web_url=data.web_url,
        repository=data.repository,
        provider=provider,
    )


def _build(data: BuildkiteBuild | None) -> Build | None:
    if data is None:
        return None
    return Build(
        number=data.number,
        state=BuildState.parse(data.state),
        message=data.message,
        commit=data.commit,
        branch=data.branch,
        web_url=data.web_url,
    )


def _job(data: BuildkiteJob | None) -> Job | None:
    if data is None:
        return None
    return Job(
        name=data.name,
        command=data.command,
        exit_status=data.exit_status,
        web_url=data.web_url,
    )


def _agent(data: BuildkiteAgent | None) -> Agent | None:
    if data is None:
        return None
    return Agent(name=data.name, hostname=data.hostname)


def _annotation(data: BuildkiteAnnotation | None) -> Annotation | None:
    if data is None:
        return None
    return Annotation(style=AnnotationStyle.parse(data.style), context=data.context)


Converter = Callable[[EventKind, BuildkiteWebhookEvent, Optional[Pipeline]], Event]

CONVERTERS: dict[str, Converter] = {
    "build": lambda kind, p, pipe: BuildEvent(kind=kind, pipeline=pipe, build=_build(p.build)),
    "job": lambda kind, p, pipe: JobEvent(kind=kind, pipeline=pipe, job=_job(p.job)),
    "agent": lambda kind, p, pipe: AgentEvent(kind=kind, pipeline=pipe, agent=_agent(p.agent)),
    "annotation": lambda kind, p, pipe: AnnotationEvent(
        kind=kind, pipeline=pipe, annotation=_annotation(p.annotation)
    ),
    "pipeline": lambda kind, p, pipe: PipelineEvent(kind=kind, pipeline=pipe),
}


def from_payload(payload: BuildkiteWebhookEvent) -> Event:
    """Convert a parsed webhook body into its normalized event variant."""
    pipeline = _pipeline(payload.pipeline)
    kind = EventKind.parse(payload.event)
    if kind is None:
        return UnknownEvent(raw_kind=payload.event, pipeline=pipeline)
    return CONVERTERS[kind.family](kind, payload, pipeline)
