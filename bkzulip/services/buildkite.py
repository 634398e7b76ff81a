"""Zulip messages for Buildkite webhook events."""

from __future__ import annotations

from typing import Callable, Mapping, NamedTuple

from bkzulip.events import (
    AgentEvent,
    AnnotationEvent,
    AnnotationStyle,
    BuildEvent,
    BuildState,
    Event,
    EventKind,
    Job,
    JobEvent,
    Pipeline,
    PipelineEvent,
)
from bkzulip.services.repository import resolve_repo_url

Handler = Callable[[Event], str]

UNKNOWN = "unknown"
UNKNOWN_HOST = "unknown host"
UNNAMED_JOB = "unnamed job"
NO_URL = "#"
SHORT_SHA_LENGTH = 7
JOB_NAME_LIMIT = 40  # longer command lines are cut to 37 chars + "..."
FILTERED = ""
DEFAULT_TOPIC = "Build"

BUILD_ICONS: Mapping[EventKind, str] = {
    EventKind.BUILD_CREATED: "🆕",
    EventKind.BUILD_SCHEDULED: "📅",
    EventKind.BUILD_STARTED: "🔄",
    EventKind.BUILD_RUNNING: "🏃",
    EventKind.BUILD_BLOCKED: "🚫",
    EventKind.BUILD_UNBLOCKED: "🟢",
    EventKind.BUILD_CANCELED: "⏹️",
    EventKind.BUILD_REBUILT: "🔁",
}

BUILD_RESULTS: Mapping[BuildState, tuple[str, str]] = {
    BuildState.PASSED: ("✅", "passed"),
    BuildState.FAILED: ("❌", "failed"),
    BuildState.CANCELED: ("⏹️", "canceled"),
}
DEFAULT_BUILD_RESULT = ("❓", "finished")

AGENT_ICONS: Mapping[EventKind, str] = {
    EventKind.AGENT_CONNECTED: "🟢",
    EventKind.AGENT_DISCONNECTED: "🔴",
}

ANNOTATION_STYLE_ICONS: Mapping[AnnotationStyle, str] = {
    AnnotationStyle.SUCCESS: "✅",
    AnnotationStyle.WARNING: "⚠️",
    AnnotationStyle.ERROR: "❌",
    AnnotationStyle.INFO: "ℹ️",
}
DEFAULT_ANNOTATION_ICON = "📝"
DELETED_ANNOTATION_ICON = "🗑️"

PIPELINE_ICONS: Mapping[EventKind, str] = {
    EventKind.PIPELINE_CREATED: "🆕",
    EventKind.PIPELINE_UPDATED: "📝",
    EventKind.PIPELINE_DELETED: "🗑️",
}

FALLBACK_ICON = "📢"


class Rendered(NamedTuple):
    """A rendered notification; an empty ``message`` means "do not send"."""

    message: str
    topic: str

    @property
    def filtered(self) -> bool:
        return not self.message.strip()


def _link(label: str, url: str | None) -> str:
    return f"[{label}]({url or NO_URL})"


def job_display_name(job: Job) -> str:
    """
    Human label for a job.

    Prefers ``job.name``; otherwise the first line of ``job.command``
    (cut to 37 characters plus ``...`` when longer than 40).
    """
    if job.name and job.name.strip():
        return job.name
    if job.command:
        first_line = job.command.split("\n", 1)[0].rstrip("\r").strip()
        if first_line:
            if len(first_line) > JOB_NAME_LIMIT:
                return f"{first_line[:JOB_NAME_LIMIT - 3]}..."
            return first_line
    return UNNAMED_JOB


def _commit_link(commit: str | None, pipeline: Pipeline | None) -> str:
    if not commit:
        return ""
    repo_url = resolve_repo_url(pipeline)
    if not repo_url:
        return ""
    return f" ({_link(commit[:SHORT_SHA_LENGTH], f'{repo_url}/commit/{commit}')})"


# ---------------------------------------------------------------------------
# Per-family handlers
# ---------------------------------------------------------------------------


def _summarize_build_start(event: BuildEvent) -> str:
    icon = BUILD_ICONS[event.kind]
    build = event.build
    if build is None:
        return f"{icon} Build {event.kind.verb}"

    head = f"{icon} Build {_link(f'#{build.number or 0}', build.web_url)} {event.kind.verb}"
    if not build.message or not build.message.strip():
        return head
    return f"{head}\n> {build.message}{_commit_link(build.commit, event.pipeline)}"


def _summarize_build_status(event: BuildEvent) -> str:
    icon = BUILD_ICONS[event.kind]
    build = event.build
    if build is None:
        return f"{icon} Build {event.kind.verb}"
    return f"{icon} Build {_link(f'#{build.number or 0}', build.web_url)} {event.kind.verb}"


def _summarize_build_finished(event: BuildEvent) -> str:
    build = event.build
    if build is None:
        return "✅ Build finished"
    icon, verb = BUILD_RESULTS.get(build.state, DEFAULT_BUILD_RESULT)
    return f"{icon} Build {_link(f'#{build.number or 0}', build.web_url)} {verb}"


def _summarize_job_finished(event: JobEvent) -> str:
    job = event.job
    if job is None:
        return FILTERED
    if job.exit_status == 0:
        # Successful jobs are noise; the build result covers them.
        return FILTERED
    if job.exit_status is None:
        icon, verb = "❓", "finished"
    else:
        icon, verb = "❌", "failed"
    label = f"'{job_display_name(job)}'"
    return f"{icon} Job {_link(label, job.web_url)} {verb}"


def _summarize_filtered(_event: Event) -> str:
    return FILTERED


def _summarize_agent(event: AgentEvent) -> str:
    icon = AGENT_ICONS[event.kind]
    agent = event.agent
    if agent is None:
        return f"{icon} Agent {event.kind.verb}"
    return (
        f"{icon} Agent '{agent.name or UNKNOWN}' {event.kind.verb}"
        f" ({agent.hostname or UNKNOWN_HOST})"
    )


def _summarize_annotation(event: AnnotationEvent) -> str:
    annotation = event.annotation
    if event.kind is EventKind.ANNOTATION_DELETED:
        icon = DELETED_ANNOTATION_ICON
    elif annotation is None:
        icon = DEFAULT_ANNOTATION_ICON
    else:
        icon = ANNOTATION_STYLE_ICONS.get(annotation.style, DEFAULT_ANNOTATION_ICON)
    if annotation is None:
        return f"{icon} Annotation {event.kind.verb}"
    return f"{icon} Annotation {event.kind.verb}: {annotation.context or 'annotation'}"


def _summarize_pipeline(event: PipelineEvent) -> str:
    icon = PIPELINE_ICONS[event.kind]
    pipeline = event.pipeline
    if pipeline is None:
        return f"{icon} Pipeline {event.kind.verb}"
    return f"{icon} Pipeline '{pipeline.name or UNKNOWN}' {event.kind.verb}"


def _generic_fallback(event: Event) -> str:
    return f"{FALLBACK_ICON} Buildkite event: {event.name}"


HANDLERS: dict[EventKind, Handler] = {
    EventKind.BUILD_CREATED: _summarize_build_start,
    EventKind.BUILD_SCHEDULED: _summarize_build_start,
    EventKind.BUILD_STARTED: _summarize_build_start,
    EventKind.BUILD_RUNNING: _summarize_build_status,
    EventKind.BUILD_BLOCKED: _summarize_build_status,
    EventKind.BUILD_UNBLOCKED: _summarize_build_status,
    EventKind.BUILD_CANCELED: _summarize_build_status,
    EventKind.BUILD_REBUILT: _summarize_build_status,
    EventKind.BUILD_FINISHED: _summarize_build_finished,
    EventKind.BUILD_PASSED: _summarize_build_finished,
    EventKind.BUILD_FAILED: _summarize_build_finished,
    EventKind.JOB_FINISHED: _summarize_job_finished,
    EventKind.JOB_SCHEDULED: _summarize_filtered,
    EventKind.JOB_ASSIGNED: _summarize_filtered,
    EventKind.JOB_STARTED: _summarize_filtered,
    EventKind.JOB_CANCELED: _summarize_filtered,
    EventKind.JOB_RETRIED: _summarize_filtered,
    EventKind.JOB_TIMED_OUT: _summarize_filtered,
    EventKind.AGENT_CONNECTED: _summarize_agent,
    EventKind.AGENT_DISCONNECTED: _summarize_agent,
    EventKind.ANNOTATION_CREATED: _summarize_annotation,
    EventKind.ANNOTATION_UPDATED: _summarize_annotation,
    EventKind.ANNOTATION_DELETED: _summarize_annotation,
    EventKind.PIPELINE_CREATED: _summarize_pipeline,
    EventKind.PIPELINE_UPDATED: _summarize_pipeline,
    EventKind.PIPELINE_DELETED: _summarize_pipeline,
}


def format_message(event: Event) -> str:
    """Message body for ``event``; empty when the event should not be sent."""
    handler = HANDLERS.get(event.kind) if event.kind is not None else None
    if handler:
        try:
            return handler(event)
        except Exception:  # pragma: no cover - never crash on summaries
            pass
    return _generic_fallback(event)


def format_topic(event: Event) -> str:
    pipeline = event.pipeline
    if pipeline is not None and pipeline.name:
        return f"{pipeline.name} - Build"
    return DEFAULT_TOPIC


def render(event: Event) -> Rendered:
    return Rendered(message=format_message(event), topic=format_topic(event))
