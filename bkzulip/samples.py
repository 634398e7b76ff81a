"""Synthetic Buildkite webhook deliveries for exercising a running server."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

import httpx

from bkzulip.log import get_logger
from bkzulip.schemas import (
    BuildkiteAuthor,
    BuildkiteBuild,
    BuildkiteJob,
    BuildkitePipeline,
    BuildkiteProvider,
    BuildkiteProviderSettings,
    BuildkiteWebhookEvent,
)

ORG = "my-org"
API_BASE = f"https://api.buildkite.com/v2/organizations/{ORG}/pipelines"
WEB_BASE = f"https://buildkite.com/{ORG}"
REPOSITORY = "git@github.com:my-org/my-repo.git"
REPOSITORY_SLUG = "my-org/my-repo"
DEFAULT_PIPELINE = "My Awesome Pipeline"
DEFAULT_PIPELINE_SLUG = "my-awesome-pipeline"

# state -> (commit, message, author)
FINISHED_BUILDS: dict[str, tuple[str, str, str]] = {
    "passed": (
        "b2c3d4e5f6789012345678901234567890abcdef",
        "Fix critical security vulnerability",
        "Bob Tester",
    ),
    "failed": (
        "c3d4e5f6789012345678901234567890abcdef12",
        "Update dependencies to latest versions",
        "Charlie Developer",
    ),
    "canceled": (
        "d4e5f6789012345678901234567890abcdef1234",
        "Refactor database connection handling",
        "Dana Engineer",
    ),
}
UNKNOWN_BUILD = (
    "unknown1234567890abcdef1234567890abcdef12",
    "Unknown build message",
    "Unknown Author",
)

log = get_logger(__name__)


def _pipeline(name: str = DEFAULT_PIPELINE, slug: str = DEFAULT_PIPELINE_SLUG) -> BuildkitePipeline:
    return BuildkitePipeline(
        id=f"{slug}-123" if slug != DEFAULT_PIPELINE_SLUG else "pipeline-123",
        name=name,
        slug=slug,
        url=f"{API_BASE}/{slug}",
        web_url=f"{WEB_BASE}/{slug}",
        repository=REPOSITORY,
        provider=BuildkiteProvider(
            id="github",
            settings=BuildkiteProviderSettings(repository=REPOSITORY_SLUG),
            repository_url=f"https://github.com/{REPOSITORY_SLUG}",
        ),
    )


def _build(
    build_id: str,
    number: int,
    state: str,
    message: str,
    commit: str,
    branch: str,
    author: str,
    email: str,
    slug: str = "my-pipeline",
) -> BuildkiteBuild:
    return BuildkiteBuild(
        id=build_id,
        number=number,
        state=state,
        message=message,
        commit=commit,
        branch=branch,
        url=f"{API_BASE}/{slug}/builds/{number}",
        web_url=f"{WEB_BASE}/{slug}/builds/{number}",
        author=BuildkiteAuthor(name=author, email=email),
    )


def build_started(build_number: int) -> BuildkiteWebhookEvent:
    return BuildkiteWebhookEvent(
        event="build.started",
        build=_build(
            f"build-started-{build_number}",
            build_number,
            "running",
            "Add new feature for user authentication",
            "a1b2c3d4e5f6789012345678901234567890abcd",
            "feature/auth-improvements",
            "Alice Developer",
            "alice@example.com",
        ),
        pipeline=_pipeline(),
    )


def build_finished(state: str, build_number: int) -> BuildkiteWebhookEvent:
    commit, message, author = FINISHED_BUILDS.get(state, UNKNOWN_BUILD)
    email = f"{author.lower().replace(' ', '.')}@example.com"
    return BuildkiteWebhookEvent(
        event="build.finished",
        build=_build(
            f"build-{state}-{build_number}",
            build_number,
            state,
            message,
            commit,
            "main",
            author,
            email,
        ),
        pipeline=_pipeline(),
    )


def job_finished(exit_status: int, build_number: int) -> BuildkiteWebhookEvent:
    passed = exit_status == 0
    job_id = "job-tests-123" if passed else "job-lint-456"
    return BuildkiteWebhookEvent(
        event="job.finished",
        job=BuildkiteJob(
            id=job_id,
            name="Unit Tests" if passed else "Linting",
            command="npm test",
            state="passed" if passed else "failed",
            exit_status=exit_status,
            web_url=f"{WEB_BASE}/my-pipeline/builds/{build_number}#{job_id}",
        ),
        pipeline=_pipeline(),
    )


def _project_build_started(
    prefix: str, pipeline_name: str, message: str, commit: str, team: str, email: str, build_number: int
) -> BuildkiteWebhookEvent:
    return BuildkiteWebhookEvent(
        event="build.started",
        build=_build(
            f"{prefix}-build-{build_number}",
            build_number,
            "running",
            message,
            commit,
            "main",
            team,
            email,
            slug=pipeline_name,
        ),
        pipeline=_pipeline(name=pipeline_name, slug=pipeline_name),
    )


def lang_pipeline_build(build_number: int) -> BuildkiteWebhookEvent:
    return _project_build_started(
        "lang",
        "lang-sami-x-private",
        "Update language pack translations",
        "lang123456789012345678901234567890abcd",
        "Language Team",
        "lang@example.com",
        build_number,
    )


def keyboard_pipeline_build(build_number: int) -> BuildkiteWebhookEvent:
    return _project_build_started(
        "keyboard",
        "keyboard-finnish-public",
        "Update keyboard layout definitions",
        "kbd123456789012345678901234567890abcd",
        "Keyboard Team",
        "keyboard@example.com",
        build_number,
    )


ScenarioFactory = Callable[[int], list[BuildkiteWebhookEvent]]

SCENARIOS: dict[str, ScenarioFactory] = {
    "build-started": lambda n: [build_started(n)],
    "build-passed": lambda n: [build_finished("passed", n)],
    "build-failed": lambda n: [build_finished("failed", n)],
    "build-canceled": lambda n: [build_finished("canceled", n)],
    "job-passed": lambda n: [job_finished(0, n)],
    "job-failed": lambda n: [job_finished(1, n)],
    "all": lambda n: [
        build_started(n),
        job_finished(0, n),
        job_finished(1, n),
        build_finished("passed", n),
    ],
    "scenario": lambda n: [
        build_started(n),
        job_finished(0, n),
        job_finished(1, n),
        build_finished("failed", n),
    ],
    "lang-routing": lambda n: [lang_pipeline_build(n)],
    "keyboard-routing": lambda n: [keyboard_pipeline_build(n)],
}


class UnknownScenarioError(ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(
            f"Unknown event type: {name}. Valid types: {', '.join(SCENARIOS)}"
        )
        self.name = name


def scenario_events(event_type: str, build_number: int) -> list[BuildkiteWebhookEvent]:
    factory = SCENARIOS.get(event_type)
    if factory is None:
        raise UnknownScenarioError(event_type)
    return factory(build_number)


async def send_samples(
    server_url: str,
    event_type: str = "all",
    delay: float = 2,
    build_number: int = 123,
    *,
    client: Optional[httpx.AsyncClient] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """
    Post the events of ``event_type`` to ``{server_url}/webhook`` in order.

    Returns the number of events the server accepted. Rejected events are
    logged and do not stop the run.
    """
    events = scenario_events(event_type, build_number)
    webhook_url = f"{server_url.rstrip('/')}/webhook"
    accepted = 0

    async def _run(http: httpx.AsyncClient) -> None:
        nonlocal accepted
        for index, event in enumerate(events):
            log.info("sample_event_sending", index=index + 1, total=len(events), kind=event.event)
            resp = await http.post(webhook_url, json=event.model_dump(mode="json"))
            if resp.status_code < 300:
                accepted += 1
                log.info("sample_event_sent", kind=event.event, response=resp.text)
            else:
                log.error(
                    "sample_event_failed",
                    kind=event.event,
                    status=resp.status_code,
                    body=resp.text,
                )
            if index < len(events) - 1 and delay > 0:
                await sleep(delay)

    if client is None:
        async with httpx.AsyncClient(timeout=30) as own:
            await _run(own)
    else:
        await _run(client)

    log.info("sample_events_done", accepted=accepted, total=len(events))
    return accepted
