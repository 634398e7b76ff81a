"""Wire models for Buildkite webhook payloads.

Only fields used by this app (or echoed back by the sample generator) are
declared; everything is optional except ``event`` and unknown keys are
tolerated so new Buildkite fields never break parsing.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)


class BuildkiteAuthor(_Payload):
    name: Optional[str] = None
    email: Optional[str] = None


class BuildkiteBuild(_Payload):
    id: Optional[str] = None
    number: Optional[int] = None
    state: Optional[str] = None
    message: Optional[str] = None
    commit: Optional[str] = None
    branch: Optional[str] = None
    url: Optional[str] = None
    web_url: Optional[str] = None
    author: Optional[BuildkiteAuthor] = None


class BuildkiteJob(_Payload):
    id: Optional[str] = None
    name: Optional[str] = None
    command: Optional[str] = None
    state: Optional[str] = None
    exit_status: Optional[int] = None
    web_url: Optional[str] = None


class BuildkiteProviderSettings(_Payload):
    repository: Optional[str] = None


class BuildkiteProvider(_Payload):
    id: Optional[str] = None
    settings: Optional[BuildkiteProviderSettings] = None
    repository_url: Optional[str] = None


class BuildkitePipeline(_Payload):
    id: Optional[str] = None
    name: Optional[str] = None
    slug: Optional[str] = None
    url: Optional[str] = None
    web_url: Optional[str] = None
    repository: Optional[str] = None
    provider: Optional[BuildkiteProvider] = None


class BuildkiteAgent(_Payload):
    id: Optional[str] = None
    name: Optional[str] = None
    hostname: Optional[str] = None
    version: Optional[str] = None
    connection_state: Optional[str] = None
    ip_address: Optional[str] = None


class BuildkiteAnnotation(_Payload):
    id: Optional[str] = None
    body: Optional[str] = None
    style: Optional[str] = None
    context: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class BuildkiteWebhookEvent(_Payload):
    """One Buildkite webhook delivery as it arrives on the wire."""

    event: str
    build: Optional[BuildkiteBuild] = None
    job: Optional[BuildkiteJob] = None
    pipeline: Optional[BuildkitePipeline] = None
    agent: Optional[BuildkiteAgent] = None
    annotation: Optional[BuildkiteAnnotation] = None


class WebhookResponse(BaseModel):
    message: str
