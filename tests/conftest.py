"""Shared fixtures."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from bkzulip.config import Settings
from bkzulip.events import Event, from_payload
from bkzulip.schemas import BuildkiteWebhookEvent

REPO_URL = "https://github.com/my-org/my-repo"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        zulip_bot_email="buildkite-bot@zulip.example.com",
        zulip_bot_api_key="s3cret-key",
        zulip_server_url="https://zulip.example.com",
        zulip_stream="buildkite",
        zulip_timeout_seconds=5,
        host="127.0.0.1",
        port=3000,
        log_level="INFO",
        log_json=False,
    )


@pytest.fixture
def make_event() -> Callable[..., Event]:
    """Build a normalized event the same way the webhook route does."""

    def _make(kind: str, **sections: Any) -> Event:
        payload = BuildkiteWebhookEvent.model_validate({"event": kind, **sections})
        return from_payload(payload)

    return _make


@pytest.fixture
def github_pipeline() -> dict[str, Any]:
    return {
        "id": "pipeline123",
        "name": "My Pipeline",
        "slug": "my-pipeline",
        "web_url": "https://buildkite.com/org/my-pipeline",
        "provider": {
            "id": "github",
            "settings": {"repository": "my-org/my-repo"},
            "repository_url": REPO_URL,
        },
    }
