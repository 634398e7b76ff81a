"""Tests for the HTTP surface."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from bkzulip.app import create_app
from bkzulip.routers import webhook
from bkzulip.services.zulip import ZulipError


@pytest.fixture
def sent(monkeypatch) -> list[dict]:
    calls: list[dict] = []

    async def fake_send(settings, stream, topic, content, *, client=None):
        calls.append({"stream": stream, "topic": topic, "content": content, "client": client})
        return {"result": "success"}

    monkeypatch.setattr(webhook, "send_stream_message", fake_send)
    return calls


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def test_health(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.text == "ok"


def test_help_mentions_default_stream(client):
    resp = client.get("/help")
    assert resp.status_code == 200
    assert "(buildkite)" in resp.text


def test_build_started_is_delivered(client, sent):
    resp = client.post(
        "/webhook",
        json={
            "event": "build.started",
            "build": {
                "number": 42,
                "message": "Update language pack translations",
                "commit": "abcdef1234567890",
                "web_url": "https://buildkite.com/org/lang-sami-x-private/builds/42",
            },
            "pipeline": {
                "name": "lang-sami-x-private",
                "repository": "git@github.com:my-org/my-repo.git",
            },
        },
    )

    assert resp.status_code == 200
    assert resp.json() == {"message": "OK"}
    (call,) = sent
    assert call["stream"] == "sami"
    assert call["topic"] == "lang-sami-x-private - Build"
    assert call["content"] == (
        "🔄 Build [#42](https://buildkite.com/org/lang-sami-x-private/builds/42) started\n"
        "> Update language pack translations "
        "([abcdef1](https://github.com/my-org/my-repo/commit/abcdef1234567890))"
    )
    assert call["client"] is not None


def test_default_stream_used_for_regular_pipelines(client, sent):
    resp = client.post(
        "/webhook",
        json={"event": "agent.connected", "agent": {"name": "a1", "hostname": "ci-1"}},
    )
    assert resp.status_code == 200
    assert sent[0]["stream"] == "buildkite"
    assert sent[0]["topic"] == "Build"
    assert sent[0]["content"] == "🟢 Agent 'a1' connected (ci-1)"


def test_filtered_event_is_not_delivered(client, sent):
    resp = client.post(
        "/webhook",
        json={"event": "job.finished", "job": {"name": "Unit Tests", "exit_status": 0}},
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Filtered"}
    assert sent == []


def test_unknown_event_is_delivered_with_fallback(client, sent):
    resp = client.post("/webhook", json={"event": "ping"})
    assert resp.json() == {"message": "OK"}
    assert sent[0]["content"] == "📢 Buildkite event: ping"


def test_delivery_failure_is_server_error(client, monkeypatch):
    async def failing_send(*args, **kwargs):
        raise ZulipError("Zulip error: 401 unauthorized", status_code=401, body="unauthorized")

    monkeypatch.setattr(webhook, "send_stream_message", failing_send)
    resp = client.post("/webhook", json={"event": "build.finished", "build": {"state": "failed"}})
    assert resp.status_code == 500


@pytest.mark.parametrize(
    "body",
    [
        {"build": {"number": 1}},
        {"event": "job.finished", "job": {"exit_status": "not-a-number"}},
    ],
)
def test_malformed_payload_is_client_error(client, sent, body):
    resp = client.post("/webhook", json=body)
    assert resp.status_code == 422
    assert sent == []


def test_invalid_json_is_client_error(client, sent):
    resp = client.post(
        "/webhook", content=b"{not json", headers={"content-type": "application/json"}
    )
    assert resp.status_code == 422
    assert sent == []
