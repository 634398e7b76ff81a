"""Tests for Zulip delivery."""

from __future__ import annotations

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from bkzulip.services.zulip import ZulipError, messages_url, send_stream_message


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def test_messages_url_strips_trailing_slash():
    assert messages_url("https://zulip.example.com/") == "https://zulip.example.com/api/v1/messages"


async def test_posts_stream_message_as_form(settings):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"result": "success", "id": 99})

    async with _client(handler) as client:
        data = await send_stream_message(
            settings, "sami", "My Pipeline - Build", "✅ Build [#1](#) passed", client=client
        )

    assert data == {"result": "success", "id": 99}
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "https://zulip.example.com/api/v1/messages"
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    form = parse_qs(request.content.decode())
    assert form == {
        "type": ["stream"],
        "to": ["sami"],
        "topic": ["My Pipeline - Build"],
        "content": ["✅ Build [#1](#) passed"],
    }
    credentials = base64.b64encode(b"buildkite-bot@zulip.example.com:s3cret-key").decode()
    assert request.headers["authorization"] == f"Basic {credentials}"


async def test_non_success_status_raises(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"result": "error", "msg": "Stream 'nope' does not exist"})

    async with _client(handler) as client:
        with pytest.raises(ZulipError) as info:
            await send_stream_message(settings, "nope", "t", "m", client=client)

    assert info.value.status_code == 400
    assert "does not exist" in info.value.body


async def test_transport_error_raises(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _client(handler) as client:
        with pytest.raises(ZulipError) as info:
            await send_stream_message(settings, "s", "t", "m", client=client)

    assert info.value.status_code is None
    assert isinstance(info.value.__cause__, httpx.ConnectError)


async def test_non_json_success_body(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="ok")

    async with _client(handler) as client:
        assert await send_stream_message(settings, "s", "t", "m", client=client) == {}
