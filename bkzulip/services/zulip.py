"""Zulip stream messages over the REST API."""

from __future__ import annotations

from typing import Any, Optional

import httpx

from bkzulip.config import Settings
from bkzulip.log import get_logger

MESSAGES_PATH = "/api/v1/messages"

JSONDict = dict[str, Any]

log = get_logger(__name__)


class ZulipError(Exception):
    """Zulip rejected a message, or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


def messages_url(server_url: str) -> str:
    return f"{server_url.rstrip('/')}{MESSAGES_PATH}"


async def send_stream_message(
    settings: Settings,
    stream: str,
    topic: str,
    content: str,
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> JSONDict:
    """Post ``content`` to ``stream``/``topic`` as the configured bot."""
    url = messages_url(settings.zulip_server_url)
    form = {
        "type": "stream",
        "to": stream,
        "topic": topic,
        "content": content,
    }
    auth = (settings.zulip_bot_email, settings.zulip_bot_api_key)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.zulip_timeout_seconds) as own:
                resp = await own.post(url, data=form, auth=auth)
        else:
            resp = await client.post(url, data=form, auth=auth)
    except httpx.HTTPError as exc:
        raise ZulipError(f"Zulip unreachable: {exc}") from exc

    if resp.status_code >= 300:
        raise ZulipError(
            f"Zulip error: {resp.status_code} {resp.text}",
            status_code=resp.status_code,
            body=resp.text,
        )
    log.debug("zulip_message_sent", stream=stream, topic=topic)
    try:
        return resp.json()
    except ValueError:
        return {}
