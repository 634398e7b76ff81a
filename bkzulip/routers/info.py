"""Router info: health & help."""

from __future__ import annotations

from textwrap import dedent

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

router = APIRouter()

HTTP_HELP_TEXT = dedent(
    """
Buildkite → Zulip Notifier (HTTP Help)

Endpoints
---------
- GET  /         : Health check
- GET  /help     : This text
- POST /webhook  : Buildkite webhook (JSON body)

Routing
-------
- Pipelines named lang-<project>-... or keyboard-<project>-... post to the
  <project> stream; everything else goes to the default stream ({stream}).
- Topic is "<pipeline name> - Build".
"""
).strip()


@router.get("/help", response_class=PlainTextResponse)
def http_help(request: Request) -> str:
    return HTTP_HELP_TEXT.format(stream=request.app.state.settings.zulip_stream)


@router.get("/", response_class=PlainTextResponse)
def root() -> str:
    """Health check."""
    return "ok"
