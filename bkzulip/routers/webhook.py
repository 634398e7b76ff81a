"""Buildkite webhook router."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from bkzulip.events import from_payload
from bkzulip.log import get_logger
from bkzulip.schemas import BuildkiteWebhookEvent, WebhookResponse
from bkzulip.services.buildkite import render
from bkzulip.services.routing import route
from bkzulip.services.zulip import ZulipError, send_stream_message

router = APIRouter(tags=["buildkite"])

log = get_logger(__name__)


@router.post("/webhook", response_model=WebhookResponse)
async def buildkite_webhook(payload: BuildkiteWebhookEvent, request: Request) -> WebhookResponse:
    """
    Buildkite webhook endpoint.

    The payload is rendered into a Zulip message and posted to the stream picked
    by the pipeline name (or the configured default stream). Filtered events are
    acknowledged with ``Filtered`` and never reach Zulip.
    """
    settings = request.app.state.settings
    event = from_payload(payload)
    log.info("webhook_received", kind=event.name)

    rendered = render(event)
    if rendered.filtered:
        log.info("webhook_filtered", kind=event.name)
        return WebhookResponse(message="Filtered")

    stream = route(event, settings.zulip_stream)
    try:
        await send_stream_message(
            settings,
            stream,
            rendered.topic,
            rendered.message,
            client=getattr(request.app.state, "http", None),
        )
    except ZulipError as exc:
        log.error(
            "zulip_delivery_failed",
            kind=event.name,
            stream=stream,
            status=exc.status_code,
            error=str(exc),
        )
        raise HTTPException(500, "Failed to deliver message to Zulip") from exc

    log.info("zulip_message_sent", kind=event.name, stream=stream, topic=rendered.topic)
    return WebhookResponse(message="OK")
