"""Command line entry point: run the webhook server or send sample events."""

from __future__ import annotations

import asyncio

import click
import uvicorn

from bkzulip.app import create_app
from bkzulip.config import settings as env_settings
from bkzulip.log import get_logger, setup_logging
from bkzulip.samples import SCENARIOS, UnknownScenarioError, send_samples

log = get_logger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
@click.option("--log-json", is_flag=True, default=None, help="Emit JSON log lines")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None, log_json: bool | None) -> None:
    """Forward Buildkite webhook events to Zulip."""
    ctx.obj = env_settings.with_overrides(log_level=log_level, log_json=log_json or None)
    setup_logging(level=ctx.obj.log_level, json_output=ctx.obj.log_json)


@cli.command()
@click.option("--host", default=None, help="Address to bind (env HOST)")
@click.option("-p", "--port", type=int, default=None, help="Port to listen on (env PORT)")
@click.option("--zulip-bot-email", envvar="ZULIP_BOT_EMAIL", default=None, help="Zulip bot email")
@click.option(
    "--zulip-bot-api-key", envvar="ZULIP_BOT_API_KEY", default=None, help="Zulip bot API key"
)
@click.option("--zulip-server-url", envvar="ZULIP_SERVER_URL", default=None, help="Zulip server URL")
@click.option(
    "--zulip-stream", envvar="ZULIP_STREAM", default=None, help="Default stream to post to"
)
@click.pass_obj
def server(
    settings,
    host: str | None,
    port: int | None,
    zulip_bot_email: str | None,
    zulip_bot_api_key: str | None,
    zulip_server_url: str | None,
    zulip_stream: str | None,
) -> None:
    """Start the webhook server."""
    settings = settings.with_overrides(
        host=host,
        port=port,
        zulip_bot_email=zulip_bot_email,
        zulip_bot_api_key=zulip_bot_api_key,
        zulip_server_url=zulip_server_url,
        zulip_stream=zulip_stream,
    )
    if not settings.zulip_configured:
        raise click.UsageError(
            "Zulip credentials missing: set --zulip-bot-email, --zulip-bot-api-key "
            "and --zulip-server-url (or the matching ZULIP_* variables)."
        )

    log.info(
        "server_starting",
        host=settings.host,
        port=settings.port,
        zulip_server=settings.zulip_server_url,
        default_stream=settings.zulip_stream,
    )
    # log_config=None keeps uvicorn on the root handler installed by setup_logging
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


@cli.command("test")
@click.option("--server-url", default="http://localhost:3000", show_default=True)
@click.option(
    "--event-type",
    default="all",
    show_default=True,
    help=f"One of: {', '.join(SCENARIOS)}",
)
@click.option("--delay", type=float, default=2, show_default=True, help="Seconds between events")
@click.option("--build-number", type=int, default=123, show_default=True)
def send_test_events(server_url: str, event_type: str, delay: float, build_number: int) -> None:
    """Send sample webhook events to a running server."""
    try:
        asyncio.run(send_samples(server_url, event_type, delay, build_number))
    except UnknownScenarioError as exc:
        raise click.UsageError(str(exc)) from exc


if __name__ == "__main__":
    cli()
