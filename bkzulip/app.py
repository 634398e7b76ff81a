"""the beautiful world start from here."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from fastapi import FastAPI

from bkzulip.config import Settings, settings as default_settings
from bkzulip.routers import info, webhook


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the webhook app; one shared HTTP client lives for the app's lifetime."""
    app_settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with httpx.AsyncClient(timeout=app_settings.zulip_timeout_seconds) as client:
            app.state.http = client
            yield
        app.state.http = None

    app = FastAPI(title="Buildkite → Zulip", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.http = None

    app.include_router(info.router)
    app.include_router(webhook.router)
    return app


app = create_app()
