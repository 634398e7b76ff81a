"""Runtime settings, read from the environment (and `.env`)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    """App Settings"""

    zulip_bot_email: str = field(default_factory=lambda: os.getenv("ZULIP_BOT_EMAIL", ""))
    zulip_bot_api_key: str = field(
        default_factory=lambda: os.getenv("ZULIP_BOT_API_KEY", ""), repr=False
    )
    zulip_server_url: str = field(default_factory=lambda: os.getenv("ZULIP_SERVER_URL", ""))
    zulip_stream: str = field(default_factory=lambda: os.getenv("ZULIP_STREAM", "buildkite"))
    zulip_timeout_seconds: float = field(
        default_factory=lambda: float(os.getenv("ZULIP_TIMEOUT_SECONDS", "15"))
    )
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_json: bool = field(default_factory=lambda: _env_bool("LOG_JSON"))

    @property
    def zulip_configured(self) -> bool:
        """True when every credential needed to post to Zulip is present."""
        return bool(self.zulip_bot_email and self.zulip_bot_api_key and self.zulip_server_url)

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with the non-``None`` overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


settings = Settings()
