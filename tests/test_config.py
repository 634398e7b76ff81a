"""Tests for environment-driven settings."""

from bkzulip.config import Settings


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("ZULIP_BOT_EMAIL", "bot@zulip.test")
    monkeypatch.setenv("ZULIP_BOT_API_KEY", "key")
    monkeypatch.setenv("ZULIP_SERVER_URL", "https://zulip.test")
    monkeypatch.setenv("ZULIP_STREAM", "ci")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_JSON", "true")

    cfg = Settings()

    assert cfg.zulip_bot_email == "bot@zulip.test"
    assert cfg.zulip_stream == "ci"
    assert cfg.port == 8080
    assert cfg.log_json is True
    assert cfg.zulip_configured


def test_defaults(monkeypatch):
    for name in ("ZULIP_STREAM", "PORT", "HOST", "ZULIP_TIMEOUT_SECONDS", "LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    cfg = Settings()
    assert cfg.zulip_stream == "buildkite"
    assert cfg.port == 3000
    assert cfg.host == "127.0.0.1"
    assert cfg.zulip_timeout_seconds == 15
    assert cfg.log_json is False


def test_with_overrides_ignores_none(settings):
    updated = settings.with_overrides(port=9000, zulip_stream=None)
    assert updated.port == 9000
    assert updated.zulip_stream == "buildkite"
    assert settings.port == 3000
    assert settings.with_overrides(host=None) is settings


def test_not_configured_without_credentials(settings):
    assert not settings.with_overrides(zulip_bot_api_key="").zulip_configured


def test_api_key_not_in_repr(settings):
    assert "s3cret-key" not in repr(settings)
