"""Tests for log redaction."""

from bkzulip.log import MASK, _mask_zulip_key


def _mask(**event_dict):
    return _mask_zulip_key(None, "info", dict(event_dict))


def test_secret_fields_are_masked():
    out = _mask(event="server_starting", zulip_bot_api_key="s3cret-key", api_key="abc")
    assert out["zulip_bot_api_key"] == MASK
    assert out["api_key"] == MASK
    assert out["event"] == "server_starting"


def test_key_inside_text_is_masked():
    out = _mask(event="zulip_send_failed", body="bad request: api_key=s3cret-key&type=stream")
    assert out["body"] == f"bad request: api_key={MASK}&type=stream"


def test_basic_auth_header_is_masked():
    out = _mask(event="x", authorization_echo="Authorization: Basic Ym90OnMzY3JldA==")
    assert out["authorization_echo"] == f"Authorization: Basic {MASK}"


def test_ordinary_values_untouched():
    out = _mask(event="webhook_received", kind="build.started", stream="buildkite", status=200)
    assert out == {
        "event": "webhook_received",
        "kind": "build.started",
        "stream": "buildkite",
        "status": 200,
    }
