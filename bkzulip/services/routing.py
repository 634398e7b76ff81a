"""Pick the Zulip stream an event is posted to."""

from __future__ import annotations

from bkzulip.events import Event

# Pipelines named `<prefix><project>-...` fan out to a stream named `<project>`.
PROJECT_PIPELINE_PREFIXES = ("lang-", "keyboard-")


def route(event: Event, default_channel: str) -> str:
    """
    Return the destination stream for ``event``.

    Example
    -------
    'lang-foo-x-private'  → 'foo'
    'Keyboard-Bar-Public' → 'bar'
    anything else         → ``default_channel``
    """
    pipeline = event.pipeline
    if pipeline is None or not pipeline.name:
        return default_channel

    name = pipeline.name.lower()
    if name.startswith(PROJECT_PIPELINE_PREFIXES):
        parts = name.split("-")
        if len(parts) >= 2:
            return parts[1]
    return default_channel
