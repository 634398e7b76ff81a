"""Canonical GitHub web URLs from pipeline repository metadata."""

from __future__ import annotations

from bkzulip.events import Pipeline

GITHUB_WEB_BASE = "https://github.com/"
GITHUB_SSH_PREFIX = "git@github.com:"
GIT_SUFFIX = ".git"


def _strip_git_suffix(value: str) -> str:
    return value[: -len(GIT_SUFFIX)] if value.endswith(GIT_SUFFIX) else value


def resolve_repo_url(pipeline: Pipeline | None) -> str | None:
    """
    Return the repository's web URL, or ``None`` when it cannot be derived.

    Resolution order, first match wins:

    1. ``provider.repository_url`` as-is.
    2. ``provider.settings.repository`` (``owner/repo``) on github.com.
    3. ``pipeline.repository`` in ``git@github.com:owner/repo.git`` or
       ``https://github.com/owner/repo.git`` form.

    Any other repository syntax resolves to ``None``.
    """
    if pipeline is None:
        return None

    provider = pipeline.provider
    if provider is not None:
        if provider.repository_url:
            return provider.repository_url
        if provider.repository_slug:
            return f"{GITHUB_WEB_BASE}{provider.repository_slug}"

    repository = pipeline.repository
    if not repository:
        return None
    if repository.startswith(GITHUB_SSH_PREFIX):
        slug = _strip_git_suffix(repository[len(GITHUB_SSH_PREFIX):])
        return f"{GITHUB_WEB_BASE}{slug}"
    if repository.startswith(GITHUB_WEB_BASE):
        return _strip_git_suffix(repository)
    return None
