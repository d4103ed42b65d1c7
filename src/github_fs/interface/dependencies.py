"""FastAPI dependency injection wiring."""

from __future__ import annotations

import httpx

from github_fs.infrastructure.config import get_settings
from github_fs.infrastructure.http_content_fetcher import HttpContentFetcher
from github_fs.services.provider import GitHubFileSystemProvider

_http_client: httpx.Client | None = None
_provider: GitHubFileSystemProvider | None = None


def startup() -> None:
    """Initialise shared resources; called from the lifespan context manager."""
    global _http_client, _provider  # noqa: PLW0603

    settings = get_settings()
    _http_client = httpx.Client(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
    )
    token = settings.github_token.get_secret_value() if settings.github_token else None
    fetcher = HttpContentFetcher(
        client=_http_client,
        cache_dir=settings.cache_dir,
        token=token,
        user_agent=settings.user_agent,
    )
    _provider = GitHubFileSystemProvider(fetcher)


def shutdown() -> None:
    """Close every open filesystem and release the HTTP client."""
    global _http_client, _provider  # noqa: PLW0603

    if _provider:
        _provider.close_all()
        _provider = None
    if _http_client:
        _http_client.close()
        _http_client = None


def get_provider() -> GitHubFileSystemProvider:
    """Return the provider created at startup."""
    assert _provider is not None, "startup() was not called"
    return _provider
