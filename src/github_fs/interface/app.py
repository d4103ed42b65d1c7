"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI

from github_fs.interface.dependencies import get_provider, shutdown, startup
from github_fs.interface.error_handlers import register_error_handlers
from github_fs.interface.routes import router
from github_fs.services.provider import GitHubFileSystemProvider

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the provider on startup; close every filesystem on shutdown."""
    startup()
    logger.info("GitHub filesystem provider ready")
    try:
        yield
    finally:
        shutdown()
        logger.info("Closed all GitHub filesystems")


def create_app() -> FastAPI:
    """Build and wire the FastAPI application."""
    app = FastAPI(
        title="GitHub Filesystem",
        version="1.0.0",
        description=(
            "Browse a GitHub repository at a given ref, rooted at an optional "
            "sub-path, as a read-only directory tree."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    def health(
        provider: GitHubFileSystemProvider = Depends(get_provider),
    ) -> dict[str, object]:
        return {"status": "ok", "open_filesystems": len(provider.registry)}

    return app
