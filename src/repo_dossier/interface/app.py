"""FastAPI application factory."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from repo_dossier.infrastructure.config import get_settings
from repo_dossier.interface.dependencies import shutdown, startup
from repo_dossier.interface.error_handlers import register_error_handlers
from repo_dossier.interface.routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Open the shared GitHub client for the app's lifetime."""
    await startup()
    settings = get_settings()
    logger.info(
        "Ready: GitHub API %s, tree depth cap %d, PDF timeout %.0fs",
        settings.github_api_url,
        settings.tree_max_depth,
        settings.pdf_timeout_seconds,
    )
    try:
        yield
    finally:
        await shutdown()


def create_app() -> FastAPI:
    """Build the API: tree listing, PDF export and a liveness check."""
    app = FastAPI(
        title="Repository Dossier",
        version="1.0.0",
        description=(
            "Lists a GitHub repository's files and directories and turns "
            "Markdown dossiers into A4 PDF downloads."
        ),
        lifespan=_lifespan,
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/health", include_in_schema=False)
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app
