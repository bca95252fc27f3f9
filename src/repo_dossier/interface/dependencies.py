"""FastAPI dependency injection wiring."""

from __future__ import annotations

from functools import lru_cache

import httpx
from fastapi import Header

from repo_dossier.domain.exceptions import GitHubCredentialsError
from repo_dossier.infrastructure.browser import ChromiumPdfRenderer, default_resolver_factory
from repo_dossier.infrastructure.config import Settings, get_settings
from repo_dossier.infrastructure.github_rest_adapter import GitHubRestAdapter
from repo_dossier.services.pdf_export import PdfExporter
from repo_dossier.services.tree_walker import TreeWalker

_http_client: httpx.AsyncClient | None = None


def build_http_client(
    settings: Settings, transport: httpx.AsyncBaseTransport | None = None
) -> httpx.AsyncClient:
    """Shared GitHub client; follows the 301s GitHub sends for renamed repositories."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        transport=transport,
    )


async def startup() -> None:
    """Initialise shared resources; called from the lifespan context manager."""
    global _http_client  # noqa: PLW0603

    _http_client = build_http_client(get_settings())


async def shutdown() -> None:
    """Release shared resources."""
    global _http_client  # noqa: PLW0603

    if _http_client:
        await _http_client.aclose()
        _http_client = None


@lru_cache(maxsize=1)
def _settings() -> Settings:
    return get_settings()


def resolve_github_token(authorization: str | None, settings: Settings) -> str:
    """Pick the caller's ``Authorization`` token, else the configured one."""
    if authorization:
        scheme, _, credentials = authorization.strip().partition(" ")
        if scheme.lower() in ("bearer", "token") and credentials.strip():
            return credentials.strip()
        raise GitHubCredentialsError("Unauthorized")

    if settings.github_token:
        return settings.github_token.get_secret_value()

    raise GitHubCredentialsError("No GitHub token")


def get_tree_walker(
    authorization: str | None = Header(default=None),
) -> TreeWalker:
    """Build a walker bound to the request's GitHub credential."""
    settings = _settings()
    token = resolve_github_token(authorization, settings)

    assert _http_client is not None, "startup() was not called"

    adapter = GitHubRestAdapter(
        client=_http_client,
        token=token,
        api_url=settings.github_api_url,
    )
    return TreeWalker(adapter, max_depth=settings.tree_max_depth)


def get_pdf_exporter() -> PdfExporter:
    """Build the exporter backed by headless Chromium."""
    settings = _settings()
    renderer = ChromiumPdfRenderer(
        default_resolver_factory(
            explicit_path=settings.browser_executable_path,
            serverless_path=settings.serverless_chromium_path,
        )
    )
    return PdfExporter(
        renderer,
        timeout_seconds=settings.pdf_timeout_seconds,
        default_title=settings.pdf_default_title,
    )
