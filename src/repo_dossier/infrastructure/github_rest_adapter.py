"""GitHub REST API adapter: implements the ContentsFetcher port."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any
from urllib.parse import quote

import httpx

from repo_dossier.domain.entities import ContentEntry
from repo_dossier.domain.exceptions import (
    GitHubCredentialsError,
    GitHubRateLimitError,
    ResourceNotFoundError,
    UpstreamRequestError,
)
from repo_dossier.domain.value_objects import RepoRef, normalize_repo_path

logger = logging.getLogger(__name__)

_GITHUB_API = "https://api.github.com"


class GitHubRestAdapter:
    """Concrete ContentsFetcher backed by the GitHub v3 REST contents API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token: str,
        api_url: str = _GITHUB_API,
    ) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._api_headers: dict[str, str] = {
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "repo-dossier/1.0",
            "Authorization": f"Bearer {token}",
        }

    async def list_directory(self, ref: RepoRef, path: str) -> list[ContentEntry]:
        """GET /repos/{owner}/{repo}/contents/{path} → [ContentEntry].

        A path that points at a single file yields a one-element list.
        """
        resp = await self._api_get(
            f"/repos/{ref.owner}/{ref.repo}/contents/{_quote_path(path)}"
        )
        data: Any = resp.json()
        items = data if isinstance(data, list) else [data]

        return [
            ContentEntry(
                path=item["path"],
                type=item.get("type", "file"),
                size=item.get("size") or 0,
            )
            for item in items
            if isinstance(item, dict) and "path" in item
        ]

    async def _api_get(self, endpoint: str) -> httpx.Response:
        """Perform a GitHub API GET request with error translation."""
        url = f"{self._api_url}{endpoint}"
        logger.debug("GET %s", url)
        try:
            resp = await self._client.get(url, headers=self._api_headers)
        except httpx.HTTPError as exc:
            raise UpstreamRequestError(f"Network error fetching {url}: {exc}") from exc

        if resp.status_code == 200:
            return resp

        if resp.status_code == 401:
            raise GitHubCredentialsError("Unauthorized")

        if resp.status_code == 404:
            raise ResourceNotFoundError("Not Found")

        if resp.status_code in (403, 429):
            remaining = resp.headers.get("x-ratelimit-remaining", "")
            if resp.status_code == 429 or remaining == "0":
                reset_raw = resp.headers.get("x-ratelimit-reset", "")
                try:
                    reset_str = datetime.fromtimestamp(int(reset_raw), tz=timezone.utc).strftime(
                        "%Y-%m-%d %H:%M:%S UTC"
                    )
                except (ValueError, OSError):
                    reset_str = reset_raw or "unknown"
                raise GitHubRateLimitError(
                    f"GitHub API rate limit exceeded. Resets at {reset_str}."
                )

        raise UpstreamRequestError(_error_message(resp, url))


def _error_message(resp: httpx.Response, url: str) -> str:
    """Prefer GitHub's own ``message`` field, fall back to the status line."""
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"GitHub API returned HTTP {resp.status_code} for {url}"


def _quote_path(path: str) -> str:
    """Percent-encode each segment so ``#``, ``?`` and spaces stay in the path."""
    return "/".join(quote(part, safe="") for part in normalize_repo_path(path).split("/"))
