"""Port: contents fetcher, defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol

from repo_dossier.domain.entities import ContentEntry
from repo_dossier.domain.value_objects import RepoRef


class ContentsFetcher(Protocol):
    """Abstract contract for listing a single repository directory."""

    async def list_directory(self, ref: RepoRef, path: str) -> list[ContentEntry]:
        """Return the immediate entries of *path* ("" is the repository root)."""
        ...
