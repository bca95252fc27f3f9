from __future__ import annotations

import pytest

from repo_dossier.domain.entities import ContentEntry
from repo_dossier.domain.value_objects import RepoRef


class StubContentsFetcher:
    """In-memory ContentsFetcher: ``{path: [ContentEntry, ...]}``."""

    def __init__(self, listings: dict[str, list[ContentEntry]]) -> None:
        self.listings = listings
        self.calls: list[str] = []

    async def list_directory(self, ref: RepoRef, path: str) -> list[ContentEntry]:
        self.calls.append(path)
        return list(self.listings.get(path, []))


class StubPdfRenderer:
    """PdfRenderer that records the page and returns canned bytes."""

    def __init__(self, content: bytes = b"%PDF-1.7\n%stub\n", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.pages: list[str] = []

    async def render_pdf(self, html: str) -> bytes:
        self.pages.append(html)
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def demo_fetcher() -> StubContentsFetcher:
    """``acme/demo`` with README.md at the root and src/index.ts below it."""
    return StubContentsFetcher(
        {
            "": [
                ContentEntry(path="README.md", type="file", size=10),
                ContentEntry(path="src", type="dir"),
            ],
            "src": [ContentEntry(path="src/index.ts", type="file", size=20)],
        }
    )


@pytest.fixture
def stub_renderer() -> StubPdfRenderer:
    return StubPdfRenderer()
