"""Port: PDF renderer, defined by the domain, implemented by infrastructure."""

from __future__ import annotations

from typing import Protocol


class PdfRenderer(Protocol):
    """Abstract contract for turning a complete HTML page into PDF bytes."""

    async def render_pdf(self, html: str) -> bytes:
        """Load *html* as the page content and return the printed PDF."""
        ...
