"""Pydantic request / response DTOs for the API boundary."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel


class RepoNodeOut(BaseModel):
    """One node of ``GET /api/repos/{owner}/{name}/tree``; ``size`` only for files."""

    path: str
    type: Literal["file", "dir"]
    size: int | None = None


class PdfExportRequest(BaseModel):
    """Request body for ``POST /api/export/pdf``.

    ``markdown`` is optional at the schema level so a missing value is
    reported as ``400 markdown required`` instead of a validation envelope.
    """

    markdown: str | None = None
    title: str | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope returned on JSON failure paths."""

    status: str = "error"
    message: str
