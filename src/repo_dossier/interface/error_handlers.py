"""Global exception handlers: translate domain errors to HTTP responses.

GitHub-facing errors use the ``{"status": "error", "message": "..."}``
envelope.  PDF export errors are plain text, since that endpoint otherwise
answers with a binary body.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from repo_dossier.domain.exceptions import (
    GitHubCredentialsError,
    InvalidInputError,
    InvalidRepositoryError,
    PdfExportError,
    RepoDossierError,
    ResourceNotFoundError,
    UpstreamRequestError,
)

logger = logging.getLogger(__name__)

_EXCEPTION_STATUS: list[tuple[type[RepoDossierError], int]] = [
    (InvalidRepositoryError, 400),
    (GitHubCredentialsError, 401),
    (ResourceNotFoundError, 404),
    (UpstreamRequestError, 502),
]


def _error_json(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    # ── Domain exceptions ───────────────────────────────────────────────

    for exc_type, code in _EXCEPTION_STATUS:

        def _make_handler(
            status_code: int,
        ):  # type: ignore[no-untyped-def]
            async def handler(request: Request, exc: Exception) -> JSONResponse:
                logger.warning("%s: %s", type(exc).__name__, exc)
                return _error_json(status_code, str(exc))

            return handler

        app.add_exception_handler(exc_type, _make_handler(code))

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(
        request: Request, exc: InvalidInputError
    ) -> PlainTextResponse:
        logger.warning("InvalidInputError: %s", exc)
        return PlainTextResponse(str(exc), status_code=400)

    @app.exception_handler(PdfExportError)
    async def pdf_error_handler(request: Request, exc: PdfExportError) -> PlainTextResponse:
        return PlainTextResponse(f"PDF error: {exc}", status_code=500)

    # ── Pydantic / FastAPI validation errors ────────────────────────────

    @app.exception_handler(RequestValidationError)
    async def validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = []
        for err in exc.errors():
            loc = " → ".join(str(p) for p in err.get("loc", []))
            messages.append(f"{loc}: {err.get('msg', 'validation error')}")
        return _error_json(422, "; ".join(messages))

    # ── Catch-all for unexpected errors ─────────────────────────────────

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
