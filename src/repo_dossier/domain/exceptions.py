"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class RepoDossierError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidInputError(RepoDossierError):
    """A required field is missing or a supplied document cannot be parsed."""


class InvalidRepositoryError(InvalidInputError):
    """Owner or repository name that GitHub would never accept (400)."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class GitHubCredentialsError(RepoDossierError):
    """No GitHub token is available, or GitHub rejected it (401)."""


class ResourceNotFoundError(RepoDossierError):
    """The repository or path does not exist or is not visible (404)."""


class UpstreamRequestError(RepoDossierError):
    """Any other failure talking to GitHub (network error, unexpected status)."""


class GitHubRateLimitError(UpstreamRequestError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


# ── PDF export errors ───────────────────────────────────────────────────────


class BrowserConfigurationError(RepoDossierError):
    """No usable browser executable could be resolved."""


class PdfExportError(RepoDossierError):
    """Rendering, browser launch, page load or PDF capture failed."""
