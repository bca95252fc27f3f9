"""Markdown → PDF export use case.

Renders Markdown to an HTML fragment with mistune, wraps it in a fixed
print stylesheet and hands the page to a :class:`PdfRenderer`.
"""

from __future__ import annotations

import asyncio
import html
import logging
import re

import mistune

from repo_dossier.domain.entities import PdfDocument
from repo_dossier.domain.exceptions import InvalidInputError, PdfExportError
from repo_dossier.domain.ports.pdf_renderer import PdfRenderer

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "dossie"

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9_\-.]+")

# Raw HTML passes through, bare URLs stay text, single newlines are not <br>.
_markdown = mistune.create_markdown(
    escape=False,
    hard_wrap=False,
    plugins=["table", "strikethrough"],
)

PRINT_STYLESHEET = """\
  @page { size: A4; margin: 20mm; }
  *,*::before,*::after { box-sizing: border-box; }
  body { font-family: ui-sans-serif, system-ui, -apple-system, "Segoe UI", Roboto, Arial; color:#111; }
  h1,h2,h3 { color:#0f172a; margin: 18px 0 10px; }
  pre { background:#0b1220; color:#e5e7eb; padding:12px; border-radius:8px;
        white-space:pre; overflow-x:auto; overflow-wrap:normal; word-break:normal; }
  code { white-space:inherit; }
  code { font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, "Liberation Mono", monospace; }
  a { color:#0369a1; text-decoration:none; } a:hover { text-decoration:underline; }
  blockquote { border-left:4px solid #e5e7eb; padding-left:10px; color:#374151; }
  hr { border:none; border-top:1px solid #e5e7eb; margin:24px 0; }
  table { border-collapse: collapse; width: 100%; }
  th, td { border: 1px solid #e5e7eb; padding: 6px 8px; font-size: 12px; }
  th { background: #f8fafc; text-align: left; }
"""


def render_markdown(markdown: str) -> str:
    """Convert Markdown to an HTML fragment."""
    return str(_markdown(markdown))


def escape_title(title: str) -> str:
    """Escape ``& < > " '`` so *title* is safe inside ``<title>``."""
    return html.escape(title, quote=True).replace("&#x27;", "&#39;")


def sanitize_filename(title: str) -> str:
    """Replace every run of characters outside ``[A-Za-z0-9_.-]`` with ``_``."""
    return _UNSAFE_FILENAME_RE.sub("_", title)


def build_html_document(body_html: str, title: str) -> str:
    """Wrap an HTML fragment in the print-oriented page shell."""
    return (
        "<!doctype html>\n"
        "<html>\n"
        "<head>\n"
        '<meta charset="utf-8"/>\n'
        f"<title>{escape_title(title)}</title>\n"
        f"<style>\n{PRINT_STYLESHEET}</style>\n"
        "</head>\n"
        f"<body>{body_html}</body>\n"
        "</html>"
    )


class PdfExporter:
    """Turn a Markdown document into a downloadable PDF.

    Parameters
    ----------
    renderer:
        Adapter that prints a complete HTML page to PDF bytes.
    timeout_seconds:
        Upper bound for the whole render; exceeding it fails the export.
    default_title:
        Title (and file name stem) used when the caller supplies none.
    """

    def __init__(
        self,
        renderer: PdfRenderer,
        timeout_seconds: float = 60.0,
        default_title: str = DEFAULT_TITLE,
    ) -> None:
        self._renderer = renderer
        self._timeout = timeout_seconds
        self._default_title = default_title

    async def export(self, markdown: str | None, title: str | None = None) -> PdfDocument:
        """Render *markdown* and return the PDF with its attachment file name."""
        if not markdown:
            raise InvalidInputError("markdown required")

        title = title or self._default_title
        try:
            page = build_html_document(render_markdown(markdown), title)
            content = await asyncio.wait_for(
                self._renderer.render_pdf(page), timeout=self._timeout
            )
        except asyncio.TimeoutError as exc:
            logger.error("PDF export timed out after %.0fs", self._timeout)
            raise PdfExportError(
                f"PDF rendering exceeded {self._timeout:.0f} seconds"
            ) from exc
        except Exception as exc:
            logger.exception("PDF export failed")
            raise PdfExportError(str(exc) or type(exc).__name__) from exc

        return PdfDocument(filename=f"{sanitize_filename(title)}.pdf", content=content)
