"""Headless Chromium via Playwright: implements the PdfRenderer port.

Browser acquisition is an ordered chain of resolvers.  Each one either
returns a :class:`LaunchTarget` whose executable exists on disk or
``None``; the first hit wins and nothing is launched when all miss.
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Callable, Mapping, Protocol, Sequence

from playwright.async_api import Browser, BrowserType, async_playwright
from playwright.async_api import Error as PlaywrightError

from repo_dossier.domain.exceptions import BrowserConfigurationError

logger = logging.getLogger(__name__)

SERVERLESS_ENV_MARKERS: tuple[str, ...] = (
    "VERCEL",
    "AWS_REGION",
    "AWS_EXECUTION_ENV",
    "LAMBDA_TASK_ROOT",
)

# Flags for the minimal Chromium builds shipped in Lambda layers / Vercel functions.
SERVERLESS_CHROMIUM_ARGS: tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-zygote",
    "--single-process",
    "--hide-scrollbars",
    "--mute-audio",
)


@dataclass(frozen=True, slots=True)
class LaunchTarget:
    """An executable that exists on disk plus the extra flags it needs."""

    executable_path: Path
    args: tuple[str, ...] = ()
    source: str = ""


class BrowserResolver(Protocol):
    """One strategy for locating a Chromium executable."""

    def resolve(self) -> LaunchTarget | None:
        ...


class BundledBrowserResolver:
    """Chromium downloaded by ``playwright install chromium``."""

    def __init__(self, browser_type: BrowserType) -> None:
        self._browser_type = browser_type

    def resolve(self) -> LaunchTarget | None:
        try:
            raw = self._browser_type.executable_path
        except PlaywrightError as exc:
            logger.warning("Bundled Playwright browser unavailable: %s", exc)
            return None

        if raw and Path(raw).exists():
            return LaunchTarget(executable_path=Path(raw), source="playwright")
        return None


class ExplicitPathResolver:
    """Executable configured through ``BROWSER_EXECUTABLE_PATH``."""

    def __init__(self, executable_path: Path | None) -> None:
        self._path = executable_path

    def resolve(self) -> LaunchTarget | None:
        if self._path is not None and self._path.exists():
            return LaunchTarget(executable_path=self._path, source="env")
        return None


class ServerlessChromiumResolver:
    """Cloud-packaged minimal Chromium, only used inside serverless runtimes."""

    def __init__(
        self,
        executable_path: Path,
        environ: Mapping[str, str] | None = None,
        platform: str | None = None,
    ) -> None:
        self._path = executable_path
        self._environ = os.environ if environ is None else environ
        self._platform = sys.platform if platform is None else platform

    def is_serverless(self) -> bool:
        if not self._platform.startswith("linux"):
            return False
        return any(self._environ.get(name) for name in SERVERLESS_ENV_MARKERS)

    def resolve(self) -> LaunchTarget | None:
        if not self.is_serverless():
            return None
        if not self._path.exists():
            logger.warning("Serverless runtime detected but %s does not exist", self._path)
            return None
        return LaunchTarget(
            executable_path=self._path,
            args=SERVERLESS_CHROMIUM_ARGS,
            source="serverless",
        )


def resolve_launch_target(resolvers: Sequence[BrowserResolver]) -> LaunchTarget:
    """Return the first target any resolver yields, in order."""
    for resolver in resolvers:
        target = resolver.resolve()
        if target is not None:
            logger.debug("Using %s browser at %s", target.source, target.executable_path)
            return target

    raise BrowserConfigurationError(
        "No browser executable was found. Run `playwright install chromium` "
        "or set BROWSER_EXECUTABLE_PATH."
    )


@asynccontextmanager
async def launched_browser(
    browser_type: BrowserType, target: LaunchTarget
) -> AsyncIterator[Browser]:
    """Launch *target* headless and always close it on exit."""
    browser = await browser_type.launch(
        executable_path=str(target.executable_path),
        args=list(target.args),
        headless=True,
    )
    try:
        yield browser
    finally:
        await browser.close()


ResolverFactory = Callable[[BrowserType], Sequence[BrowserResolver]]


class ChromiumPdfRenderer:
    """Concrete ``PdfRenderer`` that prints HTML through headless Chromium."""

    def __init__(self, resolver_factory: ResolverFactory) -> None:
        self._resolver_factory = resolver_factory

    async def render_pdf(self, html: str) -> bytes:
        async with async_playwright() as pw:
            target = resolve_launch_target(self._resolver_factory(pw.chromium))
            async with launched_browser(pw.chromium, target) as browser:
                page = await browser.new_page()
                await page.set_content(html, wait_until="domcontentloaded")
                await page.emulate_media(media="screen")
                return await page.pdf(
                    format="A4",
                    print_background=True,
                    prefer_css_page_size=True,
                )


def default_resolver_factory(
    explicit_path: Path | None, serverless_path: Path
) -> ResolverFactory:
    """Build the standard bundled → explicit → serverless chain."""

    def _factory(browser_type: BrowserType) -> list[BrowserResolver]:
        return [
            BundledBrowserResolver(browser_type),
            ExplicitPathResolver(explicit_path),
            ServerlessChromiumResolver(serverless_path),
        ]

    return _factory
