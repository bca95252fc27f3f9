from __future__ import annotations

from pathlib import Path

import pytest

from repo_dossier.domain.exceptions import BrowserConfigurationError
from repo_dossier.infrastructure import browser as browser_mod
from repo_dossier.infrastructure.browser import (
    SERVERLESS_CHROMIUM_ARGS,
    BundledBrowserResolver,
    ChromiumPdfRenderer,
    ExplicitPathResolver,
    LaunchTarget,
    ServerlessChromiumResolver,
    default_resolver_factory,
    resolve_launch_target,
)


@pytest.fixture
def chrome(tmp_path: Path) -> Path:
    exe = tmp_path / "chrome"
    exe.write_text("#!/bin/sh\n", encoding="utf-8")
    return exe


class FakeBrowserType:
    def __init__(self, executable_path: str) -> None:
        self.executable_path = executable_path
        self.launches: list[dict] = []
        self.browser = FakeBrowser()

    async def launch(self, **kwargs):
        self.launches.append(kwargs)
        return self.browser


class FakeBrowser:
    def __init__(self) -> None:
        self.closed = False
        self.page = FakePage()

    async def new_page(self):
        return self.page

    async def close(self) -> None:
        self.closed = True


class FakePage:
    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.fail_on_pdf = False

    async def set_content(self, html: str, wait_until: str) -> None:
        self.calls.append(("set_content", wait_until))

    async def emulate_media(self, media: str) -> None:
        self.calls.append(("emulate_media", media))

    async def pdf(self, **kwargs) -> bytes:
        self.calls.append(("pdf", kwargs))
        if self.fail_on_pdf:
            raise RuntimeError("capture failed")
        return b"%PDF-fake"


class _FakePlaywrightContext:
    def __init__(self, browser_type: FakeBrowserType) -> None:
        self.chromium = browser_type

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc) -> None:
        return None


# ---------------------------
# resolvers
# ---------------------------

def test_bundled_resolver_requires_existing_file(chrome, tmp_path):
    assert BundledBrowserResolver(FakeBrowserType(str(chrome))).resolve() == LaunchTarget(
        executable_path=chrome, source="playwright"
    )
    assert BundledBrowserResolver(FakeBrowserType(str(tmp_path / "nope"))).resolve() is None


def test_explicit_resolver(chrome, tmp_path):
    assert ExplicitPathResolver(chrome).resolve().executable_path == chrome
    assert ExplicitPathResolver(tmp_path / "missing").resolve() is None
    assert ExplicitPathResolver(None).resolve() is None


@pytest.mark.parametrize("marker", ["VERCEL", "AWS_REGION", "AWS_EXECUTION_ENV", "LAMBDA_TASK_ROOT"])
def test_serverless_resolver_on_linux_with_marker(chrome, marker):
    resolver = ServerlessChromiumResolver(chrome, environ={marker: "1"}, platform="linux")

    target = resolver.resolve()

    assert target is not None
    assert target.executable_path == chrome
    assert target.args == SERVERLESS_CHROMIUM_ARGS


def test_serverless_resolver_requires_marker(chrome):
    assert ServerlessChromiumResolver(chrome, environ={}, platform="linux").resolve() is None


def test_serverless_resolver_requires_linux(chrome):
    resolver = ServerlessChromiumResolver(chrome, environ={"VERCEL": "1"}, platform="darwin")
    assert resolver.resolve() is None


def test_serverless_resolver_requires_binary(tmp_path):
    resolver = ServerlessChromiumResolver(
        tmp_path / "chromium", environ={"VERCEL": "1"}, platform="linux"
    )
    assert resolver.resolve() is None


def test_resolvers_tried_in_order(chrome, tmp_path):
    other = tmp_path / "other"
    other.write_text("", encoding="utf-8")

    target = resolve_launch_target(
        [ExplicitPathResolver(None), ExplicitPathResolver(chrome), ExplicitPathResolver(other)]
    )

    assert target.executable_path == chrome


def test_no_resolver_succeeds(tmp_path):
    with pytest.raises(BrowserConfigurationError):
        resolve_launch_target(
            [
                BundledBrowserResolver(FakeBrowserType(str(tmp_path / "x"))),
                ExplicitPathResolver(None),
                ServerlessChromiumResolver(tmp_path / "y", environ={}, platform="linux"),
            ]
        )


def test_default_chain_prefers_bundled(chrome, tmp_path):
    explicit = tmp_path / "explicit"
    explicit.write_text("", encoding="utf-8")
    factory = default_resolver_factory(explicit_path=explicit, serverless_path=tmp_path / "s")

    target = resolve_launch_target(factory(FakeBrowserType(str(chrome))))

    assert target.source == "playwright"


def test_default_chain_falls_back_to_explicit(chrome, tmp_path):
    factory = default_resolver_factory(explicit_path=chrome, serverless_path=tmp_path / "s")

    target = resolve_launch_target(factory(FakeBrowserType(str(tmp_path / "absent"))))

    assert target.source == "env"


# ---------------------------
# ChromiumPdfRenderer
# ---------------------------

@pytest.mark.asyncio
async def test_renderer_prints_and_closes(monkeypatch, chrome):
    browser_type = FakeBrowserType(str(chrome))
    monkeypatch.setattr(browser_mod, "async_playwright", lambda: _FakePlaywrightContext(browser_type))
    renderer = ChromiumPdfRenderer(lambda bt: [BundledBrowserResolver(bt)])

    pdf = await renderer.render_pdf("<html></html>")

    assert pdf == b"%PDF-fake"
    assert browser_type.launches[0]["executable_path"] == str(chrome)
    assert browser_type.launches[0]["headless"] is True
    calls = browser_type.browser.page.calls
    assert calls[0] == ("set_content", "domcontentloaded")
    assert calls[1] == ("emulate_media", "screen")
    assert calls[2][1] == {"format": "A4", "print_background": True, "prefer_css_page_size": True}
    assert browser_type.browser.closed is True


@pytest.mark.asyncio
async def test_renderer_closes_browser_on_failure(monkeypatch, chrome):
    browser_type = FakeBrowserType(str(chrome))
    browser_type.browser.page.fail_on_pdf = True
    monkeypatch.setattr(browser_mod, "async_playwright", lambda: _FakePlaywrightContext(browser_type))
    renderer = ChromiumPdfRenderer(lambda bt: [BundledBrowserResolver(bt)])

    with pytest.raises(RuntimeError, match="capture failed"):
        await renderer.render_pdf("<html></html>")

    assert browser_type.browser.closed is True


@pytest.mark.asyncio
async def test_renderer_does_not_launch_without_browser(monkeypatch, tmp_path):
    browser_type = FakeBrowserType(str(tmp_path / "absent"))
    monkeypatch.setattr(browser_mod, "async_playwright", lambda: _FakePlaywrightContext(browser_type))
    renderer = ChromiumPdfRenderer(lambda bt: [BundledBrowserResolver(bt)])

    with pytest.raises(BrowserConfigurationError):
        await renderer.render_pdf("<html></html>")

    assert browser_type.launches == []
