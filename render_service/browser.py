"""
Headless browser providers for the render service.

Centralizes browser selection so tests can run without launching Chromium.
The host either lets us launch a local Chromium or exposes a remote one over
CDP (BROWSER_WS_ENDPOINT).
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol, runtime_checkable

from playwright.async_api import async_playwright

from core.config import DEFAULT_RENDER_TIMEOUT_MS, Settings

logger = logging.getLogger(__name__)

# Smallest well-formed PDF; returned by the fake provider.
MINIMAL_PDF = (
    b"%PDF-1.4\n"
    b"1 0 obj<</Type/Catalog/Pages 2 0 R>>endobj\n"
    b"2 0 obj<</Type/Pages/Kids[3 0 R]/Count 1>>endobj\n"
    b"3 0 obj<</Type/Page/Parent 2 0 R/MediaBox[0 0 595 842]>>endobj\n"
    b"trailer<</Root 1 0 R>>\n"
    b"%%EOF\n"
)


@runtime_checkable
class BrowserPage(Protocol):
    """Subset of the Playwright page API used for rendering."""

    async def set_content(self, html: str, *, timeout: Optional[float] = None,
                          wait_until: Optional[str] = None) -> None:
        """Load HTML into the page."""

    async def pdf(self, *, print_background: bool, prefer_css_page_size: bool) -> bytes:
        """Print the page to PDF."""

    async def close(self) -> None:
        """Close the page."""


@runtime_checkable
class BrowserSession(Protocol):
    """An acquired browser instance."""

    async def new_page(self) -> BrowserPage:
        """Open a new page."""

    async def close(self) -> None:
        """Release the browser and everything it owns."""


@runtime_checkable
class BrowserProvider(Protocol):
    """Hands out browser sessions, one per render request."""

    async def acquire(self) -> BrowserSession:
        """Start or connect to a browser."""


class PlaywrightBrowserSession:
    """Playwright browser plus the driver that started it."""

    def __init__(self, playwright: Any, browser: Any) -> None:
        self._playwright = playwright
        self._browser = browser

    async def new_page(self) -> BrowserPage:
        return await self._browser.new_page()

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()


class PlaywrightBrowserProvider:
    """Production provider backed by Playwright Chromium."""

    def __init__(self, ws_endpoint: Optional[str] = None) -> None:
        self._ws_endpoint = ws_endpoint

    async def acquire(self) -> BrowserSession:
        playwright = await async_playwright().start()
        try:
            if self._ws_endpoint:
                logger.debug("Connecting to browser at %s", self._ws_endpoint)
                browser = await playwright.chromium.connect_over_cdp(self._ws_endpoint)
            else:
                browser = await playwright.chromium.launch(headless=True)
        except BaseException:
            await playwright.stop()
            raise
        return PlaywrightBrowserSession(playwright, browser)


class _FakePage:
    """Page that records calls and returns MINIMAL_PDF."""

    def __init__(self, provider: "FakeBrowserProvider") -> None:
        self._provider = provider

    async def set_content(self, html: str, *, timeout: Optional[float] = None,
                          wait_until: Optional[str] = None) -> None:
        self._provider.loaded_html.append(html)
        self._provider.wait_until = wait_until
        if self._provider.fail_on == "set_content":
            raise RuntimeError("navigation failed")

    async def pdf(self, *, print_background: bool, prefer_css_page_size: bool) -> bytes:
        self._provider.pdf_options = {
            "print_background": print_background,
            "prefer_css_page_size": prefer_css_page_size,
        }
        if self._provider.fail_on == "pdf":
            raise RuntimeError("renderer crashed")
        return MINIMAL_PDF

    async def close(self) -> None:
        self._provider.pages_closed += 1


class _FakeSession:
    def __init__(self, provider: "FakeBrowserProvider") -> None:
        self._provider = provider

    async def new_page(self) -> BrowserPage:
        self._provider.pages_opened += 1
        return _FakePage(self._provider)

    async def close(self) -> None:
        self._provider.released += 1


class FakeBrowserProvider:
    """
    Provider that never launches a browser.

    Counts acquisitions and releases so callers can verify cleanup. Set
    `fail_on` to "acquire", "set_content" or "pdf" to simulate failures.
    """

    def __init__(self, fail_on: Optional[str] = None) -> None:
        self.fail_on = fail_on
        self.acquired = 0
        self.released = 0
        self.pages_opened = 0
        self.pages_closed = 0
        self.loaded_html: list[str] = []
        self.wait_until: Optional[str] = None
        self.pdf_options: dict[str, bool] = {}

    async def acquire(self) -> BrowserSession:
        if self.fail_on == "acquire":
            raise RuntimeError("browser unavailable")
        self.acquired += 1
        return _FakeSession(self)


def get_browser_provider(settings: Settings) -> BrowserProvider:
    """
    Selects the browser provider.

    Rules:
    - TEST_MODE=true or USE_FAKE_PROVIDERS=true -> fake
    - otherwise Playwright, connecting to BROWSER_WS_ENDPOINT when set
    """
    if settings.use_fake_providers:
        logger.info("Using fake browser provider")
        return FakeBrowserProvider()
    return PlaywrightBrowserProvider(ws_endpoint=settings.browser_ws_endpoint)


async def render_html_to_pdf(
    provider: BrowserProvider,
    html: str,
    timeout_ms: float = DEFAULT_RENDER_TIMEOUT_MS,
) -> bytes:
    """
    Renders an HTML document to PDF in a fresh browser session.

    Waits for network quiescence so linked stylesheets and fonts can load,
    prints backgrounds and honours CSS @page sizes. The page and the
    session are released on every exit path.

    Args:
        provider: Source of browser sessions.
        html: Complete HTML document.
        timeout_ms: Navigation timeout in milliseconds.

    Returns:
        PDF bytes.
    """
    session = await provider.acquire()
    try:
        page = await session.new_page()
        try:
            await page.set_content(html, wait_until="networkidle", timeout=timeout_ms)
            return await page.pdf(print_background=True, prefer_css_page_size=True)
        finally:
            await page.close()
    finally:
        await session.close()
