"""Playwright-backed browser sessions for the export pipeline.

One ``open()`` call launches a dedicated headless Chromium with its own
context and tab. The browser is closed when the ``async with`` block exits,
whether the export succeeded or not, so no session outlives its request and
no two requests ever share a tab.

Lifecycle:
    - ``start()`` starts the Playwright driver (call once at app startup)
    - ``open()`` launches an isolated browser for one export
    - ``stop()`` stops the driver (call on shutdown)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Sequence

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from docprint.application.interfaces import PageSession, PageSessionFactory
from docprint.domain.entities import CookieRecord, Margins

logger = logging.getLogger(__name__)

DEFAULT_LAUNCH_ARGS = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--ignore-certificate-errors",
)


def to_playwright_cookie(record: CookieRecord) -> dict[str, Any]:
    """Map a CookieRecord to the dict shape ``BrowserContext.add_cookies`` takes.

    Playwright rejects a cookie that has both ``url`` and ``path`` (or
    ``domain``), so URL-scoped records only carry the URL; the path is
    implied by it.
    """
    cookie: dict[str, Any] = {
        "name": record.name,
        "value": record.value,
        "secure": record.secure,
    }
    if record.url:
        cookie["url"] = record.url
    else:
        cookie["domain"] = record.domain
        cookie["path"] = record.path
    return cookie


def build_launch_options(overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Fixed sandboxing/cert-bypass defaults with caller overrides on top."""
    options: dict[str, Any] = {"headless": True, "args": list(DEFAULT_LAUNCH_ARGS)}
    options.update(overrides or {})
    return options


class PlaywrightPageSession(PageSession):
    """A single Chromium tab plus the browser that owns it."""

    def __init__(self, browser: Browser, context: BrowserContext, page: Page) -> None:
        self._browser = browser
        self._context = context
        self._page = page
        self._closed = False

    @property
    def page(self) -> Page:
        return self._page

    async def set_viewport(self, width: int, height: int) -> None:
        await self._page.set_viewport_size({"width": width, "height": height})

    async def add_cookies(self, cookies: Sequence[CookieRecord]) -> None:
        await self._context.add_cookies([to_playwright_cookie(c) for c in cookies])

    async def goto(self, url: str, timeout_ms: int) -> None:
        response = await self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)
        if response and response.status >= 400:
            logger.warning("HTTP %d for %s — continuing", response.status, url)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self._page.evaluate(script, arg)

    async def wait(self, delay_ms: float) -> None:
        await self._page.wait_for_timeout(delay_ms)

    async def pdf(self, width: float, height: float, margins: Margins) -> bytes:
        return await self._page.pdf(
            width=f"{width}px",
            height=f"{height}px",
            print_background=True,
            margin=margins.as_css(),
            prefer_css_page_size=False,
        )

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._context.close()
        finally:
            await self._browser.close()


class PlaywrightSessionFactory(PageSessionFactory):
    """Hands out one freshly launched Chromium per export."""

    def __init__(self) -> None:
        self._playwright: Playwright | None = None

    async def start(self) -> None:
        """Start the Playwright driver."""
        self._playwright = await async_playwright().start()
        logger.info("PlaywrightSessionFactory started")

    async def stop(self) -> None:
        """Stop the Playwright driver."""
        if self._playwright:
            await self._playwright.stop()
            self._playwright = None
        logger.info("PlaywrightSessionFactory stopped")

    @asynccontextmanager
    async def open(
        self, launch_options: Mapping[str, Any] | None = None
    ) -> AsyncIterator[PlaywrightPageSession]:
        if not self._playwright:
            raise RuntimeError("PlaywrightSessionFactory not started — call start() first")

        browser = await self._playwright.chromium.launch(**build_launch_options(launch_options))
        try:
            context = await browser.new_context(ignore_https_errors=True)
            page = await context.new_page()
        except Exception:
            await browser.close()
            raise

        session = PlaywrightPageSession(browser, context, page)
        logger.debug("Opened browser session (chromium %s)", browser.version)
        try:
            yield session
        finally:
            await session.close()
            logger.debug("Closed browser session")
