"""Integration tests driving real headless Chromium through the export pipeline."""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Sequence

import pytest

from docprint.application.interfaces import PageSession, PageSessionFactory
from docprint.application.services import (
    AccordionExpander,
    DomSanitizer,
    ExportRequest,
    HeightMeasurer,
    PdfExportService,
)
from docprint.domain.entities import CookieRecord, ExportConfig, Margins
from docprint.domain.exceptions import PdfGenerationError
from docprint.infrastructure.browser import PlaywrightSessionFactory
from tests.integration.services.docs_site_service import run_docs_site_service

_RENDER_TIME_REPORT_JS = """
    (removeSelectors) => {
        const all = Array.from(document.body.querySelectorAll('*'));
        const lazy = document.querySelector('#lazy-image');
        return {
            bodyChildren: document.body.children.length,
            rootIsArticle: document.body.firstElementChild?.matches('article') ?? false,
            removedStillPresent: removeSelectors
                .map((s) => document.querySelectorAll(s).length)
                .reduce((a, b) => a + b, 0),
            navCards: document.querySelectorAll('[class*="grid-cols-2"]').length,
            closedDisclosures: document.querySelectorAll('[data-state="closed"]').length,
            nestedBodyVisible: !!document.querySelector('#nested-body')?.offsetHeight,
            pinned: all.filter((el) => ['fixed', 'sticky'].includes(getComputedStyle(el).position)).length,
            lazyImageLoaded: !!lazy && lazy.complete && lazy.naturalWidth > 0,
            user: document.querySelector('#user')?.textContent ?? null,
        };
    }
"""

_DESCENDANTS_AFTER_REMOVAL_JS = """
    (removeSelectors) => {
        const root = document.querySelector('article');
        const removed = new Set();
        removeSelectors.forEach((s) => root.querySelectorAll(s).forEach((el) => {
            removed.add(el);
            el.querySelectorAll('*').forEach((d) => removed.add(d));
        }));
        return root.querySelectorAll('*').length - removed.size;
    }
"""

_SANITIZED_SHAPE_JS = """
    () => {
        const all = Array.from(document.body.querySelectorAll('*'));
        const root = document.body.firstElementChild;
        return {
            bodyChildren: document.body.children.length,
            rootIsArticle: root?.matches('article') ?? false,
            descendants: root ? root.querySelectorAll('*').length : -1,
            pinned: all.filter((el) => ['fixed', 'sticky'].includes(getComputedStyle(el).position)).length,
            clipped: all.filter((el) => getComputedStyle(el).overflow === 'hidden').length,
        };
    }
"""


class _RenderTimeSnapshotSession(PageSession):
    """Delegates to a real session and snapshots the DOM right before rasterizing."""

    def __init__(self, inner: PageSession, remove_selectors: Sequence[str], sink: list):
        self._inner = inner
        self._remove_selectors = list(remove_selectors)
        self._sink = sink

    async def set_viewport(self, width: int, height: int) -> None:
        await self._inner.set_viewport(width, height)

    async def add_cookies(self, cookies: Sequence[CookieRecord]) -> None:
        await self._inner.add_cookies(cookies)

    async def goto(self, url: str, timeout_ms: int) -> None:
        await self._inner.goto(url, timeout_ms)

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self._inner.evaluate(script, arg)

    async def wait(self, delay_ms: float) -> None:
        await self._inner.wait(delay_ms)

    async def pdf(self, width: float, height: float, margins: Margins) -> bytes:
        self._sink.append(await self._inner.evaluate(_RENDER_TIME_REPORT_JS, self._remove_selectors))
        return await self._inner.pdf(width, height, margins)

    async def close(self) -> None:
        await self._inner.close()


class _SnapshotFactory(PageSessionFactory):
    def __init__(self, inner: PageSessionFactory, remove_selectors: Sequence[str]):
        self._inner = inner
        self._remove_selectors = remove_selectors
        self.snapshots: list[dict] = []
        self.opened = 0

    @asynccontextmanager
    async def open(self, launch_options: Mapping[str, Any] | None = None):
        async with self._inner.open(launch_options) as session:
            self.opened += 1
            yield _RenderTimeSnapshotSession(session, self._remove_selectors, self.snapshots)


@asynccontextmanager
async def _chromium() -> AsyncIterator[PlaywrightSessionFactory]:
    factory = PlaywrightSessionFactory()
    await factory.start()
    try:
        try:
            async with factory.open():
                pass
        except Exception as exc:
            pytest.skip(f"Chromium not available in this environment: {exc}")
        yield factory
    finally:
        await factory.stop()


def _request(base_url: str, path: str, cookie_header: str = "") -> ExportRequest:
    return ExportRequest(base_url=base_url, path=path, cookie_header=cookie_header)


@pytest.mark.asyncio
async def test_export_renders_single_tall_page_with_chrome_removed():
    config = ExportConfig()
    with run_docs_site_service() as base_url:
        async with _chromium() as chromium:
            factory = _SnapshotFactory(chromium, config.remove_selectors)
            service = PdfExportService(config, factory)
            artifact = await service.export(_request(base_url, "/guide.html"))

    assert artifact.content.startswith(b"%PDF")
    assert artifact.filename == "guide.html.pdf"
    assert artifact.page_height > config.viewport_height
    assert artifact.content_height > config.viewport_height

    [snapshot] = factory.snapshots
    assert snapshot["bodyChildren"] == 1
    assert snapshot["rootIsArticle"] is True
    assert snapshot["removedStillPresent"] == 0
    assert snapshot["navCards"] == 0
    assert snapshot["closedDisclosures"] == 0
    assert snapshot["nestedBodyVisible"] is True
    assert snapshot["pinned"] == 0
    assert snapshot["lazyImageLoaded"] is True


@pytest.mark.asyncio
async def test_sanitizer_keeps_content_shape_and_unpins_everything():
    remove_selectors = ["#nd-toc", "nav", ".print-hidden"]
    config = ExportConfig(remove_selectors=remove_selectors, nav_card_heuristic=False)

    with run_docs_site_service() as base_url:
        async with _chromium() as chromium:
            async with chromium.open() as session:
                await session.goto(f"{base_url}/guide.html", timeout_ms=10_000)
                expected = await session.evaluate(_DESCENDANTS_AFTER_REMOVAL_JS, remove_selectors)
                found = await DomSanitizer().sanitize(session, config)
                shape = await session.evaluate(_SANITIZED_SHAPE_JS)

    assert found is True
    assert shape == {
        "bodyChildren": 1,
        "rootIsArticle": True,
        "descendants": expected,
        "pinned": 0,
        "clipped": 0,
    }


@pytest.mark.asyncio
async def test_sanitizer_is_noop_without_content_root():
    with run_docs_site_service() as base_url:
        async with _chromium() as chromium:
            async with chromium.open() as session:
                await session.goto(f"{base_url}/no-article.html", timeout_ms=10_000)
                found = await DomSanitizer().sanitize(session, ExportConfig())
                text = await session.evaluate("() => document.body.innerText")

    assert found is False
    assert "No article here" in text


@pytest.mark.asyncio
async def test_accordion_expansion_is_idempotent_in_browser():
    selectors = ExportConfig().accordion_trigger_selectors
    expander = AccordionExpander(round_settle_ms=50, final_settle_ms=50)

    with run_docs_site_service() as base_url:
        async with _chromium() as chromium:
            async with chromium.open() as session:
                await session.goto(f"{base_url}/guide.html", timeout_ms=10_000)
                first = await expander.expand(session, selectors)
                second = await expander.expand(session, selectors)
                closed = await session.evaluate(
                    "() => document.querySelectorAll('[data-state=\"closed\"]').length"
                )

    assert first == 2
    assert second == 0
    assert closed == 0


@pytest.mark.asyncio
async def test_measured_height_grows_with_content():
    config = ExportConfig(expand_accordions=False, trigger_lazy_images=False)

    with run_docs_site_service() as base_url:
        async with _chromium() as chromium:
            heights = {}
            for page in ("short", "tall"):
                async with chromium.open() as session:
                    await session.set_viewport(850, 600)
                    await session.goto(f"{base_url}/{page}.html", timeout_ms=10_000)
                    await DomSanitizer().sanitize(session, config)
                    heights[page] = await HeightMeasurer().measure(session, "article")

    assert heights["tall"] >= heights["short"]
    assert heights["tall"] > 600


@pytest.mark.asyncio
async def test_cookies_reach_the_target_page():
    config = ExportConfig(expand_accordions=False, trigger_lazy_images=False)

    with run_docs_site_service() as base_url:
        async with _chromium() as chromium:
            factory = _SnapshotFactory(chromium, config.remove_selectors)
            service = PdfExportService(config, factory)
            await service.export(_request(base_url, "/private.html", cookie_header="sid=alice"))

    assert factory.snapshots[0]["user"] == "alice"


@pytest.mark.asyncio
async def test_navigation_timeout_reports_failure():
    config = ExportConfig(timeout_ms=500)

    with run_docs_site_service() as base_url:
        async with _chromium() as chromium:
            factory = _SnapshotFactory(chromium, config.remove_selectors)
            service = PdfExportService(config, factory)
            with pytest.raises(PdfGenerationError) as exc_info:
                await service.export(_request(base_url, "/slow.html"))

    assert exc_info.value.stage == "NAVIGATE"
    assert "Timeout" in exc_info.value.details
    assert factory.opened == 1
    assert factory.snapshots == []
