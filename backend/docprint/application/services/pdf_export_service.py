"""PDF export service — sequences the render pipeline for one request.

Pipeline:
    1. Open an isolated browser session (released on every exit path)
    2. Forward the caller's cookies, if any
    3. Navigate and wait for network idle
    4. Expand accordions (optional)
    5. Force lazy-loaded content (optional)
    6. Sanitize the DOM
    7. Run the caller-supplied pre-render transform (optional)
    8. Measure content height
    9. Rasterize a single PDF page sized to the content
"""

import logging
import time
from contextlib import AsyncExitStack
from dataclasses import dataclass
from urllib.parse import urlsplit

from docprint.application.interfaces import PageSession, PageSessionFactory
from docprint.application.services.accordion_expander import AccordionExpander
from docprint.application.services.cookie_translator import translate_cookies
from docprint.application.services.dom_sanitizer import DomSanitizer
from docprint.application.services.height_measurer import HeightMeasurer
from docprint.application.services.lazy_content_forcer import LazyContentForcer
from docprint.domain.entities import ExportConfig, RenderedArtifact, derive_filename
from docprint.domain.exceptions import MissingPathError, PdfGenerationError
from docprint.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("PdfExportService")

PAGE_BOTTOM_PADDING = 60


@dataclass(frozen=True)
class ExportRequest:
    """Resolved inputs of one export call."""

    base_url: str
    path: str
    cookie_header: str = ""
    filename: str | None = None

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    @property
    def host(self) -> str:
        return urlsplit(self.base_url).netloc

    @property
    def secure(self) -> bool:
        return urlsplit(self.base_url).scheme == "https"


class PdfExportService:
    """Turns a documentation page into a single-page PDF.

    Holds one immutable ExportConfig for its whole lifetime; every call to
    ``export()`` gets its own session from the factory and nothing else is
    shared between calls.
    """

    def __init__(
        self,
        config: ExportConfig,
        session_factory: PageSessionFactory,
        accordion_expander: AccordionExpander | None = None,
        lazy_content_forcer: LazyContentForcer | None = None,
        dom_sanitizer: DomSanitizer | None = None,
        height_measurer: HeightMeasurer | None = None,
    ) -> None:
        self._config = config
        self._session_factory = session_factory
        self._expander = accordion_expander or AccordionExpander()
        self._forcer = lazy_content_forcer or LazyContentForcer()
        self._sanitizer = dom_sanitizer or DomSanitizer()
        self._measurer = height_measurer or HeightMeasurer()

    @property
    def config(self) -> ExportConfig:
        return self._config

    async def export(self, request: ExportRequest) -> RenderedArtifact:
        """Render ``request`` into a PDF artifact.

        Raises:
            MissingPathError: if the request carries no path; no session is opened.
            PdfGenerationError: if any pipeline step fails.
        """
        if not request.path or not request.path.strip():
            raise MissingPathError()

        config = self._config
        url = request.url
        plog.separator(f"Export: {request.path}")
        start = time.perf_counter()
        stage = PipelineStage.LAUNCH

        # Each step runs inside plog.timed_step, which logs its own failure
        # with the stage label; the handler below only converts the error.
        try:
            async with AsyncExitStack() as stack:
                with plog.timed_step(stage, "Opening browser session", launch_overrides=len(config.launch_options)):
                    session = await stack.enter_async_context(self._session_factory.open(config.launch_options))
                    await session.set_viewport(int(config.page_width), config.viewport_height)

                if request.cookie_header:
                    stage = PipelineStage.COOKIES
                    with plog.timed_step(stage, "Forwarding cookies"):
                        await self._forward_cookies(session, request)

                stage = PipelineStage.NAVIGATE
                with plog.timed_step(stage, f"Loading {url}", timeout_ms=config.timeout_ms):
                    await session.goto(url, timeout_ms=config.timeout_ms)

                if config.expand_accordions:
                    stage = PipelineStage.EXPAND
                    with plog.timed_step(stage, "Expanding accordions"):
                        await self._expander.expand(session, config.accordion_trigger_selectors)

                if config.trigger_lazy_images:
                    stage = PipelineStage.LAZY_LOAD
                    with plog.timed_step(stage, "Forcing lazy content"):
                        await self._forcer.force(session)

                stage = PipelineStage.SANITIZE
                with plog.timed_step(stage, "Sanitizing DOM"):
                    await self._sanitizer.sanitize(session, config)

                if config.before_pdf_generation:
                    stage = PipelineStage.TRANSFORM
                    with plog.timed_step(stage, "Running pre-render transform"):
                        await session.evaluate(config.before_pdf_generation)

                stage = PipelineStage.MEASURE
                with plog.timed_step(stage, "Measuring content"):
                    content_height = await self._measurer.measure(session, config.content_selector)
                    page_height = content_height + PAGE_BOTTOM_PADDING
                    plog.detail("Content measured", content_height=content_height, page_height=page_height)

                stage = PipelineStage.RENDER
                with plog.timed_step(stage, "Rasterizing PDF", width=config.page_width):
                    content = await session.pdf(config.page_width, page_height, config.margins)
        except Exception as exc:
            logger.debug("PDF generation traceback for %s", url, exc_info=True)
            raise PdfGenerationError(str(exc), stage=stage[0]) from exc

        artifact = RenderedArtifact(
            content=content,
            filename=derive_filename(request.path, request.filename),
            source_url=url,
            content_height=content_height,
            page_height=page_height,
        )
        plog.step_complete(PipelineStage.COMPLETE, f"Exported {url}")
        plog.stats(
            filename=artifact.filename,
            bytes=artifact.size,
            height=f"{page_height:.0f}px",
            elapsed=f"{time.perf_counter() - start:.2f}s",
        )
        return artifact

    async def _forward_cookies(self, session: PageSession, request: ExportRequest) -> None:
        cookies = translate_cookies(
            request.cookie_header,
            host=request.host,
            secure=request.secure,
            base_url=request.base_url,
        )
        if cookies:
            await session.add_cookies(cookies)
            plog.detail("Forwarded cookies", count=len(cookies))
