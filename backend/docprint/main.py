"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docprint.application.interfaces import PageSessionFactory
from docprint.application.services import PdfExportService
from docprint.config import Settings, get_settings
from docprint.infrastructure.browser import PlaywrightSessionFactory
from docprint.infrastructure.logging.log_config import setup_logging
from docprint.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    session_factory: PageSessionFactory | None = None,
) -> FastAPI:
    """Factory function that builds and configures the FastAPI application.

    ``session_factory`` defaults to a Playwright factory owned (started and
    stopped) by the application lifespan.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Application lifespan — resolve export config once, start the browser driver."""
        setup_logging(settings)

        # 1. Resolve the immutable export config shared by every request
        config = settings.to_export_config()

        # 2. Start the Playwright driver unless a factory was injected
        owned_factory: PlaywrightSessionFactory | None = None
        factory = session_factory
        if factory is None:
            owned_factory = PlaywrightSessionFactory()
            await owned_factory.start()
            factory = owned_factory

        app.state.settings = settings
        app.state.pdf_export_service = PdfExportService(config=config, session_factory=factory)
        logger.info(
            "PDF export ready (content=%r, width=%s, timeout=%dms)",
            config.content_selector,
            config.page_width,
            config.timeout_ms,
        )

        yield

        # Shutdown
        app.state.pdf_export_service = None
        if owned_factory is not None:
            await owned_factory.stop()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "docprint.main:app",
        host="0.0.0.0",
        port=8030,
        reload=True,
    )
