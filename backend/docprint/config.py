import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings

from docprint.domain.entities import ExportConfig
from docprint.domain.presets import resolve_export_config

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Docprint PDF Export API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Fallback Host when a request carries no Host header
    default_host: str = "localhost:3000"

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_browser: str = "WARNING"       # Playwright driver
    log_level_http: str = "WARNING"          # httpx / httpcore — test clients
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_pipeline: str = "INFO"         # PdfExportService pipeline

    # PDF export — every field is optional; None falls back to preset/defaults
    export_preset: str | None = None
    export_content_selector: str | None = None
    export_remove_selectors: list[str] | None = None
    export_accordion_trigger_selectors: list[str] | None = None
    export_accordion_content_selectors: list[str] | None = None
    export_expand_accordions: bool | None = None
    export_trigger_lazy_images: bool | None = None
    export_page_width: float | None = None
    export_margin_top: float | None = None
    export_margin_right: float | None = None
    export_margin_bottom: float | None = None
    export_margin_left: float | None = None
    export_timeout_ms: int | None = None
    export_viewport_height: int | None = None
    export_before_pdf_generation: str | None = None
    export_launch_options: dict[str, Any] | None = None
    export_nav_card_heuristic: bool | None = None

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    def to_export_config(self) -> ExportConfig:
        """Resolve the ``export_*`` fields into an immutable ExportConfig."""
        config = resolve_export_config(
            preset=self.export_preset,
            margins={
                "top": self.export_margin_top,
                "right": self.export_margin_right,
                "bottom": self.export_margin_bottom,
                "left": self.export_margin_left,
            },
            content_selector=self.export_content_selector,
            remove_selectors=self.export_remove_selectors,
            accordion_trigger_selectors=self.export_accordion_trigger_selectors,
            accordion_content_selectors=self.export_accordion_content_selectors,
            expand_accordions=self.export_expand_accordions,
            trigger_lazy_images=self.export_trigger_lazy_images,
            page_width=self.export_page_width,
            timeout_ms=self.export_timeout_ms,
            viewport_height=self.export_viewport_height,
            before_pdf_generation=self.export_before_pdf_generation,
            launch_options=self.export_launch_options,
            nav_card_heuristic=self.export_nav_card_heuristic,
        )
        _config_logger.debug(
            "Resolved export config (preset=%s, content=%r, width=%s, timeout=%dms)",
            self.export_preset or "default",
            config.content_selector,
            config.page_width,
            config.timeout_ms,
        )
        return config


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
