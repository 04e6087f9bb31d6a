"""Health check endpoint — no dependencies, always available."""

from fastapi import APIRouter, Request

from docprint.config import get_settings

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    """Returns application health and whether the PDF exporter is wired up."""
    settings = getattr(request.app.state, "settings", None) or get_settings()
    service = getattr(request.app.state, "pdf_export_service", None)
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "exporter_ready": service is not None,
        "content_selector": service.config.content_selector if service else None,
    }
