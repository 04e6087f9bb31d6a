"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from docprint.presentation.api.v1.endpoints.export_pdf import router as export_pdf_router
from docprint.presentation.api.v1.endpoints.health import router as health_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(export_pdf_router)
