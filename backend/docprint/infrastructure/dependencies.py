"""FastAPI dependency injection — wires infrastructure to application layer."""

from fastapi import HTTPException, Request, status

from docprint.application.services import PdfExportService


def get_pdf_export_service(request: Request) -> PdfExportService:
    """Provides the PdfExportService built once in the application lifespan."""
    service: PdfExportService | None = getattr(request.app.state, "pdf_export_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="PDF export service is not available",
        )
    return service
