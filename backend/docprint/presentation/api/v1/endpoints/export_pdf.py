"""PDF export endpoint — renders a documentation page into a single-page PDF."""

import logging

from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse

from docprint.application.schemas import ExportErrorResponse
from docprint.application.services import ExportRequest, PdfExportService
from docprint.config import get_settings
from docprint.domain.exceptions import MissingPathError, PdfGenerationError
from docprint.infrastructure.dependencies import get_pdf_export_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Export"])


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    payload = ExportErrorResponse(error=error, details=details)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


@router.get(
    "/export-pdf",
    response_class=Response,
    responses={
        200: {"content": {"application/pdf": {}}},
        400: {"model": ExportErrorResponse},
        500: {"model": ExportErrorResponse},
    },
)
async def export_pdf(
    request: Request,
    path: str | None = Query(None, description="Path of the page to export, e.g. /docs/setup"),
    filename: str | None = Query(None, description="Download filename without extension"),
    service: PdfExportService = Depends(get_pdf_export_service),
) -> Response:
    """Render the page at ``path`` on this host and return it as a PDF download."""
    if not path or not path.strip():
        return _error(status.HTTP_400_BAD_REQUEST, MissingPathError().message)

    path = path.strip()
    if not path.startswith("/"):
        path = f"/{path}"

    settings = getattr(request.app.state, "settings", None) or get_settings()
    host = request.headers.get("host") or settings.default_host
    export_request = ExportRequest(
        base_url=f"{request.url.scheme}://{host}",
        path=path,
        cookie_header=request.headers.get("cookie", ""),
        filename=filename,
    )

    try:
        artifact = await service.export(export_request)
    except MissingPathError as e:
        return _error(status.HTTP_400_BAD_REQUEST, e.message)
    except PdfGenerationError as e:
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, e.message, e.details)

    return Response(
        content=artifact.content,
        media_type="application/pdf",
        headers={"Content-Disposition": artifact.content_disposition},
    )
