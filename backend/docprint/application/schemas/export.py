"""Pydantic DTOs (Data Transfer Objects) for the PDF export endpoint."""

from pydantic import BaseModel, Field


class ExportErrorResponse(BaseModel):
    """Error payload returned when an export cannot be produced."""

    error: str = Field(..., examples=["Failed to generate PDF"])
    details: str | None = Field(None, examples=["Timeout 30000ms exceeded."])
