from .export import ExportErrorResponse

__all__ = [
    "ExportErrorResponse",
]
