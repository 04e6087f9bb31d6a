from .accordion_expander import AccordionExpander
from .cookie_translator import translate_cookies
from .dom_sanitizer import DomSanitizer
from .height_measurer import HeightMeasurer
from .lazy_content_forcer import LazyContentForcer
from .pdf_export_service import ExportRequest, PdfExportService

__all__ = [
    "AccordionExpander",
    "DomSanitizer",
    "ExportRequest",
    "HeightMeasurer",
    "LazyContentForcer",
    "PdfExportService",
    "translate_cookies",
]
