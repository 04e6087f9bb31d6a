from .cookie_record import CookieRecord
from .export_config import ExportConfig, Margins
from .rendered_artifact import RenderedArtifact, derive_filename

__all__ = [
    "CookieRecord",
    "ExportConfig",
    "Margins",
    "RenderedArtifact",
    "derive_filename",
]
