"""Domain-specific exceptions — framework-independent."""


class InvalidExportConfigError(ValueError):
    """Raised when an export configuration violates one of its invariants."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid export config field '{field}': {reason}")


class UnknownPresetError(KeyError):
    """Raised when a preset name is not in the preset table."""

    def __init__(self, name: str, available: tuple[str, ...]):
        self.name = name
        self.available = available
        super().__init__(f"Unknown preset '{name}' (available: {', '.join(available)})")

    def __str__(self) -> str:
        return self.args[0]


class MissingPathError(Exception):
    """Raised when an export is requested without a target path."""

    def __init__(self, message: str = "Missing path parameter"):
        self.message = message
        super().__init__(message)


class PdfGenerationError(Exception):
    """Uniform failure report for any error raised while generating a PDF.

    Navigation timeouts, browser launch failures, page-context script errors
    and rasterization errors are all reported through this single type.
    ``details`` holds the stringified cause; ``stage`` names the pipeline step
    that was running and is meant for logs only.
    """

    message = "Failed to generate PDF"

    def __init__(self, details: str, stage: str | None = None):
        self.details = details
        self.stage = stage
        super().__init__(f"{self.message}: {details}")
