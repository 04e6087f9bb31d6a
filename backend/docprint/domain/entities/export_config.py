"""Export configuration — immutable value resolved once per handler."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from docprint.domain.exceptions import InvalidExportConfigError

DEFAULT_CONTENT_SELECTOR = "article"
DEFAULT_REMOVE_SELECTORS = ("#nd-sidebar", "#nd-toc", "nav", ".print-hidden")
DEFAULT_ACCORDION_TRIGGER_SELECTORS = (
    'button[data-state="closed"]',
    '[data-state="closed"] > button',
    '[data-state="closed"][role="button"]',
)
DEFAULT_ACCORDION_CONTENT_SELECTORS = (
    "[data-radix-accordion-content]",
    "[data-radix-collapsible-content]",
)
DEFAULT_PAGE_WIDTH = 850
DEFAULT_MARGIN = 30
DEFAULT_TIMEOUT_MS = 30_000
DEFAULT_VIEWPORT_HEIGHT = 600
DEFAULT_NAV_CARD_GRID_CLASS = "grid-cols-2"
DEFAULT_NAV_CARD_CONTAINER_CLASS = "@container"


@dataclass(frozen=True)
class Margins:
    """Four-sided PDF margin, in CSS pixels."""

    top: float = DEFAULT_MARGIN
    right: float = DEFAULT_MARGIN
    bottom: float = DEFAULT_MARGIN
    left: float = DEFAULT_MARGIN

    def __post_init__(self) -> None:
        for side in ("top", "right", "bottom", "left"):
            if getattr(self, side) < 0:
                raise InvalidExportConfigError(f"margins.{side}", "must be non-negative")

    def merged(self, overrides: Mapping[str, float | None] | None) -> "Margins":
        """Return a copy with every non-None side in ``overrides`` applied."""
        if not overrides:
            return self
        values = {
            side: overrides.get(side) if overrides.get(side) is not None else getattr(self, side)
            for side in ("top", "right", "bottom", "left")
        }
        return Margins(**values)

    def as_css(self) -> dict[str, str]:
        return {
            "top": f"{self.top}px",
            "right": f"{self.right}px",
            "bottom": f"{self.bottom}px",
            "left": f"{self.left}px",
        }


@dataclass(frozen=True)
class ExportConfig:
    """Everything the render pipeline needs to know about the target site.

    Built once when the handler is created and shared read-only by every
    request. Selector collections are stored as tuples and launch options as a
    read-only mapping so no request can mutate another's view of the config.
    """

    content_selector: str = DEFAULT_CONTENT_SELECTOR
    remove_selectors: tuple[str, ...] = DEFAULT_REMOVE_SELECTORS
    accordion_trigger_selectors: tuple[str, ...] = DEFAULT_ACCORDION_TRIGGER_SELECTORS
    accordion_content_selectors: tuple[str, ...] = DEFAULT_ACCORDION_CONTENT_SELECTORS
    expand_accordions: bool = True
    trigger_lazy_images: bool = True
    page_width: float = DEFAULT_PAGE_WIDTH
    margins: Margins = field(default_factory=Margins)
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    before_pdf_generation: str | None = None
    launch_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    viewport_height: int = DEFAULT_VIEWPORT_HEIGHT
    nav_card_heuristic: bool = True
    nav_card_grid_class: str = DEFAULT_NAV_CARD_GRID_CLASS
    nav_card_container_class: str = DEFAULT_NAV_CARD_CONTAINER_CLASS

    def __post_init__(self) -> None:
        # Freeze collections handed in as lists/dicts.
        object.__setattr__(self, "remove_selectors", tuple(self.remove_selectors))
        object.__setattr__(
            self, "accordion_trigger_selectors", tuple(self.accordion_trigger_selectors)
        )
        object.__setattr__(
            self, "accordion_content_selectors", tuple(self.accordion_content_selectors)
        )
        if not isinstance(self.launch_options, MappingProxyType):
            object.__setattr__(self, "launch_options", MappingProxyType(dict(self.launch_options)))
        self._validate()

    def _validate(self) -> None:
        if not _is_selector(self.content_selector):
            raise InvalidExportConfigError("content_selector", "must be a non-empty string")
        if self.page_width < 0:
            raise InvalidExportConfigError("page_width", "must be non-negative")
        if self.timeout_ms < 0:
            raise InvalidExportConfigError("timeout_ms", "must be non-negative")
        if self.viewport_height <= 0:
            raise InvalidExportConfigError("viewport_height", "must be positive")
        if not isinstance(self.margins, Margins):
            raise InvalidExportConfigError("margins", "must be a Margins instance")

        _check_selectors("remove_selectors", self.remove_selectors)
        _check_selectors("accordion_content_selectors", self.accordion_content_selectors)
        if self.expand_accordions:
            if not self.accordion_trigger_selectors:
                raise InvalidExportConfigError(
                    "accordion_trigger_selectors",
                    "required when expand_accordions is enabled",
                )
            _check_selectors("accordion_trigger_selectors", self.accordion_trigger_selectors)
        if self.nav_card_heuristic:
            if not _is_selector(self.nav_card_grid_class):
                raise InvalidExportConfigError("nav_card_grid_class", "must be a non-empty string")
            if not _is_selector(self.nav_card_container_class):
                raise InvalidExportConfigError(
                    "nav_card_container_class", "must be a non-empty string"
                )

    def sanitizer_args(self) -> dict[str, Any]:
        """Serializable arguments passed into the page-context sanitizer."""
        return {
            "contentSelector": self.content_selector,
            "removeSelectors": list(self.remove_selectors),
            "accordionContentSelectors": list(self.accordion_content_selectors),
            "navCardHeuristic": self.nav_card_heuristic,
            "navCardGridClass": self.nav_card_grid_class,
            "navCardContainerClass": self.nav_card_container_class,
        }


def _is_selector(value: object) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _check_selectors(name: str, selectors: tuple[str, ...]) -> None:
    for selector in selectors:
        if not _is_selector(selector):
            raise InvalidExportConfigError(name, f"contains an empty selector: {selector!r}")
