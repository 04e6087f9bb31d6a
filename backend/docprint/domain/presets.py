"""Preset selector bundles for common documentation frameworks.

A preset only supplies selector fields. Resolving a config layers the
defaults, then the preset, then any explicit override; margins are merged
per side so overriding ``top`` keeps the default for the other three.
"""

from dataclasses import dataclass, fields
from types import MappingProxyType
from typing import Any, Mapping

from docprint.domain.entities import ExportConfig, Margins
from docprint.domain.exceptions import UnknownPresetError


@dataclass(frozen=True)
class ExportPreset:
    content_selector: str
    remove_selectors: tuple[str, ...]
    accordion_trigger_selectors: tuple[str, ...]
    accordion_content_selectors: tuple[str, ...]

    def as_overrides(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


PRESETS: Mapping[str, ExportPreset] = MappingProxyType({
    "fumadocs": ExportPreset(
        content_selector="article",
        remove_selectors=("#nd-sidebar", "#nd-toc", "nav", ".print-hidden"),
        accordion_trigger_selectors=(
            'button[data-state="closed"]',
            '[data-state="closed"] > button',
            '[data-state="closed"][role="button"]',
        ),
        accordion_content_selectors=(
            "[data-radix-accordion-content]",
            "[data-radix-collapsible-content]",
        ),
    ),
    "docusaurus": ExportPreset(
        content_selector="article",
        remove_selectors=(
            ".theme-doc-sidebar-container",
            ".table-of-contents",
            "nav",
            ".print-hidden",
        ),
        accordion_trigger_selectors=(".collapsible-button", 'button[aria-expanded="false"]'),
        accordion_content_selectors=(".collapsible-content",),
    ),
    "nextra": ExportPreset(
        content_selector="article",
        remove_selectors=("nav", "aside", ".nextra-sidebar", ".nextra-toc", ".print-hidden"),
        accordion_trigger_selectors=('button[data-state="closed"]',),
        accordion_content_selectors=("[data-radix-collapsible-content]",),
    ),
})


def get_preset(name: str) -> ExportPreset:
    try:
        return PRESETS[name]
    except KeyError:
        raise UnknownPresetError(name, tuple(PRESETS)) from None


def resolve_export_config(
    preset: str | None = None,
    margins: Mapping[str, float | None] | None = None,
    **overrides: Any,
) -> ExportConfig:
    """Build an ExportConfig from defaults, an optional preset and overrides.

    Overrides whose value is ``None`` are ignored so callers can pass every
    optional setting straight through.

    Raises:
        UnknownPresetError: if ``preset`` is not a known preset name.
        InvalidExportConfigError: if the merged values break a config invariant.
    """
    values: dict[str, Any] = {}
    if preset:
        values.update(get_preset(preset).as_overrides())
    values.update({key: value for key, value in overrides.items() if value is not None})
    values["margins"] = Margins().merged(margins)
    return ExportConfig(**values)
