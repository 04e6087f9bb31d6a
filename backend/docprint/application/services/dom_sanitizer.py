"""DOM sanitization — reduce the page to a print-safe copy of its content root.

The whole transformation runs as a single page-context call so the page never
sits half-mutated between round trips. Steps, in order:

    1. Locate the content root (no-op when the selector matches nothing)
    2. Replace <body> with a deep clone of it on a blank white canvas
    3. Drop previous/next navigation cards (structural heuristic, optional)
    4. Drop everything matching the configured removal selectors
    5. Un-pin fixed/sticky elements and un-clip hidden overflow
    6. Flatten open/closed disclosure widgets into normal flow
    7. Apply the same flow reset to configured accordion-content selectors
    8. Stack disclosure groups as a gapless column
    9. Trim leading whitespace above the first heading
"""

import logging

from docprint.application.interfaces import PageSession
from docprint.domain.entities import ExportConfig

logger = logging.getLogger(__name__)

POST_SANITIZE_SETTLE_MS = 100

_SANITIZE_JS = """
    (opts) => {
        const content = document.querySelector(opts.contentSelector);
        if (!content) return { found: false, removed: 0 };

        const root = content.cloneNode(true);
        document.body.innerHTML = '';
        document.body.appendChild(root);

        document.body.style.cssText =
            'margin: 0; padding: 0; background: white; width: 100%; max-width: 100%;';
        document.documentElement.style.cssText =
            'margin: 0; padding: 0; background: white;';
        root.style.cssText =
            'max-width: 100%; width: 100%; margin: 0; padding: 0; background: white;';

        let removed = 0;
        const drop = (el) => { if (el.isConnected) { el.remove(); removed++; } };

        if (opts.navCardHeuristic) {
            const grid = `[class*="${CSS.escape(opts.navCardGridClass)}"]`;
            const container = `[class*="${CSS.escape(opts.navCardContainerClass)}"]`;
            root.querySelectorAll(grid).forEach(drop);
            root.querySelectorAll(container).forEach((el) => {
                if (el.querySelector(grid) || el.querySelectorAll('a').length === 2) drop(el);
            });
        }

        opts.removeSelectors.forEach((selector) => {
            root.querySelectorAll(selector).forEach(drop);
        });

        [root, ...root.querySelectorAll('*')].forEach((el) => {
            const style = getComputedStyle(el);
            if (style.position === 'fixed' || style.position === 'sticky') {
                el.style.position = 'static';
            }
            if (style.overflow === 'hidden' || style.overflowX === 'hidden'
                    || style.overflowY === 'hidden') {
                el.style.overflow = 'visible';
            }
        });

        const flow = (el) => {
            el.style.transform = 'none';
            el.style.transition = 'none';
            el.style.animation = 'none';
            el.style.position = 'relative';
            el.style.height = 'auto';
            el.style.display = 'block';
            el.style.overflow = 'visible';
        };

        root.querySelectorAll('[data-state="open"], [data-state="closed"]').forEach((el) => {
            flow(el);
            el.style.opacity = '1';
            el.style.visibility = 'visible';
        });

        opts.accordionContentSelectors.forEach((selector) => {
            root.querySelectorAll(selector).forEach(flow);
        });

        root.querySelectorAll('[data-radix-accordion-root], [data-orientation]').forEach((el) => {
            el.style.display = 'flex';
            el.style.flexDirection = 'column';
            el.style.gap = '0';
        });
        root.querySelectorAll('[data-radix-accordion-item]').forEach((el) => {
            el.style.position = 'relative';
            el.style.display = 'block';
            el.style.height = 'auto';
        });

        root.style.marginTop = '0';
        root.style.paddingTop = '0';
        const first = root.firstElementChild;
        if (first) {
            first.style.marginTop = '0';
            first.style.paddingTop = '0';
        }

        return { found: true, removed };
    }
"""

_REFLOW_JS = """
    () => {
        window.scrollTo(0, 0);
        return document.body.offsetHeight;
    }
"""


class DomSanitizer:
    """Reduces the live page to a sanitized clone of its content root."""

    def __init__(self, settle_ms: float = POST_SANITIZE_SETTLE_MS) -> None:
        self._settle_ms = settle_ms

    async def sanitize(self, session: PageSession, config: ExportConfig) -> bool:
        """Sanitize the page in place. Returns False when no content root exists."""
        result = await session.evaluate(_SANITIZE_JS, config.sanitizer_args()) or {}
        found = bool(result.get("found"))
        if found:
            logger.debug("Sanitized content root, removed %d element(s)", result.get("removed", 0))
        else:
            logger.warning(
                "Content selector %r matched nothing; page left unsanitized",
                config.content_selector,
            )

        await session.evaluate(_REFLOW_JS)
        await session.wait(self._settle_ms)
        return found
