"""Force lazy-loaded content (mostly images) to render before capture."""

import logging

from docprint.application.interfaces import PageSession

logger = logging.getLogger(__name__)

SCROLL_STEP_PX = 200
SCROLL_INTERVAL_MS = 50
SCROLL_OVERSHOOT_PX = 500
FINAL_SETTLE_MS = 1000

# Walks the page in small steps so IntersectionObserver-based loaders fire,
# then jumps back to the top.
_SCROLL_THROUGH_PAGE_JS = """
    async ({ step, interval, overshoot }) => {
        await new Promise((resolve) => {
            let scrolled = 0;
            const timer = setInterval(() => {
                window.scrollBy(0, step);
                scrolled += step;
                if (scrolled >= document.body.scrollHeight + overshoot) {
                    clearInterval(timer);
                    window.scrollTo(0, 0);
                    resolve();
                }
            }, interval);
        });
        return document.body.scrollHeight;
    }
"""

# A broken image resolves like a loaded one; it must never fail the export.
_RELOAD_IMAGES_JS = """
    async () => {
        const images = Array.from(document.querySelectorAll('img'));
        images.forEach((img) => img.removeAttribute('loading'));

        let reloaded = 0;
        await Promise.all(images.map((img) => {
            if (img.complete && img.naturalHeight > 0) return Promise.resolve();
            if (!img.getAttribute('src')) return Promise.resolve();
            reloaded++;
            return new Promise((resolve) => {
                img.onload = resolve;
                img.onerror = resolve;
                const src = img.src;
                img.src = '';
                img.src = src;
            });
        }));
        return { total: images.length, reloaded };
    }
"""


class LazyContentForcer:
    """Scrolls the whole document and reloads any image that has not loaded."""

    def __init__(
        self,
        scroll_step_px: int = SCROLL_STEP_PX,
        scroll_interval_ms: int = SCROLL_INTERVAL_MS,
        scroll_overshoot_px: int = SCROLL_OVERSHOOT_PX,
        final_settle_ms: float = FINAL_SETTLE_MS,
    ) -> None:
        self._scroll_args = {
            "step": scroll_step_px,
            "interval": scroll_interval_ms,
            "overshoot": scroll_overshoot_px,
        }
        self._final_settle_ms = final_settle_ms

    async def force(self, session: PageSession) -> None:
        height = await session.evaluate(_SCROLL_THROUGH_PAGE_JS, self._scroll_args)
        logger.debug("Lazy-load scroll complete. Final page height: %spx", height)

        stats = await session.evaluate(_RELOAD_IMAGES_JS) or {}
        logger.debug(
            "Image reload complete (images=%s, reloaded=%s)",
            stats.get("total", 0),
            stats.get("reloaded", 0),
        )

        await session.wait(self._final_settle_ms)
