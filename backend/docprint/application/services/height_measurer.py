import logging

from docprint.application.interfaces import PageSession

logger = logging.getLogger(__name__)

CONTENT_PADDING = 40

_MEASURE_JS = """
    ({ selector, padding }) => {
        const content = document.querySelector(selector);
        if (content) {
            content.offsetHeight;
            return content.getBoundingClientRect().height + padding;
        }
        return document.body.scrollHeight;
    }
"""


class HeightMeasurer:
    """Measures the sanitized content so the PDF page can be sized to fit it."""

    def __init__(self, padding: float = CONTENT_PADDING) -> None:
        self._padding = padding

    async def measure(self, session: PageSession, content_selector: str) -> float:
        height = await session.evaluate(
            _MEASURE_JS, {"selector": content_selector, "padding": self._padding}
        )
        height = float(height or 0)
        logger.debug("Measured content height: %.1fpx", height)
        return height
