"""Accordion expansion — open every closed disclosure widget on the page."""

import logging
from typing import Sequence

from docprint.application.interfaces import PageSession

logger = logging.getLogger(__name__)

MAX_ROUNDS = 5
ROUND_SETTLE_MS = 400
FINAL_SETTLE_MS = 500

_CLICK_CLOSED_TRIGGERS_JS = """
    (selector) => {
        const closed = document.querySelectorAll(selector);
        closed.forEach((el) => el.click());
        return closed.length;
    }
"""


class AccordionExpander:
    """Clicks closed disclosure triggers in rounds until none are left.

    Opening one section can reveal nested triggers that did not exist on the
    previous pass, so the page is re-queried every round. A round that finds
    nothing ends the loop early; at most ``max_rounds`` rounds run.
    """

    def __init__(
        self,
        max_rounds: int = MAX_ROUNDS,
        round_settle_ms: float = ROUND_SETTLE_MS,
        final_settle_ms: float = FINAL_SETTLE_MS,
    ) -> None:
        self._max_rounds = max_rounds
        self._round_settle_ms = round_settle_ms
        self._final_settle_ms = final_settle_ms

    async def expand(self, session: PageSession, trigger_selectors: Sequence[str]) -> int:
        """Expand accordions and return the total number of triggers clicked."""
        if not trigger_selectors:
            return 0

        selector = ", ".join(trigger_selectors)
        total = 0
        for round_no in range(1, self._max_rounds + 1):
            clicked = int(await session.evaluate(_CLICK_CLOSED_TRIGGERS_JS, selector) or 0)
            if clicked == 0:
                break
            total += clicked
            logger.debug("Accordion round %d clicked %d trigger(s)", round_no, clicked)
            await session.wait(self._round_settle_ms)

        await session.wait(self._final_settle_ms)

        if total:
            logger.info("Expanded %d accordion section(s)", total)
        else:
            logger.debug("No collapsed accordions found")
        return total
