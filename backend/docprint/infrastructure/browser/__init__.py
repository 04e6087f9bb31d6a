"""Browser infrastructure module — Playwright page sessions."""

from .playwright_session import PlaywrightPageSession, PlaywrightSessionFactory

__all__ = [
    "PlaywrightPageSession",
    "PlaywrightSessionFactory",
]
