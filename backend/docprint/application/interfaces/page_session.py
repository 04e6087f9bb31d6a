"""Abstract interface (port) for a single-tab browser session.

Everything that touches the rendered page goes through ``evaluate``: a script
is dispatched into the page with one JSON-serializable argument and returns a
JSON-serializable value. No DOM object ever crosses back into Python.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Any, Mapping, Sequence

from docprint.domain.entities import CookieRecord, Margins


class PageSession(ABC):
    """One browser tab bound to exactly one export request."""

    @abstractmethod
    async def set_viewport(self, width: int, height: int) -> None:
        ...

    @abstractmethod
    async def add_cookies(self, cookies: Sequence[CookieRecord]) -> None:
        ...

    @abstractmethod
    async def goto(self, url: str, timeout_ms: int) -> None:
        """Navigate and wait until network activity is idle.

        Raises on timeout or navigation failure.
        """
        ...

    @abstractmethod
    async def evaluate(self, script: str, arg: Any = None) -> Any:
        """Run ``script`` in page context and return its serialized result."""
        ...

    @abstractmethod
    async def wait(self, delay_ms: float) -> None:
        """Suspend for a fixed settle delay."""
        ...

    @abstractmethod
    async def pdf(self, width: float, height: float, margins: Margins) -> bytes:
        """Rasterize the current page into one PDF page of the given size."""
        ...

    @abstractmethod
    async def close(self) -> None:
        ...


class PageSessionFactory(ABC):
    """Port that hands out isolated sessions as a resource scope.

    ``open()`` returns an async context manager; the session is released when
    the ``async with`` block exits, whether it exits normally or by raising.
    """

    @abstractmethod
    def open(
        self, launch_options: Mapping[str, Any] | None = None
    ) -> AbstractAsyncContextManager[PageSession]:
        ...
