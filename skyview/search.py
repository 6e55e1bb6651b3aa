"""Debounced city search."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class SearchDebouncer:
    """Single-slot debounce timer for search input.

    Each ``submit`` cancels whatever search is still waiting, so only the
    most recent input fires, ``delay`` seconds after typing stops. Searches
    already in flight are not cancelled.
    """

    def __init__(
        self,
        callback: Callable[[str], Awaitable[object]],
        delay: float = 0.5,
        min_length: int = 2,
    ):
        self.callback = callback
        self.delay = delay
        self.min_length = min_length
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def submit(self, text: str) -> None:
        """Register new input. Must be called from within a running event loop."""
        self.cancel()
        query = text.strip()
        if not query:
            return
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire, query)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def drain(self) -> None:
        """Wait for searches that have already fired."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _fire(self, query: str) -> None:
        self._handle = None
        if len(query) < self.min_length:
            logger.debug("Ignoring short query %r", query)
            return
        task = asyncio.ensure_future(self._run(query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, query: str) -> None:
        try:
            await self.callback(query)
        except Exception:
            logger.exception("Search for %r failed", query)
