"""
Debounced place search.

Turns a rapid stream of search-box edits into a single throttled query.
Each accepted edit replaces the pending search (timer and request alike),
so at most one request is in flight and only the latest one may deliver.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional

from core.config import settings
from services.geocoding.errors import ServiceError
from services.geocoding.models import SearchResult

logger = logging.getLogger(__name__)

SearchFn = Callable[[str], Awaitable[List[SearchResult]]]
ResultsCallback = Callable[[List[SearchResult]], None]
ErrorCallback = Callable[[str], None]


class PendingSearch:
    """Handle on one scheduled search; invalidating it cancels its timer and request"""

    def __init__(self, query: str):
        self.query = query
        self.task: Optional[asyncio.Task] = None
        self.in_flight = False
        self._valid = True

    @property
    def active(self) -> bool:
        return self._valid

    def invalidate(self) -> None:
        self._valid = False
        if self.task is not None and not self.task.done():
            self.task.cancel()


class SearchDebouncer:
    def __init__(
        self,
        search: SearchFn,
        on_results: ResultsCallback,
        delay: Optional[float] = None,
        min_length: Optional[int] = None,
        on_error: Optional[ErrorCallback] = None,
    ):
        self.search = search
        self.on_results = on_results
        self.on_error = on_error
        self.delay = settings.SEARCH_DEBOUNCE_SECONDS if delay is None else delay
        self.min_length = settings.SEARCH_MIN_QUERY_LENGTH if min_length is None else min_length
        self.query = ""
        self._pending: Optional[PendingSearch] = None

    @property
    def pending(self) -> Optional[PendingSearch]:
        return self._pending

    @property
    def searching(self) -> bool:
        return self._pending is not None and self._pending.in_flight

    def submit(self, text: str) -> None:
        """Feed one search-box edit. Must be called from the running event loop."""
        self.query = text
        self.cancel()

        query = text.strip()
        if len(query) < self.min_length:
            self.on_results([])
            return

        pending = PendingSearch(query)
        pending.task = asyncio.get_running_loop().create_task(self._run(pending))
        self._pending = pending

    def cancel(self) -> None:
        """Drop the pending search, if any, without emitting anything"""
        if self._pending is not None:
            self._pending.invalidate()
            self._pending = None

    async def wait(self) -> None:
        """Wait until no search is pending (the latest one delivered, failed or was cancelled)"""
        while self._pending is not None and self._pending.task is not None:
            pending = self._pending
            try:
                await asyncio.shield(pending.task)
            except asyncio.CancelledError:
                if not pending.task.cancelled():
                    raise
            if self._pending is pending:
                break

    async def _run(self, pending: PendingSearch) -> None:
        await asyncio.sleep(self.delay)
        if not pending.active:
            return

        pending.in_flight = True
        try:
            results = await self.search(pending.query)
        except ServiceError as e:
            if pending.active:
                logger.warning(f"Place search for {pending.query!r} failed: {e}")
                if self.on_error is not None:
                    self.on_error("Search is unavailable right now. Please try again.")
            return
        finally:
            pending.in_flight = False
            if self._pending is pending:
                self._pending = None

        if not pending.active:
            logger.debug(f"Discarding stale results for {pending.query!r}")
            return
        self.on_results(results)
