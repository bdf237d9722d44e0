from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable

from .exceptions import StaleResult
from .http_client import ApiResult
from .logger import get_logger, log_event
from .models import Product
from .ui_errors import to_user_facing_error

SearchFn = Callable[[str], Awaitable[ApiResult[list[Product]]]]
SearchListener = Callable[["SearchController"], None]

DEFAULT_DEBOUNCE_SECONDS = 0.3

logger = get_logger(__name__)


class QueryState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    APPLIED = "applied"
    STALE_DISCARDED = "stale_discarded"
    FAILED = "failed"


class SearchController:
    """Search-as-you-type with a debounce and stale response discarding.

    Every ``set_text`` call re-arms a single timer; only the last keystroke
    of a quiet window issues a request. Each request gets a sequence number
    and its response is applied only while it is still the latest request
    and the input text has not changed since.
    """

    def __init__(self, search: SearchFn, debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS) -> None:
        self._search = search
        self.debounce_seconds = max(0.0, debounce_seconds)
        self.text = ""
        self.requested_text: str | None = None
        self.results: list[Product] = []
        self.loading = False
        self.error: str | None = None
        self.state = QueryState.IDLE
        self.requests_issued = 0
        self.discarded = 0
        self._sequence = 0
        self._timer: asyncio.Task[None] | None = None
        self._in_flight: set[asyncio.Task[None]] = set()
        self._listeners: list[SearchListener] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: SearchListener) -> None:
        self._listeners.append(listener)

    def set_text(self, text: str) -> None:
        """Record a keystroke; must be called from within the running event loop."""
        if self._closed:
            return
        self.text = text
        self._cancel_timer()
        self._timer = asyncio.get_running_loop().create_task(self._fire_after_quiet(text))
        self._notify()

    async def drain(self) -> None:
        """Wait until the armed timer and all in-flight requests have finished."""
        while True:
            pending = [task for task in (self._timer, *self._in_flight) if task is not None and not task.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    def close(self) -> None:
        """Stop the controller; nothing is applied after this returns."""
        self._closed = True
        self._cancel_timer()
        for task in list(self._in_flight):
            task.cancel()
        self._in_flight.clear()
        self.loading = False

    async def _fire_after_quiet(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if self._closed:
            return
        self._timer = None
        if not text.strip():
            self.results = []
            self.error = None
            self.loading = False
            self.state = QueryState.IDLE
            self._notify()
            return
        task = asyncio.get_running_loop().create_task(self._run_query(text))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)

    async def _run_query(self, text: str) -> None:
        self._sequence += 1
        sequence = self._sequence
        self.requests_issued += 1
        self.requested_text = text
        self.loading = True
        self.error = None
        self.state = QueryState.PENDING
        log_event(logger, "search.issued", logging.DEBUG, sequence=sequence, length=len(text))
        self._notify()

        result = await self._search(text)
        try:
            self._ensure_current(sequence, text)
        except StaleResult as stale:
            if self._closed:
                return
            self.discarded += 1
            if stale.sequence == stale.latest and self.state is QueryState.PENDING:
                # text changed but its request has not been issued yet
                self.state = QueryState.STALE_DISCARDED
            log_event(logger, "search.discarded", logging.DEBUG, sequence=stale.sequence, latest=stale.latest)
            return

        self.loading = False
        if result.ok:
            self.results = list(result.data or [])
            self.state = QueryState.APPLIED
        else:
            self.results = []
            self.error = to_user_facing_error(result.error).message if result.error else "Search failed"
            self.state = QueryState.FAILED
            log_event(logger, "search.failed", logging.WARNING, error_code=result.error.code if result.error else None)
        self._notify()

    def _ensure_current(self, sequence: int, text: str) -> None:
        if self._closed or sequence != self._sequence or text != self.text:
            raise StaleResult(sequence, self._sequence)

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
