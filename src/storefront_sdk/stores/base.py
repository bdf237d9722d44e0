from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Generic, Hashable, Iterable, TypeVar

from ..exceptions import ApiError, UnauthorizedError, ValidationError
from ..http_client import ApiResult
from ..logger import get_logger, log_event
from ..models import SessionIdentity
from ..session import SessionManager
from ..ui_errors import to_user_facing_error

K = TypeVar("K", bound=Hashable)
E = TypeVar("E")

StoreListener = Callable[["OptimisticStore"], None]
Sender = Callable[[str], Awaitable[ApiResult]]

logger = get_logger(__name__)


class SyncState(str, Enum):
    SYNCED = "synced"
    OPTIMISTIC_PENDING = "optimistic_pending"
    RECONCILING = "reconciling"


@dataclass(frozen=True)
class MutationOutcome:
    ok: bool
    error: ApiError | None = None
    reconciled: bool = False


def require_quantity(value: object, *, allow_non_positive: bool = False) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Quantity must be a whole number", field="quantity", value=value)
    if value <= 0 and not allow_non_positive:
        raise ValidationError("Quantity must be at least 1", field="quantity", value=value)
    return value


class OptimisticStore(Generic[K, E]):
    """Local copy of a server-owned collection with optimistic mutations.

    Mutations change local state before the request is sent. Any failure is
    reconciled by reloading the whole collection from the server, never by a
    local undo. Requests for the same key are serialized, and when a server
    collection is adopted, keys with requests still in flight keep their
    local value so a slow response cannot overwrite a later local change.
    """

    name = "store"

    def __init__(self, session: SessionManager) -> None:
        self.session = session
        self.state = SyncState.SYNCED
        self.loading = False
        self.error: str | None = None
        self.last_error: ApiError | None = None
        self._items: dict[K, E] = {}
        self._in_flight: dict[K, int] = {}
        self._locks: dict[K, asyncio.Lock] = {}
        self._listeners: list[StoreListener] = []
        self._load_generation = 0
        self._issued = 0
        self._adopted = 0
        # snapshots issued before a store-wide mutation are never adopted
        self._barrier = 0
        session.subscribe(self._on_session_change)

    # -- subclass hooks -------------------------------------------------

    def _key(self, item: E) -> K:
        raise NotImplementedError

    async def _fetch(self, user_id: str) -> ApiResult[list[E]]:
        raise NotImplementedError

    # -- read side ------------------------------------------------------

    @property
    def items(self) -> list[E]:
        return list(self._items.values())

    def get(self, key: K) -> E | None:
        return self._items.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __len__(self) -> int:
        return len(self._items)

    def has_pending(self, key: K | None = None) -> bool:
        if key is None:
            return bool(self._in_flight)
        return key in self._in_flight

    def subscribe(self, listener: StoreListener) -> None:
        self._listeners.append(listener)

    # -- synchronization ------------------------------------------------

    async def load(self) -> bool:
        """Replace local state with the server collection.

        With no session identity the store resets to empty without a request.
        Returns False when the fetch failed or was superseded.
        """
        user_id = self.session.user_id
        if user_id is None:
            self._reset()
            return True

        self._load_generation += 1
        generation = self._load_generation
        ticket = self._next_ticket()
        self.loading = True
        self._notify()
        try:
            result = await self._fetch(user_id)
        finally:
            if generation == self._load_generation:
                self.loading = False

        if not result.ok and self.session.user_id is None:
            # the credential was rejected; the session listener already reset us
            self._record_error(result.error)
            self._notify()
            return False
        superseded = generation != self._load_generation or self.session.user_id != user_id
        if superseded or not self._is_fresh(ticket):
            log_event(logger, f"{self.name}.load_superseded", logging.DEBUG)
            return False
        if not result.ok:
            self._record_error(result.error)
            self._notify()
            return False

        self._adopt(result.data or [], ticket)
        self.error = None
        self.last_error = None
        self.state = SyncState.OPTIMISTIC_PENDING if self._in_flight else SyncState.SYNCED
        log_event(logger, f"{self.name}.loaded", size=len(self._items))
        self._notify()
        return True

    async def _mutate(
        self,
        operation: str,
        key: K,
        apply_local: Callable[[], None],
        send: Sender,
        *,
        store_wide: bool = False,
    ) -> MutationOutcome:
        user_id = self.session.user_id
        if user_id is None:
            error = UnauthorizedError(
                code="NOT_AUTHENTICATED",
                message="Sign in to continue",
                status_code=0,
            )
            self._record_error(error)
            self._notify()
            return MutationOutcome(ok=False, error=error)

        self.error = None
        apply_local()
        self._in_flight[key] = self._in_flight.get(key, 0) + 1
        self.state = SyncState.OPTIMISTIC_PENDING
        self._notify()

        lock = self._locks.setdefault(key, asyncio.Lock())
        try:
            async with lock:
                ticket = self._next_ticket()
                if store_wide:
                    self._barrier = ticket
                result = await send(user_id)
        finally:
            self._release(key)

        if not result.ok:
            log_event(
                logger,
                f"{self.name}.{operation}_failed",
                logging.WARNING,
                error_code=result.error.code if result.error else None,
            )
            self._record_error(result.error)
            self.state = SyncState.RECONCILING
            self._notify()
            await self.load()
            # keep the failure visible after a successful reload
            self._record_error(result.error)
            self._notify()
            return MutationOutcome(ok=False, error=result.error, reconciled=True)

        if self.session.user_id == user_id and self._is_fresh(ticket):
            if result.data is not None:
                self._adopt(result.data, ticket)
            else:
                # bare confirmation: the local state already is the new snapshot
                self._adopted = ticket
        if not self._in_flight and self.state is SyncState.OPTIMISTIC_PENDING:
            self.state = SyncState.SYNCED
        self._notify()
        return MutationOutcome(ok=True)

    async def _remove_key(self, operation: str, key: K, send: Sender) -> MutationOutcome:
        if key not in self._items:
            return MutationOutcome(ok=True)
        return await self._mutate(operation, key, lambda: self._items.pop(key, None), send)

    def _next_ticket(self) -> int:
        self._issued += 1
        return self._issued

    def _is_fresh(self, ticket: int) -> bool:
        return ticket > self._adopted and ticket >= self._barrier

    def _adopt(self, items: Iterable[E], ticket: int) -> None:
        # responses are snapshots; never adopt one older than the last adopted
        self._adopted = ticket
        fresh = {self._key(item): item for item in items}
        for key in self._in_flight:
            if key in self._items:
                fresh[key] = self._items[key]
            else:
                fresh.pop(key, None)
        self._items = fresh

    def _release(self, key: K) -> None:
        remaining = self._in_flight.get(key, 0) - 1
        if remaining > 0:
            self._in_flight[key] = remaining
            return
        self._in_flight.pop(key, None)
        self._locks.pop(key, None)

    def _reset(self) -> None:
        self._load_generation += 1
        self._items = {}
        self.loading = False
        self.state = SyncState.SYNCED if not self._in_flight else SyncState.OPTIMISTIC_PENDING
        self._notify()

    def _record_error(self, error: ApiError | None) -> None:
        self.last_error = error
        self.error = to_user_facing_error(error).message if error else None

    def _on_session_change(self, identity: SessionIdentity | None) -> None:
        if identity is None:
            self._reset()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
