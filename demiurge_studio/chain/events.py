"""Chain events and the listener registry that broadcasts them."""

from __future__ import annotations

import asyncio
import inspect
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable

from loguru import logger
from pydantic import BaseModel, Field


class ChainEventType(str, Enum):
    ENDPOINT_CHANGED = "endpoint_changed"
    CHAIN_INFO_UPDATED = "chain_info_updated"
    CHAIN_INFO_ERROR = "chain_info_error"
    BALANCE_UPDATED = "balance_updated"
    BALANCE_ERROR = "balance_error"
    ARCHON_STATUS_UPDATED = "archon_status_updated"
    ARCHON_STATUS_ERROR = "archon_status_error"
    NFTS_UPDATED = "nfts_updated"
    NFTS_ERROR = "nfts_error"
    LISTING_UPDATED = "listing_updated"
    LISTING_ERROR = "listing_error"
    FABRIC_ASSET_UPDATED = "fabric_asset_updated"
    FABRIC_ASSET_ERROR = "fabric_asset_error"
    BLOCK_UPDATED = "block_updated"
    BLOCK_ERROR = "block_error"
    TRANSACTION_SUBMITTED = "transaction_submitted"
    TRANSACTION_ERROR = "transaction_error"


class ChainEvent(BaseModel):
    """One notification about a query outcome or a configuration change."""
    type: ChainEventType
    address: str | None = None
    height: int | None = None
    balance: int | None = None
    is_archon: bool | None = None
    message: str | None = None  # set on *_ERROR events
    endpoint_url: str | None = None
    value: Any = None  # decoded payload of the supplementary queries
    timestamp: datetime = Field(default_factory=datetime.now)


Listener = Callable[[ChainEvent], Any]


class EventEmitter:
    """Registers listeners and broadcasts chain events to them."""

    def __init__(self):
        self._listeners: list[tuple[ChainEventType | None, Listener]] = []
        self._pending: set[asyncio.Task] = set()

    def add_listener(
        self,
        listener: Listener,
        event_type: ChainEventType | None = None,
    ) -> Callable[[], None]:
        """
        Register a listener for one event type, or for every event when
        ``event_type`` is None. Returns a callable that unregisters it.
        """
        entry = (event_type, listener)
        self._listeners.append(entry)

        def _remove() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return _remove

    def remove_listener(self, listener: Listener, event_type: ChainEventType | None = None) -> bool:
        """Unregister a listener; returns False when it was not registered."""
        entry = (event_type, listener)
        if entry not in self._listeners:
            return False
        self._listeners.remove(entry)
        return True

    def emit(self, event: ChainEvent) -> None:
        """Deliver an event to matching listeners in registration order."""
        for event_type, listener in list(self._listeners):
            if event_type is not None and event_type != event.type:
                continue
            try:
                outcome = listener(event)
            except Exception as e:
                logger.warning(f"Chain event listener error ({event.type.value}): {e}")
                continue
            if inspect.isawaitable(outcome):
                self._schedule(outcome, event)

    def _schedule(self, awaitable: Awaitable[Any], event: ChainEvent) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"Dropping async listener for {event.type.value}: no running event loop")
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            return
        task = loop.create_task(self._run_async_listener(awaitable, event))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    async def _run_async_listener(awaitable: Awaitable[Any], event: ChainEvent) -> None:
        try:
            await awaitable
        except Exception as e:
            logger.warning(f"Chain event listener error ({event.type.value}): {e}")

    async def drain(self) -> None:
        """Wait for async listeners scheduled so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
