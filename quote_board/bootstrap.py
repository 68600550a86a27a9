"""Bootstrap function for wiring the quote store to its broadcaster.

This module provides the main entry point for building a ready-to-use
QuoteBoard: database access, the quote store, the channel hub and the
broadcaster registered as the store's commit listener.
"""

import logging
from dataclasses import dataclass
from typing import Any

from quote_board.broadcasting import (
    ChannelHub,
    ChannelSelector,
    DeferredBroadcaster,
    QuoteBroadcaster,
    quotes_channel,
)
from quote_board.store import QuoteStore
from quote_board.unit_of_work import UnitOfWorkFactory, create_uow_factory

logger = logging.getLogger(__name__)


@dataclass
class QuoteBoard:
    """Wired application components."""

    store: QuoteStore
    hub: ChannelHub
    broadcaster: QuoteBroadcaster
    deferred: DeferredBroadcaster | None
    uow_factory: UnitOfWorkFactory

    async def flush(self) -> None:
        """Wait for deferred broadcasts queued so far; no-op in inline mode."""
        if self.deferred is not None:
            await self.deferred.join()

    async def close(self) -> None:
        if self.deferred is not None:
            await self.deferred.stop()
        await self.uow_factory.dispose()
        logger.debug("Quote board closed")


async def bootstrap(
    db_connection: str,
    broadcast_mode: str = "inline",
    subscriber_queue_size: int = 100,
    engine_kwargs: dict[str, Any] | None = None,
    session_kwargs: dict[str, Any] | None = None,
    channel_selector: ChannelSelector = quotes_channel,
    create_schema: bool = False,
) -> QuoteBoard:
    """Set up the store, hub and broadcaster.

    Args:
        db_connection: SQLAlchemy async URL (e.g. "sqlite+aiosqlite:///quotes.db")
        broadcast_mode: "inline" publishes inside the write; "deferred" queues
            events for a background worker started here (default: "inline")
        subscriber_queue_size: Bound of each subscriber queue (default: 100)
        engine_kwargs: Extra kwargs for create_async_engine (optional)
        session_kwargs: Extra kwargs for async_sessionmaker (optional)
        channel_selector: Maps a quote to its channel (default: always "quotes")
        create_schema: Create missing tables before returning (default: False)

    Returns:
        QuoteBoard with the broadcaster subscribed to the store

    Raises:
        ValueError: If broadcast_mode is unknown

    Example:
        board = await bootstrap("sqlite+aiosqlite:///quotes.db", create_schema=True)
        subscription = board.hub.subscribe("quotes")
        company = await board.store.create_company("Kpop Corp")
        await board.store.create("First quote", company.id)
        message = await subscription.get()
        await board.close()
    """
    if broadcast_mode not in ("inline", "deferred"):
        raise ValueError(f"Unknown broadcast mode: {broadcast_mode}")

    uow_factory = create_uow_factory(
        db_connection,
        session_kwargs=session_kwargs,
        engine_kwargs=engine_kwargs,
    )
    if create_schema:
        async with uow_factory() as uow:
            await uow.create_schema()
        logger.info("Database schema ready")

    store = QuoteStore(uow_factory)
    hub = ChannelHub(default_maxsize=subscriber_queue_size)
    broadcaster = QuoteBroadcaster(hub, channel_selector=channel_selector)

    deferred = None
    if broadcast_mode == "deferred":
        deferred = DeferredBroadcaster(broadcaster)
        deferred.start()
        store.subscribe(deferred.on_commit)
    else:
        store.subscribe(broadcaster.on_commit)

    logger.debug(
        f"Bootstrap complete: broadcast_mode={broadcast_mode}, "
        f"subscriber_queue_size={subscriber_queue_size}"
    )

    return QuoteBoard(
        store=store,
        hub=hub,
        broadcaster=broadcaster,
        deferred=deferred,
        uow_factory=uow_factory,
    )
