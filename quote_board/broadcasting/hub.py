"""In-process publish/subscribe channels.

Every subscriber owns a bounded queue. Publishing never blocks: a message
for a full queue is dropped for that subscriber only and counted. There is
no replay; a subscriber sees only messages published after it subscribed.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from types import TracebackType
from typing import Self

from quote_board.broadcasting.messages import BroadcastMessage

logger = logging.getLogger(__name__)

_CLOSED = object()


class SubscriptionClosed(Exception):
    """Raised by Subscription.get() once the subscription is closed and drained."""


class Subscription:
    """Read side of a channel for one subscriber."""

    def __init__(self, hub: ChannelHub, channel: str, maxsize: int) -> None:
        self._hub = hub
        self._queue: asyncio.Queue[object] = asyncio.Queue(maxsize=maxsize)
        self.channel = channel
        self.maxsize = maxsize
        self.dropped = 0
        self.closed = False

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    async def get(self) -> BroadcastMessage:
        if self.closed and self._queue.empty():
            raise SubscriptionClosed(self.channel)
        item = await self._queue.get()
        if item is _CLOSED:
            raise SubscriptionClosed(self.channel)
        return item  # type: ignore[return-value]

    def get_nowait(self) -> BroadcastMessage:
        """Raises asyncio.QueueEmpty when nothing is pending."""
        item = self._queue.get_nowait()
        if item is _CLOSED:
            raise asyncio.QueueEmpty
        return item  # type: ignore[return-value]

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._hub._remove(self)
        # Wake a reader blocked in get(); a full queue is drained before the closed check.
        try:
            self._queue.put_nowait(_CLOSED)
        except asyncio.QueueFull:
            pass

    def _offer(self, message: BroadcastMessage) -> bool:
        try:
            self._queue.put_nowait(message)
            return True
        except asyncio.QueueFull:
            self.dropped += 1
            return False

    def __aiter__(self) -> Self:
        return self

    async def __anext__(self) -> BroadcastMessage:
        try:
            return await self.get()
        except SubscriptionClosed:
            raise StopAsyncIteration from None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class ChannelHub:
    """Named channels fanning messages out to subscriber queues."""

    def __init__(self, default_maxsize: int = 100) -> None:
        if default_maxsize <= 0:
            raise ValueError("default_maxsize must be greater than 0")
        self.default_maxsize = int(default_maxsize)
        self._subscribers: dict[str, list[Subscription]] = {}
        self._published: Counter[str] = Counter()
        self._dropped: Counter[str] = Counter()

    def subscribe(self, channel: str, maxsize: int | None = None) -> Subscription:
        subscription = Subscription(self, channel, maxsize or self.default_maxsize)
        self._subscribers.setdefault(channel, []).append(subscription)
        logger.debug(f"New subscriber on '{channel}' ({self.subscriber_count(channel)} total)")
        return subscription

    async def publish(self, channel: str, message: BroadcastMessage) -> int:
        """Offer ``message`` to every current subscriber; returns how many accepted it."""
        self._published[channel] += 1
        delivered = 0
        for subscription in list(self._subscribers.get(channel, ())):
            if subscription._offer(message):
                delivered += 1
            else:
                self._dropped[channel] += 1
                logger.warning(
                    f"Dropped {message.kind} message for quote {message.target_id} on "
                    f"'{channel}': subscriber queue full ({subscription.maxsize})"
                )
        return delivered

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))

    def metrics(self, channel: str) -> dict[str, int]:
        return {
            "subscribers": self.subscriber_count(channel),
            "published": self._published[channel],
            "dropped": self._dropped[channel],
        }

    def _remove(self, subscription: Subscription) -> None:
        subscribers = self._subscribers.get(subscription.channel)
        if subscribers and subscription in subscribers:
            subscribers.remove(subscription)
            if not subscribers:
                del self._subscribers[subscription.channel]
