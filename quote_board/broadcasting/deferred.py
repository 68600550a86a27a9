"""Background delivery of broadcasts, off the writer's path."""

import asyncio
import logging

from quote_board.broadcasting.broadcaster import QuoteBroadcaster
from quote_board.events import CommitKind, QuoteSnapshot

logger = logging.getLogger(__name__)

_STOP = None


class DeferredBroadcaster:
    """Queues commit events and delivers them from a single worker task.

    ``on_commit`` returns as soon as the event is queued. One FIFO worker
    keeps delivery in commit order, per quote and overall. The queue is
    bounded: once ``maxsize`` events are pending (for instance while the
    worker is stopped) further events are dropped and counted.
    """

    def __init__(self, broadcaster: QuoteBroadcaster, maxsize: int = 1000) -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be greater than 0")
        self._broadcaster = broadcaster
        self._queue: asyncio.Queue[tuple[CommitKind, QuoteSnapshot] | None] = asyncio.Queue(
            maxsize=maxsize
        )
        self._worker: asyncio.Task[None] | None = None
        self.maxsize = maxsize
        self.dropped = 0

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def channel_for(self, quote: QuoteSnapshot) -> str:
        return self._broadcaster.channel_for(quote)

    async def on_commit(self, kind: CommitKind, quote: QuoteSnapshot) -> None:
        try:
            self._queue.put_nowait((kind, quote))
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning(
                f"Dropped {kind} for quote {quote.id}: broadcast queue full ({self.maxsize}, "
                f"worker {'running' if self.running else 'stopped'})"
            )
            return
        if not self.running:
            logger.warning(
                f"Queued {kind} for quote {quote.id} but the broadcast worker is not running"
            )

    def start(self) -> None:
        if self.running:
            return
        self._worker = asyncio.create_task(self._run(), name="quote-broadcast-worker")
        logger.info("Broadcast worker started")

    async def join(self) -> None:
        """Wait until every queued event has been delivered."""
        await self._queue.join()

    async def stop(self) -> None:
        """Deliver what is already queued, then stop the worker."""
        if self._worker is None:
            return
        # Waits for room when the queue is full; the worker keeps draining it.
        await self._queue.put(_STOP)
        await self._worker
        self._worker = None
        logger.info("Broadcast worker stopped")

    async def _run(self) -> None:
        while True:
            item = await self._queue.get()
            try:
                if item is _STOP:
                    return
                kind, quote = item
                await self._broadcaster.on_commit(kind, quote)
            except Exception as e:
                logger.error(f"Broadcast worker failed on {item}: {e}", exc_info=True)
            finally:
                self._queue.task_done()
