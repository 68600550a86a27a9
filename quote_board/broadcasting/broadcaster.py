"""Live update broadcaster: committed quote writes to channel messages."""

import logging
from collections.abc import Callable

from quote_board.broadcasting.hub import ChannelHub
from quote_board.broadcasting.messages import INSERTION_BY_KIND, BroadcastMessage
from quote_board.broadcasting.renderer import QuoteRenderer
from quote_board.events import CommitKind, QuoteSnapshot

logger = logging.getLogger(__name__)

QUOTES_CHANNEL = "quotes"

ChannelSelector = Callable[[QuoteSnapshot], str]


def quotes_channel(quote: QuoteSnapshot) -> str:
    """Every quote goes to the single shared list channel."""
    return QUOTES_CHANNEL


class QuoteBroadcaster:
    """Commit listener publishing one message per committed write.

    Created quotes are prepended to the list, updated ones replace their
    element and deleted ones are removed. Delivery is best-effort: render and
    publish failures are logged and never reach the writer.
    """

    def __init__(
        self,
        hub: ChannelHub,
        renderer: QuoteRenderer | None = None,
        channel_selector: ChannelSelector = quotes_channel,
    ) -> None:
        self._hub = hub
        self._renderer = renderer or QuoteRenderer()
        self._channel_selector = channel_selector

    def channel_for(self, quote: QuoteSnapshot) -> str:
        return self._channel_selector(quote)

    def build_message(self, kind: CommitKind, quote: QuoteSnapshot) -> BroadcastMessage:
        fragment = None if kind == CommitKind.DELETED else self._renderer.render(quote)
        return BroadcastMessage(
            kind=kind,
            target_id=str(quote.id),
            html_fragment=fragment,
            insertion=INSERTION_BY_KIND[kind],
        )

    async def on_commit(self, kind: CommitKind, quote: QuoteSnapshot) -> None:
        try:
            channel = self.channel_for(quote)
            message = self.build_message(kind, quote)
            delivered = await self._hub.publish(channel, message)
        except Exception as e:
            # NOTE: no error raising - subscribers resync via list_ordered() on reconnect.
            logger.error(f"Failed to broadcast {kind} for quote {quote.id}: {e}", exc_info=True)
            return

        logger.debug(
            f"Broadcast {kind} for quote {quote.id} to '{channel}' "
            f"({message.insertion}, {delivered} subscriber(s))"
        )
