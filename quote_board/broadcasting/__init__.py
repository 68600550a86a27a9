"""Live list updates for committed quote writes.

- QuoteBroadcaster: renders and publishes one message per commit
- DeferredBroadcaster: same, delivered from a background worker
- ChannelHub: in-process channels with bounded subscriber queues
"""

from quote_board.broadcasting.broadcaster import (
    QUOTES_CHANNEL,
    ChannelSelector,
    QuoteBroadcaster,
    quotes_channel,
)
from quote_board.broadcasting.deferred import DeferredBroadcaster
from quote_board.broadcasting.hub import ChannelHub, Subscription, SubscriptionClosed
from quote_board.broadcasting.messages import BroadcastMessage, Insertion
from quote_board.broadcasting.renderer import QuoteRenderer

__all__ = [
    "QUOTES_CHANNEL",
    "BroadcastMessage",
    "ChannelHub",
    "ChannelSelector",
    "DeferredBroadcaster",
    "Insertion",
    "QuoteBroadcaster",
    "QuoteRenderer",
    "Subscription",
    "SubscriptionClosed",
    "quotes_channel",
]
