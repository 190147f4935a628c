from .bus import EventBus, Subscription
from .domain_events import ChatListEvent
from .list_events import (
    AutoScrollRequestedEvent,
    ItemsReconciledEvent,
    PageLoadedEvent,
    PageRequestedEvent,
)

__all__ = [
    "AutoScrollRequestedEvent",
    "ChatListEvent",
    "EventBus",
    "ItemsReconciledEvent",
    "PageLoadedEvent",
    "PageRequestedEvent",
    "Subscription",
]
