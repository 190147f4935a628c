import logging
import threading
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Type

from .domain_events import ChatListEvent


@dataclass
class Subscription:
    """Handle returned by subscribe(); can be used to unsubscribe."""
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    event_type: Type = ChatListEvent
    handler: Callable = field(default=lambda e: None)
    active: bool = True

    def cancel(self):
        self.active = False


class EventBus:
    """Synchronous publish/subscribe hub.

    Handlers run on the publishing thread, in subscription order.  A handler
    registered for a base class also receives every subclass event.
    """

    def __init__(self, logger: logging.Logger = None):
        self._logger = logger or logging.getLogger(__name__)
        self._handlers: Dict[Type[ChatListEvent], List[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def subscribe(self, event_type: Type[ChatListEvent], handler: Callable) -> Subscription:
        sub = Subscription(event_type=event_type, handler=handler)
        with self._lock:
            self._handlers[event_type].append(sub)
        return sub

    def unsubscribe(self, subscription: Subscription):
        subscription.active = False
        with self._lock:
            for subs in self._handlers.values():
                try:
                    subs.remove(subscription)
                except ValueError:
                    pass

    def publish(self, event: ChatListEvent):
        event_type = type(event)

        with self._lock:
            subs: List[Subscription] = []
            for cls in event_type.__mro__:
                subs.extend(self._handlers.get(cls, ()))

        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as e:
                self._logger.error("Handler failed for %s: %s", event_type.__name__, e)

    def subscriber_count(self, event_type: Type[ChatListEvent]) -> int:
        with self._lock:
            return sum(1 for sub in self._handlers.get(event_type, ()) if sub.active)
