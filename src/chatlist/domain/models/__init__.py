from .items import (
    DateHeader,
    Item,
    ItemKey,
    Message,
    MessageItem,
    Spacer,
    User,
)

__all__ = [
    "DateHeader",
    "Item",
    "ItemKey",
    "Message",
    "MessageItem",
    "Spacer",
    "User",
]
