"""Stable identities for list items."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from chatlist.domain.models import DateHeader, Item, ItemKey, MessageItem, Spacer

SPACER_KEY_PREFIX = "spacer:"


def key_of(item: Item) -> ItemKey:
    """Return the identity of *item*.

    Messages are keyed by message id, spacers by a prefixed id so they never
    collide with a message, and date headers by their date.
    """
    if isinstance(item, MessageItem):
        return item.message.id
    if isinstance(item, Spacer):
        return SPACER_KEY_PREFIX + item.id
    if isinstance(item, DateHeader):
        return item.date
    raise TypeError(f"unsupported list item type: {type(item).__name__}")


def keys_equal(a: Item, b: Item) -> bool:
    # Compare types first: a date header and a message can never be the same
    # entity, and a ``datetime`` never equals a ``str`` anyway.
    return type(a) is type(b) and key_of(a) == key_of(b)


class KeyIndex:
    """Key to position lookup over one item sequence.

    When keys repeat (a caller contract violation) the first occurrence wins.
    """

    def __init__(self, items: Iterable[Item]) -> None:
        self._positions: Dict[ItemKey, int] = {}
        count = 0
        for index, item in enumerate(items):
            self._positions.setdefault(key_of(item), index)
            count = index + 1
        self._count = count
        self.has_duplicates = len(self._positions) != count

    def __len__(self) -> int:
        return self._count

    def __contains__(self, key: object) -> bool:
        return key in self._positions

    def index_of(self, key: ItemKey) -> Optional[int]:
        return self._positions.get(key)
