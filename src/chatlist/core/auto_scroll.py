"""Decide when a list update should bring the newest row into view."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from chatlist.config import AUTO_SCROLL_DELAY_MS, AUTO_SCROLL_DURATION_MS, FIRST_CONTENT_INDEX
from chatlist.domain.models import Item, MessageItem

from .easing import Curve

LOGGER = logging.getLogger(__name__)


def should_auto_scroll(old: Sequence[Item], new: Sequence[Item], local_user_id: str) -> bool:
    """Return ``True`` when the local user just sent the newest message.

    The list is reverse-chronological with a structural spacer at index 0, so
    the newest message sits at index 1.  The heuristic fires when that row
    holds a different message than before and the local user wrote it.
    Lists shorter than two rows are a normal state and simply return
    ``False``.
    """
    if len(old) <= FIRST_CONTENT_INDEX or len(new) <= FIRST_CONTENT_INDEX:
        return False
    old_item = old[FIRST_CONTENT_INDEX]
    item = new[FIRST_CONTENT_INDEX]
    if not isinstance(old_item, MessageItem) or not isinstance(item, MessageItem):
        return False
    # Value comparison: only a new or edited message at the top counts.
    if old_item.message == item.message:
        return False
    return item.message.author.id == local_user_id


@dataclass(frozen=True)
class ScrollRequest:
    """Ask the scroll host to animate to *offset* once *delay_ms* has passed."""

    offset: float = 0.0
    duration_ms: int = AUTO_SCROLL_DURATION_MS
    curve: Curve = Curve.EASE_IN_QUAD
    delay_ms: int = AUTO_SCROLL_DELAY_MS


class AutoScrollAdvisor:
    def __init__(
        self,
        local_user_id: str,
        *,
        delay_ms: int = AUTO_SCROLL_DELAY_MS,
        duration_ms: int = AUTO_SCROLL_DURATION_MS,
        curve: Curve = Curve.EASE_IN_QUAD,
    ) -> None:
        self.local_user_id = local_user_id
        self.delay_ms = delay_ms
        self.duration_ms = duration_ms
        self.curve = curve

    def advise(self, old: Sequence[Item], new: Sequence[Item]) -> Optional[ScrollRequest]:
        if not should_auto_scroll(old, new, self.local_user_id):
            return None
        LOGGER.debug("Local user sent a message, requesting scroll to start")
        return ScrollRequest(
            offset=0.0,
            duration_ms=self.duration_ms,
            curve=self.curve,
            delay_ms=self.delay_ms,
        )
