from dataclasses import dataclass, field
from typing import Any, Optional, Tuple

from .domain_events import ChatListEvent


@dataclass(frozen=True)
class ItemsReconciledEvent(ChatListEvent):
    ops: Tuple[Any, ...] = field(default_factory=tuple)
    old_count: int = 0
    new_count: int = 0


@dataclass(frozen=True)
class PageRequestedEvent(ChatListEvent):
    item_count: int = 0
    offset: float = 0.0
    max_extent: float = 0.0


@dataclass(frozen=True)
class PageLoadedEvent(ChatListEvent):
    failed: bool = False
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class AutoScrollRequestedEvent(ChatListEvent):
    offset: float = 0.0
    duration_ms: int = 0
    delay_ms: int = 0
