"""Collaborators the chat list view model talks to."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from chatlist.core.easing import Curve
from chatlist.domain.models import Item


class Renderer(Protocol):
    """Builds the visual representation of one row.

    ``position_hint`` is the logical index of the row, or ``None`` while the
    row is being removed.
    """

    def render(self, item: Item, position_hint: Optional[int]) -> Any: ...


class ScrollHost(Protocol):
    """The physical scroll container."""

    @property
    def has_clients(self) -> bool: ...

    def current_scroll_offset(self) -> float: ...

    def scroll_to(self, offset: float, duration_ms: int, curve: Curve) -> None: ...
