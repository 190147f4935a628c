"""Pure Python ChatListViewModel (MVVM): no Qt dependency.

Owns the reconciliation pipeline of one chat list: every new snapshot of
items is diffed against the previous one, the edit script drives the
animated slot collection, and the same pair of snapshots decides whether the
list should scroll back to the newest message.  Scroll telemetry feeds the
pagination controller.  Nothing here owns a timer; the host calls
:meth:`ChatListViewModel.tick` from its frame clock.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from chatlist.core.animated_sequence import AnimatedSequence, Slot
from chatlist.core.auto_scroll import AutoScrollAdvisor, ScrollRequest
from chatlist.core.diff import EditOp, diff
from chatlist.core.pagination import PageFetcher, PaginationController, ScrollTelemetry
from chatlist.core.signal import ObservableProperty, Signal
from chatlist.domain.models import Item, ItemKey
from chatlist.errors.handler import ErrorHandler, ErrorSeverity
from chatlist.events.bus import EventBus
from chatlist.events.list_events import (
    AutoScrollRequestedEvent,
    ItemsReconciledEvent,
    PageLoadedEvent,
    PageRequestedEvent,
)
from chatlist.settings.manager import ChatListOptions

from .base import BaseViewModel
from .protocols import Renderer, ScrollHost

_SOURCE = "chat_list"


@dataclass(frozen=True)
class RenderedRow:
    slot: Slot
    position_hint: Optional[int]
    renderable: Any


def _same_content(a: Item, b: Item) -> bool:
    return a == b


class ChatListViewModel(BaseViewModel):
    """Chat list ViewModel: pure Python, no Qt dependency."""

    def __init__(
        self,
        renderer: Renderer,
        *,
        local_user_id: str,
        items: Sequence[Item] = (),
        scroll_host: Optional[ScrollHost] = None,
        fetch_next_page: Optional[PageFetcher] = None,
        options: Optional[ChatListOptions] = None,
        event_bus: Optional[EventBus] = None,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        super().__init__()
        self._logger = logging.getLogger(__name__)
        self._renderer = renderer
        self._scroll_host = scroll_host
        self._options = options or ChatListOptions()
        self._event_bus = event_bus or EventBus()
        self._error_handler = error_handler or ErrorHandler(self._logger, self._event_bus)

        opts = self._options
        self.sequence = AnimatedSequence(
            items,
            enter_duration_ms=opts.enter_ms,
            exit_duration_ms=opts.exit_ms,
        )
        self.pagination = PaginationController(
            fetch_next_page,
            threshold=opts.on_end_reached_threshold,
            is_last_page=opts.is_last_page,
            reveal_ms=opts.loading_reveal_ms,
            hide_ms=opts.loading_hide_ms,
        )
        self.advisor = AutoScrollAdvisor(
            local_user_id,
            delay_ms=opts.auto_scroll_delay_ms,
            duration_ms=opts.auto_scroll_duration_ms,
        )

        # Observable properties
        self.items = ObservableProperty(list(items))
        self.is_loading = ObservableProperty(False)

        # Signals
        self.reconciled = Signal("reconciled")  # emits (ops,)
        self.scroll_requested = Signal("scroll_requested")  # emits (ScrollRequest,)

        self._pending_scroll: Optional[ScrollRequest] = None
        self._pending_scroll_remaining = 0.0
        self._render_cache: Dict[ItemKey, Tuple[Item, Optional[int], Any]] = {}
        self._last_fetch_error: Optional[BaseException] = None

        self.connect_signal(self.pagination.loading_changed, self._on_loading_changed)
        self.connect_signal(self.pagination.fetch_started, self._on_fetch_started)
        self.connect_signal(self.pagination.fetch_failed, self._on_fetch_failed)
        self.connect_signal(self.sequence.slot_exited, self._on_slot_exited)

    # -- properties --------------------------------------------------------

    @property
    def options(self) -> ChatListOptions:
        return self._options

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def pending_scroll(self) -> Optional[ScrollRequest]:
        return self._pending_scroll

    @property
    def is_last_page(self) -> bool:
        return self.pagination.is_last_page

    @is_last_page.setter
    def is_last_page(self, value: Optional[bool]) -> None:
        self.pagination.is_last_page = value

    # -- public API --------------------------------------------------------

    def set_items(self, new_items: Sequence[Item]) -> List[EditOp]:
        """Reconcile the list with a fresh snapshot and return the applied ops."""
        if self._disposed:
            self._logger.debug("set_items after dispose ignored")
            return []
        old_items = list(self.items.value)
        new_items = list(new_items)

        ops = diff(old_items, new_items, content_equals=_same_content)
        self.sequence.apply_ops(ops, old_items, new_items)
        self.items.value = new_items

        self._event_bus.publish(
            ItemsReconciledEvent(
                source=_SOURCE,
                ops=tuple(ops),
                old_count=len(old_items),
                new_count=len(new_items),
            )
        )
        self.reconciled.emit(ops)

        if self._options.auto_scroll_enabled:
            request = self.advisor.advise(old_items, new_items)
            if request is not None:
                self._schedule_scroll(request)
        return ops

    def on_scroll(self, telemetry: ScrollTelemetry) -> bool:
        """Forward one scroll event to pagination; ``True`` if a page was requested."""
        if self._disposed:
            return False
        return self.pagination.on_scroll(telemetry, len(self.items.value))

    def tick(self, elapsed_ms: float) -> bool:
        """Advance animations and pending scrolls; return whether more frames are needed."""
        if self._disposed:
            return False
        animating = self.sequence.tick(elapsed_ms)
        indicator = self.pagination.tick(elapsed_ms)
        if self._pending_scroll is not None:
            self._pending_scroll_remaining -= elapsed_ms
            if self._pending_scroll_remaining <= 0:
                self._perform_scroll()
        return animating or indicator or self._pending_scroll is not None

    def build_frame(self) -> List[RenderedRow]:
        """Render every visible row, reusing renderables of unchanged rows."""
        rows: List[RenderedRow] = []
        logical = 0
        for slot in self.sequence.visible:
            hint: Optional[int] = None
            if slot.is_live:
                hint = logical
                logical += 1
            rows.append(RenderedRow(slot, hint, self._render(slot, hint)))
        return rows

    def find_index_for_key(self, key: ItemKey) -> Optional[int]:
        return self.sequence.find_index_for_key(key)

    def dispose(self) -> None:
        if self._disposed:
            return
        super().dispose()
        self.pagination.dispose()
        self.sequence.complete_all()
        self._pending_scroll = None
        self._render_cache.clear()
        self.reconciled.disconnect_all()
        self.scroll_requested.disconnect_all()

    # -- internal ----------------------------------------------------------

    def _render(self, slot: Slot, hint: Optional[int]) -> Any:
        cached = self._render_cache.get(slot.key)
        if cached is not None and cached[0] is slot.item and cached[1] == hint:
            return cached[2]
        renderable = self._renderer.render(slot.item, hint)
        # Only live rows are cached; a key may briefly have an exiting twin.
        if hint is not None:
            self._render_cache[slot.key] = (slot.item, hint, renderable)
        return renderable

    def _schedule_scroll(self, request: ScrollRequest) -> None:
        self._pending_scroll = request
        self._pending_scroll_remaining = float(request.delay_ms)
        self._event_bus.publish(
            AutoScrollRequestedEvent(
                source=_SOURCE,
                offset=request.offset,
                duration_ms=request.duration_ms,
                delay_ms=request.delay_ms,
            )
        )
        self.scroll_requested.emit(request)

    def _perform_scroll(self) -> None:
        request = self._pending_scroll
        self._pending_scroll = None
        if request is None or self._scroll_host is None:
            return
        if not self._scroll_host.has_clients:
            self._logger.debug("Scroll host has no clients, skipping auto-scroll")
            return
        self._scroll_host.scroll_to(request.offset, request.duration_ms, request.curve)

    def _on_loading_changed(self, loading: bool) -> None:
        self.is_loading.value = loading
        if not loading:
            error, self._last_fetch_error = self._last_fetch_error, None
            self._event_bus.publish(PageLoadedEvent(source=_SOURCE, failed=error is not None, error=error))

    def _on_fetch_started(self, telemetry: ScrollTelemetry) -> None:
        self._event_bus.publish(
            PageRequestedEvent(
                source=_SOURCE,
                item_count=len(self.items.value),
                offset=telemetry.offset,
                max_extent=telemetry.max_extent,
            )
        )

    def _on_fetch_failed(self, error: BaseException) -> None:
        self._error_handler.handle(
            error,
            severity=ErrorSeverity.WARNING,
            context={"operation": "fetch_next_page"},
        )
        self._last_fetch_error = error

    def _on_slot_exited(self, slot: Slot) -> None:
        if self.sequence.find_index_for_key(slot.key) is None:
            self._render_cache.pop(slot.key, None)
