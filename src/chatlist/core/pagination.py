"""Scroll-driven "load more" trigger with a single request in flight."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Optional

from chatlist.config import DEFAULT_END_REACHED_THRESHOLD, LOADING_HIDE_MS, LOADING_REVEAL_MS
from chatlist.errors import InvalidThresholdError

from .animation import Animation
from .easing import Curve
from .signal import Signal

LOGGER = logging.getLogger(__name__)

# Zero-argument callable starting the next page load.  It may return a
# ``concurrent.futures.Future``, an asyncio future/awaitable, or ``None`` when
# the load already finished.
PageFetcher = Callable[[], Any]


@dataclass(frozen=True)
class ScrollTelemetry:
    """One scroll event as reported by the scroll host."""

    offset: float
    extent: float = 0.0
    max_extent: float = 0.0


@dataclass(frozen=True)
class PaginationState:
    is_loading: bool = False
    last_page: bool = False


def validate_threshold(value: float) -> float:
    threshold = float(value)
    if not 0.0 <= threshold <= 1.0:
        raise InvalidThresholdError(f"end-reached threshold must be within [0, 1], got {value!r}")
    return threshold


class PaginationController:
    """Request the next page when the user scrolls far enough.

    At most one fetch is in flight: while :attr:`state` reports
    ``is_loading`` every further threshold crossing is ignored.  Completion,
    successful or not, clears the flag and collapses the loading indicator.
    """

    def __init__(
        self,
        fetch_next_page: Optional[PageFetcher] = None,
        *,
        threshold: float = DEFAULT_END_REACHED_THRESHOLD,
        is_last_page: Optional[bool] = None,
        reveal_ms: float = LOADING_REVEAL_MS,
        hide_ms: float = LOADING_HIDE_MS,
        indicator_curve: Curve = Curve.EASE_OUT_QUAD,
    ) -> None:
        self._fetch_next_page = fetch_next_page
        self._threshold = validate_threshold(threshold)
        self._state = PaginationState(last_page=bool(is_last_page))
        self._reveal_ms = reveal_ms
        self._hide_ms = hide_ms
        self._indicator_curve = indicator_curve
        self._indicator = Animation(0.0, indicator_curve, progress=1.0)
        self._indicator_shown = False
        self._disposed = False
        self._lock = threading.Lock()

        self.loading_changed = Signal("loading_changed")
        self.fetch_started = Signal("fetch_started")
        self.fetch_failed = Signal("fetch_failed")

    # -- properties --------------------------------------------------------

    @property
    def state(self) -> PaginationState:
        return self._state

    @property
    def is_loading(self) -> bool:
        return self._state.is_loading

    @property
    def threshold(self) -> float:
        return self._threshold

    @threshold.setter
    def threshold(self, value: float) -> None:
        self._threshold = validate_threshold(value)

    @property
    def is_last_page(self) -> bool:
        return self._state.last_page

    @is_last_page.setter
    def is_last_page(self, value: Optional[bool]) -> None:
        self._state = replace(self._state, last_page=bool(value))

    @property
    def indicator_value(self) -> float:
        """Size factor of the loading indicator, ``0`` hidden and ``1`` shown."""
        value = self._indicator.value
        return value if self._indicator_shown else 1.0 - value

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    # -- public API --------------------------------------------------------

    def should_fetch(
        self,
        telemetry: ScrollTelemetry,
        item_count: int,
        threshold_fraction: Optional[float] = None,
        is_last_page: Optional[bool] = None,
    ) -> bool:
        """Return whether *telemetry* would start a fetch right now."""
        threshold = self._threshold if threshold_fraction is None else validate_threshold(threshold_fraction)
        last_page = self._state.last_page if is_last_page is None else is_last_page
        if self._disposed or self._fetch_next_page is None or last_page is True:
            return False
        if telemetry.offset < telemetry.max_extent * threshold:
            return False
        return item_count > 0 and not self._state.is_loading

    def on_scroll(
        self,
        telemetry: ScrollTelemetry,
        item_count: int,
        threshold_fraction: Optional[float] = None,
        is_last_page: Optional[bool] = None,
    ) -> bool:
        """Evaluate one scroll event; return ``True`` if a fetch was started."""
        with self._lock:
            if not self.should_fetch(telemetry, item_count, threshold_fraction, is_last_page):
                return False
            self._state = replace(self._state, is_loading=True)

        LOGGER.info(
            "End reached at %.1f/%.1f with %d items, requesting next page",
            telemetry.offset,
            telemetry.max_extent,
            item_count,
        )
        self._start_indicator(shown=True, duration_ms=self._reveal_ms)
        self.loading_changed.emit(True)
        self.fetch_started.emit(telemetry)

        try:
            pending = self._fetch_next_page()
        except Exception as exc:
            self._complete(exc)
            return True

        if pending is None:
            self._complete(None)
        elif hasattr(pending, "add_done_callback"):
            pending.add_done_callback(self._on_fetch_done)
        elif inspect.isawaitable(pending):
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                if inspect.iscoroutine(pending):
                    pending.close()
                self._complete(RuntimeError("awaitable page fetch needs a running event loop"))
                return True
            asyncio.ensure_future(pending, loop=loop).add_done_callback(self._on_fetch_done)
        else:
            self._complete(None)
        return True

    def tick(self, elapsed_ms: float) -> bool:
        """Advance the loading indicator; return whether it is still animating."""
        self._indicator.advance(elapsed_ms)
        return not self._indicator.is_completed

    def dispose(self) -> None:
        """Detach from the host; late fetch completions are ignored."""
        self._disposed = True
        self._indicator.complete()
        for signal in (self.loading_changed, self.fetch_started, self.fetch_failed):
            signal.disconnect_all()

    # -- internal ----------------------------------------------------------

    def _start_indicator(self, *, shown: bool, duration_ms: float) -> None:
        # Start from the current size so a quick show/hide does not jump.
        current = self.indicator_value
        start = current if shown else 1.0 - current
        self._indicator = Animation(duration_ms, self._indicator_curve, progress=start)
        self._indicator_shown = shown
        if duration_ms <= 0:
            self._indicator.complete()

    def _on_fetch_done(self, future: Any) -> None:
        error: Optional[BaseException] = None
        if future.cancelled():
            LOGGER.debug("Page fetch was cancelled")
        else:
            error = future.exception()
        self._complete(error)

    def _complete(self, error: Optional[BaseException]) -> None:
        if self._disposed:
            LOGGER.debug("Ignoring page fetch completion after dispose")
            return
        with self._lock:
            self._state = replace(self._state, is_loading=False)
        if error is not None:
            LOGGER.warning("Next page fetch failed: %s", error)
            self.fetch_failed.emit(error)
        else:
            LOGGER.info("Next page fetch completed")
        self._start_indicator(shown=False, duration_ms=self._hide_ms)
        self.loading_changed.emit(False)
