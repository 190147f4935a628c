"""
Qt frame clock driving the chat list animations.

The core engine never owns a timer; this clock measures wall time between
``QTimer`` timeouts and hands the elapsed milliseconds to every registered
``tick`` callback.  It stops itself once no callback reports more work.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from PySide6.QtCore import QObject, QTimer

from chatlist.config import FRAME_INTERVAL_MS

TickCallback = Callable[[float], bool]


class FrameClock(QObject):
    """Periodic tick source for :class:`~chatlist.gui.viewmodels.ChatListViewModel`."""

    def __init__(
        self,
        interval_ms: int = FRAME_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._callbacks: list[TickCallback] = []
        self._last_tick: float = 0.0

        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self._handle_timeout)

    def add(self, callback: TickCallback) -> None:
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def remove(self, callback: TickCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def is_running(self) -> bool:
        return self._timer.isActive()

    def start(self) -> None:
        """Start ticking; a running clock keeps its current time base."""
        if self._timer.isActive():
            return
        self._last_tick = time.monotonic()
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def advance(self, elapsed_ms: float) -> bool:
        """Deliver one tick of *elapsed_ms*; return whether any callback is busy."""
        busy = False
        for callback in list(self._callbacks):
            if callback(elapsed_ms):
                busy = True
        if not busy:
            self._timer.stop()
        return busy

    def _handle_timeout(self) -> None:
        now = time.monotonic()
        elapsed_ms = (now - self._last_tick) * 1000.0
        self._last_tick = now
        self.advance(elapsed_ms)
