"""Scroll host backed by a Qt scroll bar.

The chat list is reverse-chronological: offset ``0`` is the newest message,
which a Qt view shows at the bottom.  Offsets reported here therefore count
from the scroll bar's maximum.
"""

from __future__ import annotations

import logging

from PySide6.QtCore import QEasingCurve, QObject, QPropertyAnimation, Signal
from PySide6.QtWidgets import QScrollBar

from chatlist.core.easing import Curve
from chatlist.core.pagination import ScrollTelemetry

LOGGER = logging.getLogger(__name__)

_EASING = {
    Curve.LINEAR: QEasingCurve.Type.Linear,
    Curve.EASE_IN_QUAD: QEasingCurve.Type.InQuad,
    Curve.EASE_OUT_QUAD: QEasingCurve.Type.OutQuad,
    Curve.EASE_OUT_CUBIC: QEasingCurve.Type.OutCubic,
}


def easing_for(curve: Curve) -> QEasingCurve:
    return QEasingCurve(_EASING.get(curve, QEasingCurve.Type.Linear))


class QtScrollHost(QObject):
    """Expose a ``QScrollBar`` as the chat list scroll host."""

    scrolled = Signal(object)  # ScrollTelemetry

    def __init__(self, scroll_bar: QScrollBar, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._bar: QScrollBar | None = scroll_bar
        self._animation: QPropertyAnimation | None = None
        scroll_bar.valueChanged.connect(self._on_value_changed)

    @property
    def has_clients(self) -> bool:
        return self._bar is not None

    def current_scroll_offset(self) -> float:
        if self._bar is None:
            return 0.0
        return float(self._bar.maximum() - self._bar.value())

    def telemetry(self) -> ScrollTelemetry:
        if self._bar is None:
            return ScrollTelemetry(offset=0.0)
        return ScrollTelemetry(
            offset=self.current_scroll_offset(),
            extent=float(self._bar.pageStep()),
            max_extent=float(self._bar.maximum() - self._bar.minimum()),
        )

    def scroll_to(self, offset: float, duration_ms: int, curve: Curve) -> None:
        if self._bar is None:
            return
        target = int(round(self._bar.maximum() - offset))
        target = max(self._bar.minimum(), min(self._bar.maximum(), target))
        if self._animation is not None:
            self._animation.stop()
        if duration_ms <= 0:
            self._bar.setValue(target)
            return
        animation = QPropertyAnimation(self._bar, b"value", self)
        animation.setDuration(int(duration_ms))
        animation.setStartValue(self._bar.value())
        animation.setEndValue(target)
        animation.setEasingCurve(easing_for(curve))
        animation.start()
        self._animation = animation

    def is_animating(self) -> bool:
        return self._animation is not None and self._animation.state() == QPropertyAnimation.State.Running

    def detach(self) -> None:
        """Stop reporting; the host then has no clients."""
        if self._animation is not None:
            self._animation.stop()
            self._animation = None
        if self._bar is not None:
            try:
                self._bar.valueChanged.disconnect(self._on_value_changed)
            except (RuntimeError, TypeError):  # pragma: no cover - Qt disconnect noise
                pass
            self._bar = None

    def _on_value_changed(self, _value: int) -> None:
        self.scrolled.emit(self.telemetry())
