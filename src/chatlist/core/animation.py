"""
Timed transitions advanced by an external clock.

An :class:`Animation` owns no timer.  Whoever drives the frame loop calls
:meth:`Animation.advance` with the elapsed milliseconds; the animation only
tracks progress and reports when it has finished.
"""

from __future__ import annotations

from .easing import Curve


class Animation:
    """Linear progress from ``0.0`` to ``1.0`` over ``duration_ms``."""

    def __init__(self, duration_ms: float, curve: Curve = Curve.LINEAR, progress: float = 0.0) -> None:
        self.duration_ms = max(0.0, float(duration_ms))
        self.curve = curve
        self._progress = max(0.0, min(1.0, float(progress)))
        self._completed = self._progress >= 1.0

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def value(self) -> float:
        """Progress mapped through the curve."""
        return self.curve.transform(self._progress)

    @property
    def is_completed(self) -> bool:
        return self._completed

    def advance(self, elapsed_ms: float) -> bool:
        """Move forward by *elapsed_ms*; return ``True`` on the tick that completes."""
        if self._completed:
            return False
        if self.duration_ms <= 0.0:
            self._progress = 1.0
        else:
            self._progress = min(1.0, self._progress + max(0.0, elapsed_ms) / self.duration_ms)
        if self._progress >= 1.0:
            self._completed = True
            return True
        return False

    def complete(self) -> bool:
        """Snap to the end; return ``True`` if the animation was still running."""
        if self._completed:
            return False
        self._progress = 1.0
        self._completed = True
        return True

    def __repr__(self) -> str:
        return f"Animation(duration_ms={self.duration_ms:g}, progress={self._progress:.3f}, curve={self.curve.value})"
