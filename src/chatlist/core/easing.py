"""Easing curves applied to linear animation progress."""

from __future__ import annotations

import enum


def linear(t: float) -> float:
    return t


def ease_in_quad(t: float) -> float:
    """Quadratic easing function (ease-in)."""
    return t * t


def ease_out_quad(t: float) -> float:
    """Quadratic easing function (ease-out)."""
    return 1.0 - (1.0 - t) * (1.0 - t)


def ease_out_cubic(t: float) -> float:
    """Cubic easing function (ease-out)."""
    return 1.0 - (1.0 - t) ** 3


class Curve(str, enum.Enum):
    LINEAR = "linear"
    EASE_IN_QUAD = "easeInQuad"
    EASE_OUT_QUAD = "easeOutQuad"
    EASE_OUT_CUBIC = "easeOutCubic"

    def transform(self, t: float) -> float:
        t = max(0.0, min(1.0, t))
        return _CURVES[self](t)


_CURVES = {
    Curve.LINEAR: linear,
    Curve.EASE_IN_QUAD: ease_in_quad,
    Curve.EASE_OUT_QUAD: ease_out_quad,
    Curve.EASE_OUT_CUBIC: ease_out_cubic,
}
