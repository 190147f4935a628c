"""Default configuration values for chatlist."""

from __future__ import annotations

from typing import Final

# Fraction of the scrollable extent that has to be consumed before the next
# page is requested.  0 loads as soon as scrolling starts, 1 only at the very
# end of the list.
DEFAULT_END_REACHED_THRESHOLD: Final[float] = 0.75

# Per-item enter/exit transitions.
ENTER_ANIMATION_MS: Final[int] = 100
EXIT_ANIMATION_MS: Final[int] = 300

# The loading indicator pops in immediately and collapses once the page
# has arrived.
LOADING_REVEAL_MS: Final[int] = 0
LOADING_HIDE_MS: Final[int] = 300

# Waiting before the auto-scroll lets layout settle after a new message was
# inserted at the start of the list.
AUTO_SCROLL_DELAY_MS: Final[int] = 100
AUTO_SCROLL_DURATION_MS: Final[int] = 200

# Index of the first real row; row 0 is always a structural spacer.
FIRST_CONTENT_INDEX: Final[int] = 1

FRAME_INTERVAL_MS: Final[int] = 16

KEYBOARD_DISMISS_BEHAVIORS: Final[tuple[str, ...]] = ("manual", "onDrag")
