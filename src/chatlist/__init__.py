"""Animated, paginated chat list engine."""

from .core.animated_sequence import AnimatedSequence, AnimationState, Slot
from .core.auto_scroll import AutoScrollAdvisor, ScrollRequest, should_auto_scroll
from .core.diff import Change, Insert, Move, Remove, diff
from .core.keying import key_of
from .core.pagination import PaginationController, PaginationState, ScrollTelemetry
from .domain.models import DateHeader, Message, MessageItem, Spacer, User

__version__ = "0.1.0"

__all__ = [
    "AnimatedSequence",
    "AnimationState",
    "AutoScrollAdvisor",
    "Change",
    "DateHeader",
    "Insert",
    "Message",
    "MessageItem",
    "Move",
    "PaginationController",
    "PaginationState",
    "Remove",
    "ScrollRequest",
    "ScrollTelemetry",
    "Slot",
    "Spacer",
    "User",
    "diff",
    "key_of",
    "should_auto_scroll",
]
