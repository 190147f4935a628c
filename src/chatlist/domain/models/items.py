from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class User:
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None


@dataclass(frozen=True)
class Message:
    """Immutable snapshot of one chat message.

    Two snapshots with the same ``id`` describe the same logical message even
    when their text or status differ; value equality compares every field but ``metadata``.
    """

    id: str
    author: User
    text: str = ""
    created_at: Optional[datetime] = None
    status: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)


@dataclass(frozen=True)
class MessageItem:
    message: Message
    # Row id supplied by the message store; the list keys on ``message.id``.
    id: str = ""


@dataclass(frozen=True)
class DateHeader:
    date: datetime
    text: str = ""


@dataclass(frozen=True)
class Spacer:
    id: str
    height: float = 0.0


Item = Union[MessageItem, DateHeader, Spacer]

# ``str`` for messages and spacers, ``datetime`` for date headers.
ItemKey = Union[str, datetime]
