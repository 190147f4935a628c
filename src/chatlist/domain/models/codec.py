"""Convert list items to and from JSON-friendly dictionaries.

The shape mirrors what a message store would hand to the list::

    {"type": "message", "id": "m1", "author": {"id": "u1"}, "text": "hi"}
    {"type": "date_header", "date": "2024-05-01T00:00:00"}
    {"type": "spacer", "id": "top"}
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

from dateutil.parser import isoparse

from chatlist.errors import ItemDecodeError

from .items import DateHeader, Item, Message, MessageItem, Spacer, User


def _parse_datetime(value: Any, field_name: str) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    try:
        return isoparse(str(value))
    except (TypeError, ValueError) as exc:
        raise ItemDecodeError(f"invalid {field_name!r}: {value!r}") from exc


def _decode_user(raw: Any) -> User:
    if isinstance(raw, str):
        return User(id=raw)
    if not isinstance(raw, Mapping) or "id" not in raw:
        raise ItemDecodeError(f"message author must carry an id, got {raw!r}")
    return User(
        id=str(raw["id"]),
        first_name=raw.get("first_name"),
        last_name=raw.get("last_name"),
    )


def item_from_dict(raw: Mapping[str, Any]) -> Item:
    """Build a list item from *raw*, raising :class:`ItemDecodeError` on bad input."""

    if not isinstance(raw, Mapping):
        raise ItemDecodeError(f"item must be an object, got {type(raw).__name__}")
    kind = raw.get("type")
    if kind == "message":
        if "id" not in raw:
            raise ItemDecodeError("message item without id")
        message = Message(
            id=str(raw["id"]),
            author=_decode_user(raw.get("author")),
            text=str(raw.get("text", "")),
            created_at=_parse_datetime(raw.get("created_at"), "created_at"),
            status=raw.get("status"),
            metadata=dict(raw.get("metadata") or {}),
        )
        return MessageItem(message=message, id=str(raw.get("row_id", raw["id"])))
    if kind == "date_header":
        date = _parse_datetime(raw.get("date"), "date")
        if date is None:
            raise ItemDecodeError("date header without date")
        return DateHeader(date=date, text=str(raw.get("text", "")))
    if kind == "spacer":
        if "id" not in raw:
            raise ItemDecodeError("spacer item without id")
        return Spacer(id=str(raw["id"]), height=float(raw.get("height", 0.0)))
    raise ItemDecodeError(f"unknown item type {kind!r}")


def item_to_dict(item: Item) -> Dict[str, Any]:
    if isinstance(item, MessageItem):
        message = item.message
        payload: Dict[str, Any] = {
            "type": "message",
            "id": message.id,
            "author": {"id": message.author.id},
            "text": message.text,
        }
        if message.author.first_name is not None:
            payload["author"]["first_name"] = message.author.first_name
        if message.author.last_name is not None:
            payload["author"]["last_name"] = message.author.last_name
        if item.id and item.id != message.id:
            payload["row_id"] = item.id
        if message.created_at is not None:
            payload["created_at"] = message.created_at.isoformat()
        if message.status is not None:
            payload["status"] = message.status
        if message.metadata:
            payload["metadata"] = dict(message.metadata)
        return payload
    if isinstance(item, DateHeader):
        payload = {"type": "date_header", "date": item.date.isoformat()}
        if item.text:
            payload["text"] = item.text
        return payload
    if isinstance(item, Spacer):
        return {"type": "spacer", "id": item.id, "height": item.height}
    raise TypeError(f"unsupported list item type: {type(item).__name__}")


def items_from_list(raw_items: Iterable[Mapping[str, Any]]) -> List[Item]:
    return [item_from_dict(raw) for raw in raw_items]
