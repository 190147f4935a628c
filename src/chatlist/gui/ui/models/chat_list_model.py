"""Qt list model mirroring an :class:`AnimatedSequence`."""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from PySide6.QtCore import QAbstractListModel, QModelIndex, QObject, Qt

from chatlist.core.animated_sequence import AnimatedSequence, AnimationState, Slot
from chatlist.domain.models import DateHeader, MessageItem, Spacer

from .roles import Roles, role_names

_ANIMATION_ROLES = [Roles.STATE, Roles.PROGRESS, Roles.VISIBILITY, Roles.IS_EXITING]


def _kind_of(item: Any) -> str:
    if isinstance(item, MessageItem):
        return "message"
    if isinstance(item, DateHeader):
        return "date_header"
    if isinstance(item, Spacer):
        return "spacer"
    return type(item).__name__


def _display_text(item: Any) -> str:
    if isinstance(item, MessageItem):
        return item.message.text
    if isinstance(item, DateHeader):
        return item.text or item.date.date().isoformat()
    return ""


class ChatListModel(QAbstractListModel):
    """Expose animated chat rows to Qt views.

    Every physical slot, exiting ones included, is a row.  Structural changes
    of the sequence are forwarded as the matching ``begin*/end*`` calls so
    attached views keep their selection and scroll anchors.
    """

    def __init__(self, sequence: AnimatedSequence, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._sequence = sequence
        self._connections: List[Tuple[Any, Any]] = []
        self._connect(sequence.rows_about_to_be_inserted, self._on_rows_about_to_be_inserted)
        self._connect(sequence.rows_inserted, self._on_rows_inserted)
        self._connect(sequence.rows_about_to_be_removed, self._on_rows_about_to_be_removed)
        self._connect(sequence.rows_removed, self._on_rows_removed)
        self._connect(sequence.layout_about_to_change, self._on_layout_about_to_change)
        self._connect(sequence.layout_changed, self._on_layout_changed)
        self._connect(sequence.rows_changed, self._on_rows_changed)

    def sequence(self) -> AnimatedSequence:
        return self._sequence

    def detach(self) -> None:
        """Stop following the sequence."""
        for signal, handler in self._connections:
            signal.disconnect(handler)
        self._connections.clear()

    # ------------------------------------------------------------------
    # Qt model API
    # ------------------------------------------------------------------
    def roleNames(self) -> Dict[int, bytes]:  # type: ignore[override]
        return role_names(super().roleNames())

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:  # type: ignore[override]
        if parent.isValid():
            return 0
        return len(self._sequence)

    def data(self, index: QModelIndex, role: int = Qt.DisplayRole) -> Any:  # type: ignore[override]
        if not index.isValid() or not 0 <= index.row() < len(self._sequence):
            return None
        slot = self._sequence.slot_at(index.row())
        item = slot.item
        if role == Qt.DisplayRole:
            return _display_text(item)
        if role == Roles.KEY:
            return slot.key
        if role == Roles.ITEM:
            return item
        if role == Roles.KIND:
            return _kind_of(item)
        if role == Roles.STATE:
            return slot.state.value
        if role == Roles.PROGRESS:
            return slot.progress
        if role == Roles.VISIBILITY:
            return slot.visibility
        if role == Roles.POSITION_HINT:
            return self._sequence.logical_position(index.row())
        if role == Roles.IS_SPACER:
            return isinstance(item, Spacer)
        if role == Roles.IS_DATE_HEADER:
            return isinstance(item, DateHeader)
        if role == Roles.IS_EXITING:
            return slot.state is AnimationState.EXITING
        if role == Roles.MESSAGE_ID:
            return item.message.id if isinstance(item, MessageItem) else None
        if role == Roles.AUTHOR_ID:
            return item.message.author.id if isinstance(item, MessageItem) else None
        return None

    def slot_for_row(self, row: int) -> Slot:
        return self._sequence.slot_at(row)

    # ------------------------------------------------------------------
    # Sequence bridge
    # ------------------------------------------------------------------
    def _connect(self, signal: Any, handler: Any) -> None:
        signal.connect(handler)
        self._connections.append((signal, handler))

    def _on_rows_about_to_be_inserted(self, first: int, last: int) -> None:
        self.beginInsertRows(QModelIndex(), first, last)

    def _on_rows_inserted(self, first: int, last: int) -> None:
        self.endInsertRows()

    def _on_rows_about_to_be_removed(self, first: int, last: int) -> None:
        self.beginRemoveRows(QModelIndex(), first, last)

    def _on_rows_removed(self, first: int, last: int) -> None:
        self.endRemoveRows()

    def _on_layout_about_to_change(self) -> None:
        self.layoutAboutToBeChanged.emit()

    def _on_layout_changed(self) -> None:
        self.layoutChanged.emit()

    def _on_rows_changed(self, first: int, last: int) -> None:
        count = len(self._sequence)
        if count == 0:
            return
        first = max(0, first)
        last = min(count - 1, last)
        if first > last:
            return
        self.dataChanged.emit(
            self.index(first, 0),
            self.index(last, 0),
            [int(role) for role in (Qt.DisplayRole, Roles.ITEM, Roles.POSITION_HINT, *_ANIMATION_ROLES)],
        )
