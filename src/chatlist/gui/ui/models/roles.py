"""Role definitions exposed by the chat list model."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict

from PySide6.QtCore import Qt


class Roles(IntEnum):
    """Custom roles exposed to QML or widgets."""

    KEY = Qt.UserRole + 1
    ITEM = Qt.UserRole + 2
    KIND = Qt.UserRole + 3
    STATE = Qt.UserRole + 4
    PROGRESS = Qt.UserRole + 5
    VISIBILITY = Qt.UserRole + 6
    POSITION_HINT = Qt.UserRole + 7
    IS_SPACER = Qt.UserRole + 8
    IS_DATE_HEADER = Qt.UserRole + 9
    IS_EXITING = Qt.UserRole + 10
    MESSAGE_ID = Qt.UserRole + 11
    AUTHOR_ID = Qt.UserRole + 12


def role_names(base: Dict[int, bytes] | None = None) -> Dict[int, bytes]:
    """Return a mapping of Qt role numbers to byte names."""

    mapping: Dict[int, bytes] = {} if base is None else dict(base)
    mapping.update(
        {
            Roles.KEY: b"key",
            Roles.ITEM: b"item",
            Roles.KIND: b"kind",
            Roles.STATE: b"state",
            Roles.PROGRESS: b"progress",
            Roles.VISIBILITY: b"visibility",
            Roles.POSITION_HINT: b"positionHint",
            Roles.IS_SPACER: b"isSpacer",
            Roles.IS_DATE_HEADER: b"isDateHeader",
            Roles.IS_EXITING: b"isExiting",
            Roles.MESSAGE_ID: b"messageId",
            Roles.AUTHOR_ID: b"authorId",
        }
    )
    return mapping
