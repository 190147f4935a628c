"""Custom exception hierarchy for chatlist."""

from __future__ import annotations

from typing import Any


class ChatListError(Exception):
    """Base class for all custom errors raised by chatlist."""


# --- 3-layer hierarchy ---

class DomainError(ChatListError):
    """Base class for domain-level errors."""


class InfrastructureError(ChatListError):
    """Base class for infrastructure-level errors."""


class ApplicationError(ChatListError):
    """Base class for application-level errors."""


# --- Domain errors ---

class ItemDecodeError(DomainError):
    """Raised when a serialised item cannot be turned into a list item."""


# --- Application errors ---

class InvalidEditOpError(ApplicationError):
    """Raised when an edit operation does not fit the sequence it is applied to.

    ``op`` is the offending operation (``None`` when the script as a whole
    left the sequence out of step) and ``length`` the number of live
    (non-exiting) slots at the moment it was applied.
    """

    def __init__(self, op: Any, length: int, reason: str = "position out of range") -> None:
        prefix = f"{op!r}: " if op is not None else ""
        super().__init__(f"{prefix}{reason} (live length {length})")
        self.op = op
        self.length = length
        self.reason = reason


class InvalidThresholdError(ApplicationError, ValueError):
    """Raised when an end-reached threshold falls outside ``[0, 1]``."""


# --- Options errors ---

class OptionsError(ChatListError):
    """Base class for option file related failures."""


class OptionsLoadError(OptionsError):
    """Raised when the options file cannot be read or parsed."""


class OptionsValidationError(OptionsError):
    """Raised when options data fails schema validation."""
