"""Schema helpers for the chat list options document."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from chatlist.config import (
    AUTO_SCROLL_DELAY_MS,
    AUTO_SCROLL_DURATION_MS,
    DEFAULT_END_REACHED_THRESHOLD,
    ENTER_ANIMATION_MS,
    EXIT_ANIMATION_MS,
    KEYBOARD_DISMISS_BEHAVIORS,
    LOADING_HIDE_MS,
    LOADING_REVEAL_MS,
)

_DURATION = {"type": "integer", "minimum": 0}

OPTIONS_SCHEMA: dict[str, Any] = {
    "$id": "chatlist/options.schema.json",
    "type": "object",
    "required": ["schema"],
    "properties": {
        "schema": {"const": "chatlist/options@1"},
        "isLastPage": {"type": ["boolean", "null"]},
        "onEndReachedThreshold": {"type": "number", "minimum": 0, "maximum": 1},
        "keyboardDismissBehavior": {
            "type": "string",
            "enum": list(KEYBOARD_DISMISS_BEHAVIORS),
        },
        # Passed through to the scroll view untouched.
        "scrollPhysics": {"type": ["string", "null"]},
        "animation": {
            "type": "object",
            "properties": {
                "enterMs": _DURATION,
                "exitMs": _DURATION,
                "loadingRevealMs": _DURATION,
                "loadingHideMs": _DURATION,
            },
            "additionalProperties": False,
        },
        "autoScroll": {
            "type": "object",
            "properties": {
                "enabled": {"type": "boolean"},
                "delayMs": _DURATION,
                "durationMs": _DURATION,
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": True,
}

DEFAULT_OPTIONS: dict[str, Any] = {
    "schema": "chatlist/options@1",
    "isLastPage": None,
    "onEndReachedThreshold": DEFAULT_END_REACHED_THRESHOLD,
    "keyboardDismissBehavior": "manual",
    "scrollPhysics": None,
    "animation": {
        "enterMs": ENTER_ANIMATION_MS,
        "exitMs": EXIT_ANIMATION_MS,
        "loadingRevealMs": LOADING_REVEAL_MS,
        "loadingHideMs": LOADING_HIDE_MS,
    },
    "autoScroll": {
        "enabled": True,
        "delayMs": AUTO_SCROLL_DELAY_MS,
        "durationMs": AUTO_SCROLL_DURATION_MS,
    },
}

_NESTED_SECTIONS = ("animation", "autoScroll")

_validator = Draft202012Validator(OPTIONS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_OPTIONS` and validate the result."""

    merged = deepcopy(DEFAULT_OPTIONS)
    if data:
        for key, value in data.items():
            if key in _NESTED_SECTIONS and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_options(data: dict[str, Any]) -> None:
    """Validate *data* against the options schema."""

    _validator.validate(data)


def iter_validation_errors(data: Any) -> list[str]:
    """Return human readable messages for every schema violation in *data*."""

    messages = []
    for error in sorted(_validator.iter_errors(data), key=lambda e: list(e.path)):
        location = ".".join(str(part) for part in error.path) or "<root>"
        messages.append(f"{location}: {error.message}")
    return messages


__all__ = [
    "DEFAULT_OPTIONS",
    "OPTIONS_SCHEMA",
    "iter_validation_errors",
    "merge_with_defaults",
    "validate_options",
]
