"""Options file management with validation and change notifications."""

from __future__ import annotations

import json
import logging
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

from jsonschema import ValidationError

from chatlist.core.signal import Signal
from chatlist.errors import OptionsLoadError, OptionsValidationError

from .schema import DEFAULT_OPTIONS, merge_with_defaults, validate_options

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatListOptions:
    """Typed, read-only view of a validated options document."""

    is_last_page: Optional[bool] = None
    on_end_reached_threshold: float = DEFAULT_OPTIONS["onEndReachedThreshold"]
    keyboard_dismiss_behavior: str = DEFAULT_OPTIONS["keyboardDismissBehavior"]
    scroll_physics: Optional[str] = None
    enter_ms: int = DEFAULT_OPTIONS["animation"]["enterMs"]
    exit_ms: int = DEFAULT_OPTIONS["animation"]["exitMs"]
    loading_reveal_ms: int = DEFAULT_OPTIONS["animation"]["loadingRevealMs"]
    loading_hide_ms: int = DEFAULT_OPTIONS["animation"]["loadingHideMs"]
    auto_scroll_enabled: bool = DEFAULT_OPTIONS["autoScroll"]["enabled"]
    auto_scroll_delay_ms: int = DEFAULT_OPTIONS["autoScroll"]["delayMs"]
    auto_scroll_duration_ms: int = DEFAULT_OPTIONS["autoScroll"]["durationMs"]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> "ChatListOptions":
        """Validate *data* (merged with defaults) and build the typed view."""

        try:
            merged = merge_with_defaults(dict(data) if data else None)
        except ValidationError as exc:
            raise OptionsValidationError(exc.message) from exc
        animation = merged["animation"]
        auto_scroll = merged["autoScroll"]
        return cls(
            is_last_page=merged["isLastPage"],
            on_end_reached_threshold=float(merged["onEndReachedThreshold"]),
            keyboard_dismiss_behavior=merged["keyboardDismissBehavior"],
            scroll_physics=merged["scrollPhysics"],
            enter_ms=animation["enterMs"],
            exit_ms=animation["exitMs"],
            loading_reveal_ms=animation["loadingRevealMs"],
            loading_hide_ms=animation["loadingHideMs"],
            auto_scroll_enabled=auto_scroll["enabled"],
            auto_scroll_delay_ms=auto_scroll["delayMs"],
            auto_scroll_duration_ms=auto_scroll["durationMs"],
        )


class OptionsManager:
    """Load, validate and persist chat list options."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_OPTIONS)
        self.changed = Signal("options_changed")

    @property
    def path(self) -> Path | None:
        return self._path

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the options JSON from disk; a missing file means defaults."""

        payload = None
        if self._path is not None and self._path.exists():
            try:
                payload = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, ValueError) as exc:
                raise OptionsLoadError(f"{self._path}: {exc}") from exc
            if not isinstance(payload, dict):
                raise OptionsLoadError(f"{self._path}: expected a JSON object")
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise OptionsValidationError(exc.message) from exc
        LOGGER.debug("Loaded chat list options from %s", self._path or "<defaults>")

    def save(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._data, indent=2, sort_keys=True), encoding="utf-8")

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------
    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target: Any = self._data
        for part in key.split("."):
            if not isinstance(target, dict) or part not in target:
                return default
            target = target[part]
        return target

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value*, validate, persist and notify."""

        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            validate_options(candidate)
        except ValidationError as exc:
            raise OptionsValidationError(f"{key}: {exc.message}") from exc
        self._data = candidate
        self.save()
        self.changed.emit(key, value)

    def options(self) -> ChatListOptions:
        return ChatListOptions.from_mapping(self._data)

    def as_dict(self) -> dict[str, Any]:
        return deepcopy(self._data)
