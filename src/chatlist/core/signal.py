"""Pure Python signal system: no Qt dependency.

The core engine reports slot and pagination changes through ``Signal``;
view models expose state through ``ObservableProperty``.  Qt adapters bridge
both to Qt signals and model notifications.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Any, Callable, Iterator

_logger = logging.getLogger(__name__)


class Signal:
    """Ordered list of callbacks invoked by :meth:`emit`.

    Handler mutations and the handler snapshot taken by ``emit`` are guarded by
    a lock, so connecting from inside a handler is safe.  A failing handler is
    logged and the remaining handlers still run.
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()
        self._blocked = False

    def connect(self, handler: Callable) -> Callable:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)
        return handler

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def disconnect_all(self) -> None:
        with self._lock:
            self._handlers.clear()

    def emit(self, *args: Any, **kwargs: Any) -> None:
        if self._blocked:
            return
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception as exc:
                _logger.error("Signal %s handler %r failed: %s", self._name or "<anonymous>", handler, exc)

    @contextmanager
    def blocked(self) -> Iterator[None]:
        """Suppress emissions for the duration of the ``with`` block."""
        previous = self._blocked
        self._blocked = True
        try:
            yield
        finally:
            self._blocked = previous

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty:
    """Value holder that emits ``changed(new_value, old_value)`` on change."""

    def __init__(self, initial_value: Any = None) -> None:
        self._value = initial_value
        self.changed = Signal("changed")

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        if self._value != new_value:
            old_value = self._value
            self._value = new_value
            self.changed.emit(new_value, old_value)
