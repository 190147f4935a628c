"""Tests for the pure Python Signal and ObservableProperty classes.

These tests run without Qt.
"""

import logging

import pytest

from chatlist.core.signal import ObservableProperty, Signal


class TestSignal:
    def test_connect_and_emit(self):
        sig = Signal()
        received = []
        sig.connect(received.append)

        sig.emit(42)

        assert received == [42]

    def test_connect_returns_handler_and_ignores_duplicates(self):
        sig = Signal()
        received = []
        handler = sig.connect(received.append)
        sig.connect(handler)

        sig.emit("x")

        assert received == ["x"]
        assert sig.handler_count == 1

    def test_disconnect(self):
        sig = Signal()
        received = []
        handler = received.append
        sig.connect(handler)
        sig.emit(1)
        sig.disconnect(handler)
        sig.emit(2)

        assert received == [1]

    def test_disconnect_missing_raises(self):
        sig = Signal()
        with pytest.raises(ValueError):
            sig.disconnect(lambda: None)

    def test_disconnect_all(self):
        sig = Signal()
        sig.connect(lambda: None)
        sig.connect(lambda: None)
        sig.disconnect_all()
        assert sig.handler_count == 0

    def test_failing_handler_does_not_stop_others(self, caplog):
        sig = Signal("rows_changed")
        received = []

        def broken(_value):
            raise RuntimeError("broken handler")

        sig.connect(broken)
        sig.connect(received.append)

        with caplog.at_level(logging.ERROR):
            sig.emit(7)

        assert received == [7]
        assert "rows_changed" in caplog.text

    def test_blocked(self):
        sig = Signal()
        received = []
        sig.connect(received.append)

        with sig.blocked():
            sig.emit(1)
        sig.emit(2)

        assert received == [2]

    def test_handler_may_connect_during_emit(self):
        sig = Signal()
        late = []

        def first(value):
            sig.connect(late.append)

        sig.connect(first)
        sig.emit(1)
        sig.emit(2)

        assert late == [2]


class TestObservableProperty:
    def test_initial_value(self):
        prop = ObservableProperty(10)
        assert prop.value == 10

    def test_change_emits_new_and_old(self):
        prop = ObservableProperty(False)
        changes = []
        prop.changed.connect(lambda new, old: changes.append((new, old)))

        prop.value = True
        prop.value = True

        assert changes == [(True, False)]
