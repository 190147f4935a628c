import logging
from unittest.mock import Mock

import pytest

from chatlist.core.diff import Remove
from chatlist.errors import (
    ApplicationError,
    ChatListError,
    InvalidEditOpError,
    InvalidThresholdError,
    OptionsLoadError,
    OptionsValidationError,
)
from chatlist.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from chatlist.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = ValueError("test error")
    handler.handle(error, ErrorSeverity.ERROR, context={"operation": "diff"})

    logger.error.assert_called()
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity == ErrorSeverity.ERROR
    assert event.context == {"operation": "diff"}


def test_warning_uses_warning_level():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))

    handler.handle(RuntimeError("slow"), ErrorSeverity.WARNING)

    logger.warning.assert_called()
    logger.error.assert_not_called()


def test_ui_callback():
    logger = Mock(spec=logging.Logger)
    handler = ErrorHandler(logger, Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("ui error"), ErrorSeverity.CRITICAL)

    callback.assert_called_with("ui error", ErrorSeverity.CRITICAL)


@pytest.mark.parametrize("severity", [ErrorSeverity.INFO, ErrorSeverity.WARNING])
def test_minor_severities_skip_ui(severity):
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(Exception("minor"), severity)

    callback.assert_not_called()


def test_published_event_reaches_real_bus():
    bus = EventBus()
    received = []
    bus.subscribe(ErrorOccurredEvent, received.append)

    ErrorHandler(logging.getLogger("test"), bus).handle(KeyError("k"))

    assert len(received) == 1
    assert received[0].source == "error_handler"


class TestHierarchy:
    def test_invalid_edit_op_message(self):
        op = Remove(3, 1)
        error = InvalidEditOpError(op, 1)

        assert isinstance(error, ApplicationError)
        assert str(error) == "Remove(position=3, count=1): position out of range (live length 1)"
        assert error.op is op
        assert error.reason == "position out of range"

    def test_invalid_edit_op_without_op(self):
        error = InvalidEditOpError(None, 2, "ops leave 2 live rows, expected 3")
        assert str(error) == "ops leave 2 live rows, expected 3 (live length 2)"

    def test_threshold_error_is_value_error(self):
        assert issubclass(InvalidThresholdError, ValueError)
        assert issubclass(InvalidThresholdError, ChatListError)

    def test_options_errors(self):
        assert issubclass(OptionsLoadError, ChatListError)
        assert issubclass(OptionsValidationError, ChatListError)
