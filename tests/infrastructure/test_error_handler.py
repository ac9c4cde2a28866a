import logging
from unittest.mock import Mock

from listkit.errors import ApplicationError, FetchError, ListKitError
from listkit.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from listkit.events.bus import EventBus


def test_handle_error_logs_and_publishes():
    logger = Mock(spec=logging.Logger)
    event_bus = Mock(spec=EventBus)
    handler = ErrorHandler(logger, event_bus)

    error = FetchError("timeout")
    handler.handle(error, ErrorSeverity.WARNING, context={"list_id": "users"})

    logger.warning.assert_called()
    assert logger.warning.call_args.kwargs["extra"] == {"context": {"list_id": "users"}}
    event = event_bus.publish.call_args[0][0]
    assert isinstance(event, ErrorOccurredEvent)
    assert event.error is error
    assert event.severity is ErrorSeverity.WARNING
    assert event.context == {"list_id": "users"}


def test_ui_callback_only_for_serious_errors():
    handler = ErrorHandler(Mock(spec=logging.Logger), Mock(spec=EventBus))
    callback = Mock()
    handler.register_ui_callback(callback)

    handler.handle(RuntimeError("minor"), ErrorSeverity.WARNING)
    callback.assert_not_called()

    handler.handle(RuntimeError("major"), ErrorSeverity.CRITICAL)
    callback.assert_called_with("major", ErrorSeverity.CRITICAL)


def test_error_hierarchy():
    assert issubclass(FetchError, ApplicationError)
    assert issubclass(FetchError, ListKitError)
