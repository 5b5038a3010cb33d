"""Tests for the EventBus and ErrorHandler."""

import logging
import threading
from dataclasses import dataclass
from unittest.mock import Mock

from pageflow.errors.handler import ErrorHandler, ErrorOccurredEvent, ErrorSeverity
from pageflow.events.bus import Event, EventBus, Subscription


@dataclass(kw_only=True)
class _TestEvent(Event):
    value: int = 0


def test_subscribe_returns_subscription():
    bus = EventBus()
    sub = bus.subscribe(_TestEvent, lambda e: None)
    assert isinstance(sub, Subscription)
    assert bus.subscriber_count(_TestEvent) == 1


def test_unsubscribe_removes_handler():
    bus = EventBus()
    called = []
    sub = bus.subscribe(_TestEvent, lambda e: called.append(1))
    bus.unsubscribe(sub)
    bus.publish(_TestEvent(value=1))
    assert called == []
    assert bus.subscriber_count(_TestEvent) == 0


def test_cancelled_subscription_skipped():
    bus = EventBus()
    called = []
    sub = bus.subscribe(_TestEvent, lambda e: called.append(1))
    sub.cancel()
    bus.publish(_TestEvent(value=1))
    assert called == []


def test_failing_sync_handler_isolated():
    bus = EventBus()
    received = []

    def bad(event):
        raise RuntimeError("handler bug")

    bus.subscribe(_TestEvent, bad)
    bus.subscribe(_TestEvent, lambda e: received.append(e.value))
    bus.publish(_TestEvent(value=3))

    assert received == [3]


def test_publish_delivers_on_publishing_thread():
    bus = EventBus()
    threads = []
    bus.subscribe(_TestEvent, lambda e: threads.append(threading.get_ident()))
    bus.publish(_TestEvent(value=4))
    assert threads == [threading.get_ident()]


def test_handlers_only_receive_their_event_type():
    @dataclass(kw_only=True)
    class _OtherEvent(Event):
        pass

    bus = EventBus()
    received = []
    bus.subscribe(_TestEvent, received.append)
    bus.publish(_OtherEvent())
    assert received == []
    assert bus.subscriber_count(_OtherEvent) == 0


def test_error_handler_logs_publishes_and_notifies():
    logger = Mock(spec=logging.Logger)
    bus = EventBus()
    events = []
    bus.subscribe(ErrorOccurredEvent, events.append)
    handler = ErrorHandler(logger, bus)
    ui = Mock()
    handler.register_ui_callback(ui)
    error = RuntimeError("fetch failed")

    handler.handle(error, context={"page": 2})

    logger.error.assert_called_once()
    assert events[0].error is error
    assert events[0].context == {"page": 2}
    ui.assert_called_once_with("fetch failed", ErrorSeverity.ERROR)


def test_error_handler_callback_uses_warning_and_skips_ui():
    logger = Mock(spec=logging.Logger)
    bus = EventBus()
    handler = ErrorHandler(logger, bus)
    ui = Mock()
    handler.register_ui_callback(ui)

    on_error = handler.as_callback()
    on_error(ValueError("bad page"))

    logger.warning.assert_called_once()
    ui.assert_not_called()


def test_error_handler_as_loader_hook(make_list_source):
    from pageflow.core.loader import IncrementalLoadingCollection

    bus = EventBus()
    events = []
    bus.subscribe(ErrorOccurredEvent, events.append)
    handler = ErrorHandler(logging.getLogger("pageflow.test"), bus)
    loader = IncrementalLoadingCollection(
        make_list_source([], fail_on={0}),
        on_error=handler.as_callback(context={"view": "grid"}),
    )

    loader.load_more_items().result(timeout=5)

    assert len(events) == 1
    assert events[0].severity is ErrorSeverity.WARNING
    assert events[0].context == {"view": "grid"}


def test_error_handler_hook_not_called_for_cancelled_fetch(make_list_source):
    from pageflow.core.loader import IncrementalLoadingCollection
    from pageflow.errors import OperationCancelledError

    bus = EventBus()
    events = []
    bus.subscribe(ErrorOccurredEvent, events.append)
    handler = ErrorHandler(Mock(spec=logging.Logger), bus)
    loader = IncrementalLoadingCollection(
        make_list_source(["A"], fail_on={0}, error=OperationCancelledError("stop")),
        on_error=handler.as_callback(),
    )

    assert loader.load_more_items().result(timeout=5).count == 0
    assert events == []
