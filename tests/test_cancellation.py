"""Tests for CancellationTokenSource / CancellationToken."""

import threading

import pytest

from pageflow.core.cancellation import CancellationToken, CancellationTokenSource
from pageflow.errors import LoadError, OperationCancelledError


def test_token_reflects_source():
    cts = CancellationTokenSource()
    token = cts.token

    assert token.is_cancellation_requested is False
    assert token.can_be_cancelled is True

    cts.cancel()

    assert token.is_cancellation_requested is True
    assert cts.is_cancellation_requested is True


def test_none_token_never_cancels():
    token = CancellationToken.none()

    assert token.can_be_cancelled is False
    assert token.is_cancellation_requested is False
    assert token.wait(0) is False
    token.raise_if_cancelled()


def test_raise_if_cancelled():
    cts = CancellationTokenSource()
    cts.token.raise_if_cancelled()
    cts.cancel()

    with pytest.raises(OperationCancelledError):
        cts.token.raise_if_cancelled()
    assert issubclass(OperationCancelledError, LoadError)


def test_callbacks_run_once_on_cancel():
    cts = CancellationTokenSource()
    calls = []
    cts.token.register(lambda: calls.append("cancelled"))

    cts.cancel()
    cts.cancel()

    assert calls == ["cancelled"]


def test_register_after_cancel_runs_immediately():
    cts = CancellationTokenSource()
    cts.cancel()
    calls = []

    cts.token.register(lambda: calls.append(1))

    assert calls == [1]


def test_failing_callback_does_not_block_others():
    cts = CancellationTokenSource()
    calls = []

    def bad():
        raise RuntimeError("callback bug")

    cts.token.register(bad)
    cts.token.register(lambda: calls.append(1))
    cts.cancel()

    assert calls == [1]


def test_wait_wakes_on_cancel_from_other_thread():
    cts = CancellationTokenSource()
    timer = threading.Timer(0.05, cts.cancel)
    timer.start()
    try:
        assert cts.token.wait(5) is True
    finally:
        timer.cancel()
