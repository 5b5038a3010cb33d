"""Cooperative cancellation primitives.

A :class:`CancellationTokenSource` owns the ability to cancel; the
:class:`CancellationToken` it hands out can only observe.  Sources receive a
token with every page request and are expected to check it (or raise
:class:`OperationCancelledError` via :meth:`CancellationToken.raise_if_cancelled`)
while they work.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..errors import OperationCancelledError

_logger = logging.getLogger(__name__)


class CancellationToken:
    """Read-only view onto a cancellation request."""

    __slots__ = ("_source",)

    def __init__(self, source: Optional["CancellationTokenSource"] = None) -> None:
        self._source = source

    @classmethod
    def none(cls) -> "CancellationToken":
        """Return a token that can never be cancelled."""
        return cls(None)

    @property
    def is_cancellation_requested(self) -> bool:
        return self._source is not None and self._source.is_cancellation_requested

    @property
    def can_be_cancelled(self) -> bool:
        return self._source is not None

    def raise_if_cancelled(self) -> None:
        if self.is_cancellation_requested:
            raise OperationCancelledError("operation was cancelled")

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancellation is requested or *timeout* elapses."""
        if self._source is None:
            return False
        return self._source._event.wait(timeout)

    def register(self, callback: Callable[[], None]) -> None:
        """Run *callback* once cancellation is requested (immediately if it already was)."""
        if self._source is None:
            return
        self._source._register(callback)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancellation_requested})"


class CancellationTokenSource:
    """Owner side of a cancellation signal."""

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self._token = CancellationToken(self)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def is_cancellation_requested(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            try:
                callback()
            except Exception:
                _logger.exception("Cancellation callback %r failed", callback)

    def _register(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return
        callback()


__all__ = ["CancellationToken", "CancellationTokenSource", "OperationCancelledError"]
