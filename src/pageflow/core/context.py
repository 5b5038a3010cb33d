"""Observer-context primitives.

Collection mutations and state notifications must reach observers on the
context those observers are bound to.  The loader only needs one operation
from that context: ``post(callback)``, which schedules *callback* to run
there.  ``gui.qt_context.QtObserverContext`` provides the Qt flavour.
"""

from __future__ import annotations

import logging
import queue
from typing import Callable, Optional, Protocol, runtime_checkable

_logger = logging.getLogger(__name__)


@runtime_checkable
class ObserverContext(Protocol):
    """Anything able to run a callback on the observers' context."""

    def post(self, callback: Callable[[], None]) -> None: ...


class ImmediateContext:
    """Run callbacks inline on whichever thread posts them.

    Suitable when observers are themselves thread-safe, and for scripts and
    tests that do not own a message loop.
    """

    def post(self, callback: Callable[[], None]) -> None:
        callback()


class QueuedContext:
    """FIFO of callbacks drained by the thread that owns the observers.

    ``post`` may be called from any thread; callbacks only run inside
    :meth:`process_events`, in the order they were posted.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[Callable[[], None]]" = queue.Queue()

    def post(self, callback: Callable[[], None]) -> None:
        self._queue.put(callback)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def process_events(self, timeout: Optional[float] = 0.0) -> int:
        """Run queued callbacks and return how many ran.

        Waits up to *timeout* seconds for the first callback (``None`` waits
        forever), then drains whatever else is already queued without
        blocking.
        """
        processed = 0
        block = timeout is None or timeout > 0
        try:
            callback = self._queue.get(block=block, timeout=timeout if block else None)
        except queue.Empty:
            return 0
        while True:
            self._run(callback)
            processed += 1
            try:
                callback = self._queue.get_nowait()
            except queue.Empty:
                return processed

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            _logger.exception("Queued callback %r failed", callback)
