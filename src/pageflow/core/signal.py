"""Pure Python signal system — no Qt dependency.

Provides ``Signal`` for observer-pattern callbacks and ``ObservableProperty``
for the loader's boolean state flags.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

_logger = logging.getLogger(__name__)


class Signal:
    """Pure Python signal — does not depend on Qt.

    Thread-safe: handler mutations are protected by a lock and emission
    iterates over a snapshot.  Exceptions raised by individual handlers are
    caught and logged so that one failing observer cannot prevent the others
    from running or leave the emitter half-way through a state change.
    """

    def __init__(self, name: str = "") -> None:
        self._name = name
        self._handlers: list[Callable] = []
        self._lock = threading.Lock()

    def connect(self, handler: Callable) -> None:
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def disconnect(self, handler: Callable) -> None:
        with self._lock:
            self._handlers.remove(handler)

    def emit(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            handlers = list(self._handlers)
        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception:
                _logger.exception("Signal %s handler %r failed", self._name or "<anonymous>", handler)

    @property
    def handler_count(self) -> int:
        with self._lock:
            return len(self._handlers)


class ObservableProperty:
    """Observable value that emits ``changed(new_value, old_value)``.

    Assigning an equal value is a no-op, so observers see exactly one
    notification per edge.
    """

    def __init__(self, initial_value: Any = None, name: str = "") -> None:
        self._value = initial_value
        self.name = name
        self.changed = Signal(name)

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self.set(new_value)

    def set(self, new_value: Any) -> bool:
        """Store *new_value*; return ``True`` when observers were notified."""
        if self._value == new_value:
            return False
        old_value = self._value
        self._value = new_value
        self.changed.emit(new_value, old_value)
        return True
