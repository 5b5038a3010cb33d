import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from ..events.bus import Event, EventBus


class ErrorSeverity(Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(kw_only=True)
class ErrorOccurredEvent(Event):
    error: Exception
    severity: ErrorSeverity
    context: dict = field(default_factory=dict)


class ErrorHandler:
    """Central sink for fetch failures: log, publish, and tell the UI.

    ``as_callback()`` adapts the handler to a loader's ``on_error`` hook.
    Loaders never pass cancellations to that hook.
    """

    def __init__(self, logger: logging.Logger, event_bus: EventBus):
        self._logger = logger
        self._events = event_bus
        self._ui_callback: Optional[Callable[[str, ErrorSeverity], None]] = None

    def register_ui_callback(self, callback: Callable[[str, ErrorSeverity], None]):
        self._ui_callback = callback

    def handle(self, error: Exception, severity: ErrorSeverity = ErrorSeverity.ERROR, context: dict = None):
        context = dict(context or {})
        log_method = getattr(self._logger, severity.value, self._logger.error)
        log_method("%s: %s", type(error).__name__, error, extra={"context": context})

        self._events.publish(ErrorOccurredEvent(error=error, severity=severity, context=context))

        # Only failures the user can act on reach the UI
        if self._ui_callback and severity in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL):
            self._ui_callback(str(error), severity)

    def as_callback(
        self,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
        context: dict = None,
    ) -> Callable[[Exception], None]:
        """Return an ``on_error`` hook reporting at *severity*."""

        def _on_error(error: Exception) -> None:
            self.handle(error, severity=severity, context=context)

        return _on_error
