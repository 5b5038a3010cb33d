from .bus import Event, EventBus, Subscription
from .loading_events import (
    LoadFailedEvent,
    LoadFinishedEvent,
    LoadStartedEvent,
    PageLoadedEvent,
)

__all__ = [
    "Event",
    "EventBus",
    "LoadFailedEvent",
    "LoadFinishedEvent",
    "LoadStartedEvent",
    "PageLoadedEvent",
    "Subscription",
]
