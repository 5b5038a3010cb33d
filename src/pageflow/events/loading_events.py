from dataclasses import dataclass

from .bus import Event


@dataclass(kw_only=True)
class LoadStartedEvent(Event):
    page_index: int = 0


@dataclass(kw_only=True)
class PageLoadedEvent(Event):
    page_index: int = 0
    count: int = 0


@dataclass(kw_only=True)
class LoadFinishedEvent(Event):
    page_index: int = 0
    count: int = 0
    has_more_items: bool = True


@dataclass(kw_only=True)
class LoadFailedEvent(Event):
    page_index: int = 0
    error: Exception
