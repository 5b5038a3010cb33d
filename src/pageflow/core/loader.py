"""Incrementally loaded observable collection.

``IncrementalLoadingCollection`` starts empty and grows one page at a time.
Each call to :meth:`IncrementalLoadingCollection.load_more_items` runs one
fetch-and-append cycle:

1. the loader flips ``is_loading`` on the calling (observer) context,
2. the source is asked for the next page on a worker thread,
3. the outcome is posted back to the observer context as a single unit which
   appends the page item by item (or clears ``has_more_items``), flips
   ``is_loading`` back and finally resolves the returned future.

Cancellation and fetch failures never escape the returned future; they only
show up through ``has_more_items`` and the optional ``on_error`` hook.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from ..config import (
    DEFAULT_ITEMS_PER_PAGE,
    DEFAULT_MAX_WORKERS,
    PREFETCH_THRESHOLD_ROWS,
    WORKER_THREAD_PREFIX,
)
from ..errors import ConfigurationError, OperationCancelledError
from ..events.bus import Event, EventBus
from ..events.loading_events import (
    LoadFailedEvent,
    LoadFinishedEvent,
    LoadStartedEvent,
    PageLoadedEvent,
)
from ..settings.schema import merge_with_defaults
from .cancellation import CancellationToken, CancellationTokenSource
from .collection import ObservableSequence
from .context import ImmediateContext, ObserverContext
from .signal import ObservableProperty
from .source import IncrementalSource, PageResult, resolve_source

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class LoadMoreItemsResult:
    """Outcome of one load cycle: how many items were appended."""

    count: int = 0


@dataclass
class _LoadRequest:
    future: "Future[LoadMoreItemsResult]"
    token: CancellationToken
    page_index: int


def _completed(count: int) -> "Future[LoadMoreItemsResult]":
    future: "Future[LoadMoreItemsResult]" = Future()
    future.set_result(LoadMoreItemsResult(count))
    return future


class IncrementalLoadingCollection(ObservableSequence[T]):
    """Observable sequence that pulls pages from an :class:`IncrementalSource`.

    Exactly one of *source* or *source_factory* must be supplied.  Lifecycle
    hooks are plain callables invoked on the observer context; exceptions they
    raise are logged and otherwise ignored.
    """

    def __init__(
        self,
        source: Optional[IncrementalSource[T]] = None,
        items_per_page: int = DEFAULT_ITEMS_PER_PAGE,
        on_start_loading: Optional[Callable[[], None]] = None,
        on_end_loading: Optional[Callable[[], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        *,
        source_factory: Optional[Callable[[], IncrementalSource[T]]] = None,
        context: Optional[ObserverContext] = None,
        executor: Optional[Executor] = None,
        event_bus: Optional[EventBus] = None,
        prefetch_threshold: int = PREFETCH_THRESHOLD_ROWS,
    ) -> None:
        super().__init__()
        if isinstance(items_per_page, bool) or not isinstance(items_per_page, int) or items_per_page <= 0:
            raise ConfigurationError(f"items_per_page must be a positive integer, got {items_per_page!r}")
        if isinstance(prefetch_threshold, bool) or not isinstance(prefetch_threshold, int) or prefetch_threshold < 0:
            raise ConfigurationError(f"prefetch_threshold must be a non-negative integer, got {prefetch_threshold!r}")

        self._source = resolve_source(source, source_factory)
        self._items_per_page = items_per_page
        self._prefetch_threshold = prefetch_threshold
        self._current_page_index = 0

        self._on_start_loading = on_start_loading
        self._on_end_loading = on_end_loading
        self._on_error = on_error

        self._context: ObserverContext = context if context is not None else ImmediateContext()
        self._executor = executor
        self._owns_executor = executor is None
        self._event_bus = event_bus

        self._is_loading = ObservableProperty(False, "is_loading")
        self._has_more_items = ObservableProperty(True, "has_more_items")
        self.is_loading_changed = self._is_loading.changed
        self.has_more_items_changed = self._has_more_items.changed
        self._is_loading.changed.connect(self._on_is_loading_changed)
        self._has_more_items.changed.connect(self._on_has_more_items_changed)

        self._cancellation_source: Optional[CancellationTokenSource] = None
        self._cancellation_token = CancellationToken.none()
        self._pending: Optional[_LoadRequest] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(
        cls,
        source: Optional[IncrementalSource[T]] = None,
        settings: Optional[Mapping[str, Any]] = None,
        *,
        event_bus: Optional[EventBus] = None,
        **kwargs: Any,
    ) -> "IncrementalLoadingCollection[T]":
        """Build a loader from a settings mapping validated against the loader schema."""

        resolved = merge_with_defaults(settings)
        kwargs.setdefault("items_per_page", resolved["items_per_page"])
        kwargs.setdefault("prefetch_threshold", resolved["prefetch_threshold"])
        kwargs["event_bus"] = event_bus if resolved["publish_events"] else None
        if "executor" in kwargs:
            # Caller-supplied pools stay owned by the caller.
            return cls(source, **kwargs)

        executor = ThreadPoolExecutor(
            max_workers=resolved["max_workers"],
            thread_name_prefix=WORKER_THREAD_PREFIX,
        )
        try:
            loader = cls(source, executor=executor, **kwargs)
        except Exception:
            executor.shutdown(wait=False)
            raise
        loader._owns_executor = True
        return loader

    # -- properties --------------------------------------------------------

    @property
    def source(self) -> IncrementalSource[T]:
        return self._source

    @property
    def items_per_page(self) -> int:
        return self._items_per_page

    @property
    def prefetch_threshold(self) -> int:
        """Rows from the loaded end at which a view should request the next page."""
        return self._prefetch_threshold

    @property
    def current_page_index(self) -> int:
        return self._current_page_index

    @property
    def is_loading(self) -> bool:
        return self._is_loading.value

    @property
    def has_more_items(self) -> bool:
        if self._cancellation_token.is_cancellation_requested:
            return False
        return self._has_more_items.value

    # -- public API --------------------------------------------------------

    def load_more_items(
        self,
        count: int = 0,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> "Future[LoadMoreItemsResult]":
        """Fetch the next page and append it; must be called on the observer context.

        *count* is advisory, the page size decides how much is fetched.  While
        a load is in flight further calls join it and receive the same future.
        """
        with self._lock:
            pending = self._pending
            if pending is not None:
                LOGGER.debug("Load of page %d already in flight; joining it", pending.page_index)
                return pending.future

            if not self._has_more_items.value:
                LOGGER.debug("Source exhausted; skipping load")
                return _completed(0)

            if cancellation_token is None:
                self._cancellation_source = CancellationTokenSource()
                token = self._cancellation_source.token
            else:
                self._cancellation_source = None
                token = cancellation_token
            self._cancellation_token = token

            if token.is_cancellation_requested:
                return _completed(0)

            future: "Future[LoadMoreItemsResult]" = Future()
            request = _LoadRequest(future, token, self._current_page_index)
            self._pending = request

        LOGGER.debug(
            "Loading page %d (%d requested, %d per page)",
            request.page_index,
            count,
            self._items_per_page,
        )
        self._is_loading.value = True
        self._publish(LoadStartedEvent(page_index=request.page_index))
        try:
            self._get_executor().submit(self._run_fetch, request)
        except RuntimeError as exc:
            # The executor was shut down; finish the cycle as a failed fetch.
            self._finish_load(request, None, exc)
        return future

    def load_data(self, cancellation_token: CancellationToken) -> PageResult:
        """Ask the source for the current page and advance the page cursor.

        Runs on the worker thread.  Subclasses may override this to shape
        pages; they must keep advancing the cursor once per call.
        """
        page_index = self._current_page_index
        self._current_page_index += 1
        return self._source.get_paged_items(page_index, self._items_per_page, cancellation_token)

    def cancel(self) -> None:
        """Cancel the current (or most recent) load started without an explicit token."""
        with self._lock:
            source = self._cancellation_source
        if source is not None:
            source.cancel()

    def close(self) -> None:
        """Cancel outstanding work and release the worker pool owned by this loader."""
        self.cancel()
        with self._lock:
            self._cancellation_source = None
            executor, owned = self._executor, self._owns_executor
            if owned:
                self._executor = None
        if owned and executor is not None:
            executor.shutdown(wait=False)

    def __enter__(self) -> "IncrementalLoadingCollection[T]":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # -- worker side -------------------------------------------------------

    def _run_fetch(self, request: _LoadRequest) -> None:
        try:
            page = self.load_data(request.token)
        except Exception as exc:
            self._deliver(request, None, exc)
            return
        if isinstance(page, Future):
            page.add_done_callback(lambda done: self._deliver_future(request, done))
        else:
            self._deliver_page(request, page)

    def _deliver_future(self, request: _LoadRequest, done: Future) -> None:
        if done.cancelled():
            self._deliver(request, None, CancelledError())
            return
        error = done.exception()
        if error is not None:
            self._deliver(request, None, error)
        else:
            self._deliver_page(request, done.result())

    def _deliver_page(self, request: _LoadRequest, page: Optional[Iterable[T]]) -> None:
        try:
            items = list(page) if page is not None else []
        except Exception as exc:
            self._deliver(request, None, exc)
            return
        self._deliver(request, items, None)

    def _deliver(self, request: _LoadRequest, items: Optional[list], error: Optional[BaseException]) -> None:
        self._context.post(lambda: self._finish_load(request, items, error))

    # -- observer side -----------------------------------------------------

    def _finish_load(self, request: _LoadRequest, items: Optional[list], error: Optional[BaseException]) -> None:
        appended = 0
        try:
            if error is not None:
                self._report_failure(request, error)
            if items and not request.token.is_cancellation_requested:
                for item in items:
                    self._append_item(item)
                appended = len(items)
                self._publish(PageLoadedEvent(page_index=request.page_index, count=appended))
            else:
                self._has_more_items.value = False
        except Exception:
            LOGGER.exception("Applying page %d failed", request.page_index)
        finally:
            with self._lock:
                if self._pending is request:
                    self._pending = None
            self._is_loading.value = False
            LOGGER.debug("Page %d finished with %d new items", request.page_index, appended)
            self._publish(
                LoadFinishedEvent(
                    page_index=request.page_index,
                    count=appended,
                    has_more_items=self.has_more_items,
                )
            )
            request.future.set_result(LoadMoreItemsResult(appended))

    def _report_failure(self, request: _LoadRequest, error: BaseException) -> None:
        if isinstance(error, (OperationCancelledError, CancelledError)):
            LOGGER.debug("Load of page %d was cancelled", request.page_index)
            return
        LOGGER.warning("Failed to load page %d: %s", request.page_index, error, exc_info=error)
        self._publish(LoadFailedEvent(page_index=request.page_index, error=error))
        if self._on_error is not None:
            self._invoke(self._on_error, error)

    def _on_is_loading_changed(self, loading: bool, _previous: bool) -> None:
        self.property_changed.emit("is_loading")
        callback = self._on_start_loading if loading else self._on_end_loading
        if callback is not None:
            self._invoke(callback)

    def _on_has_more_items_changed(self, _has_more: bool, _previous: bool) -> None:
        self.property_changed.emit("has_more_items")

    # -- internal ----------------------------------------------------------

    def _get_executor(self) -> Executor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=DEFAULT_MAX_WORKERS, thread_name_prefix=WORKER_THREAD_PREFIX
                )
                self._owns_executor = True
            return self._executor

    def _publish(self, event: Event) -> None:
        if self._event_bus is None:
            return
        event.source = type(self).__name__
        self._event_bus.publish(event)

    @staticmethod
    def _invoke(callback: Callable[..., Any], *args: Any) -> None:
        try:
            callback(*args)
        except Exception:
            LOGGER.exception("Loader callback %r failed", callback)
