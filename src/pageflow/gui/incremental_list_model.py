"""Expose an :class:`IncrementalLoadingCollection` to Qt item views."""

from __future__ import annotations

import logging
from concurrent.futures import Future
from typing import Any, Callable, Optional

from PySide6.QtCore import QAbstractListModel, QByteArray, QModelIndex, QObject, Qt, Signal

from ..core.collection import CollectionChange
from ..core.loader import IncrementalLoadingCollection, LoadMoreItemsResult

logger = logging.getLogger(__name__)

ITEM_ROLE = int(Qt.ItemDataRole.UserRole) + 1


class IncrementalListModel(QAbstractListModel):
    """List model backed by an incrementally loaded collection.

    Views drive loading through the standard ``canFetchMore``/``fetchMore``
    pair.  The model keeps its own row count so that ``beginInsertRows`` is
    always announced before the new rows become visible through
    ``rowCount``.  Without an explicit *prefetch_threshold* the loader's own
    setting is used.
    """

    loadingChanged = Signal(bool)
    hasMoreItemsChanged = Signal(bool)
    pageLoaded = Signal(int)

    def __init__(
        self,
        loader: IncrementalLoadingCollection,
        display: Callable[[Any], Any] = str,
        prefetch_threshold: Optional[int] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._loader = loader
        self._display = display
        self._prefetch_threshold = loader.prefetch_threshold if prefetch_threshold is None else prefetch_threshold
        self._row_count = len(loader)

        loader.collection_changed.connect(self._on_collection_changed)
        loader.is_loading_changed.connect(self._on_loading_changed)
        loader.has_more_items_changed.connect(self._on_has_more_changed)

    @property
    def loader(self) -> IncrementalLoadingCollection:
        return self._loader

    # ------------------------------------------------------------------
    # QAbstractListModel API
    # ------------------------------------------------------------------
    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        if parent.isValid():
            return 0
        return self._row_count

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or not (0 <= index.row() < self._row_count):
            return None
        item = self._loader[index.row()]
        role_int = int(role)
        if role_int == int(Qt.ItemDataRole.DisplayRole):
            return self._display(item)
        if role_int == ITEM_ROLE:
            return item
        return None

    def roleNames(self) -> dict[int, QByteArray]:
        roles = super().roleNames()
        roles[ITEM_ROLE] = QByteArray(b"item")
        return roles

    # ------------------------------------------------------------------
    # Pagination support (Qt canFetchMore/fetchMore API)
    # ------------------------------------------------------------------
    def canFetchMore(self, parent: QModelIndex = QModelIndex()) -> bool:
        """Return True while the loader has more pages and is idle."""
        if parent.isValid():
            return False
        return self._loader.has_more_items and not self._loader.is_loading

    def fetchMore(self, parent: QModelIndex = QModelIndex()) -> None:
        """Request the next page; the rows arrive asynchronously."""
        if not self.canFetchMore(parent):
            return
        future = self._loader.load_more_items(self._loader.items_per_page)
        future.add_done_callback(self._on_load_done)

    def maybe_prefetch(self, last_visible_row: int) -> bool:
        """Fetch the next page when *last_visible_row* nears the loaded end.

        Returns True if a page load was started.
        """
        if last_visible_row < self._row_count - self._prefetch_threshold:
            return False
        if not self.canFetchMore():
            return False
        self.fetchMore()
        return True

    # ------------------------------------------------------------------
    # Loader callbacks
    # ------------------------------------------------------------------
    def _on_collection_changed(self, change: CollectionChange) -> None:
        first = change.new_starting_index
        last = first + len(change.new_items) - 1
        self.beginInsertRows(QModelIndex(), first, last)
        self._row_count = last + 1
        self.endInsertRows()

    def _on_loading_changed(self, loading: bool, _previous: bool) -> None:
        self.loadingChanged.emit(loading)

    def _on_has_more_changed(self, has_more: bool, _previous: bool) -> None:
        self.hasMoreItemsChanged.emit(has_more)

    def _on_load_done(self, future: "Future[LoadMoreItemsResult]") -> None:
        result = future.result()
        logger.debug("Model received %d rows (total %d)", result.count, self._row_count)
        self.pageLoaded.emit(result.count)
