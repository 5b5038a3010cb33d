"""Qt adapters for pageflow collections."""

from .incremental_list_model import ITEM_ROLE, IncrementalListModel
from .qt_context import QtObserverContext

__all__ = ["ITEM_ROLE", "IncrementalListModel", "QtObserverContext"]
