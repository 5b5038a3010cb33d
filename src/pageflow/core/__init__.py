"""Incremental loading core — pure Python, no Qt dependency."""

from .cancellation import CancellationToken, CancellationTokenSource
from .collection import ChangeAction, CollectionChange, ObservableSequence
from .context import ImmediateContext, ObserverContext, QueuedContext
from .loader import IncrementalLoadingCollection, LoadMoreItemsResult
from .signal import ObservableProperty, Signal
from .source import FunctionSource, IncrementalSource, resolve_source

__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "ChangeAction",
    "CollectionChange",
    "FunctionSource",
    "ImmediateContext",
    "IncrementalLoadingCollection",
    "IncrementalSource",
    "LoadMoreItemsResult",
    "ObservableProperty",
    "ObservableSequence",
    "ObserverContext",
    "QueuedContext",
    "Signal",
    "resolve_source",
]
