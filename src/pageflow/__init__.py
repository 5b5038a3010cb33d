"""pageflow — observable collections that load their items page by page."""

from .core import (
    CancellationToken,
    CancellationTokenSource,
    FunctionSource,
    ImmediateContext,
    IncrementalLoadingCollection,
    IncrementalSource,
    LoadMoreItemsResult,
    QueuedContext,
)
from .errors import (
    ConfigurationError,
    OperationCancelledError,
    PageflowError,
    SourceConfigurationError,
)

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "CancellationTokenSource",
    "ConfigurationError",
    "FunctionSource",
    "ImmediateContext",
    "IncrementalLoadingCollection",
    "IncrementalSource",
    "LoadMoreItemsResult",
    "OperationCancelledError",
    "PageflowError",
    "QueuedContext",
    "SourceConfigurationError",
]
