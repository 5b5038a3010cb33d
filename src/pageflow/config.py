"""Default configuration values for pageflow."""

from __future__ import annotations

from typing import Final

# Number of items requested from a source for every incremental call.  Views
# usually ask for a handful of rows at a time; the page size is what actually
# governs how much a single fetch returns.
DEFAULT_ITEMS_PER_PAGE: Final[int] = 20

# A single worker keeps fetches for one collection strictly sequential.
DEFAULT_MAX_WORKERS: Final[int] = 1

# Thread name prefix for the worker pool owned by a loader.
WORKER_THREAD_PREFIX: Final[str] = "pageflow-fetch"

# ``IncrementalListModel`` asks for another page once the view has scrolled
# within this many rows of the end of the loaded data.
PREFETCH_THRESHOLD_ROWS: Final[int] = 5
