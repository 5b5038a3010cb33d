"""Ready-made incremental sources."""

from __future__ import annotations

import logging
from itertools import islice
from pathlib import Path
from typing import List, Sequence

from .core.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class SequenceSource:
    """Serve an in-memory sequence one slice per page."""

    def __init__(self, items: Sequence) -> None:
        self._items = items

    def get_paged_items(self, page_index: int, page_size: int, cancellation_token: CancellationToken) -> List:
        cancellation_token.raise_if_cancelled()
        start = page_index * page_size
        return list(self._items[start : start + page_size])


class LineFileSource:
    """Serve the non-empty lines of a text file, *page_size* lines per page.

    The file is reopened for every page so that no handle outlives a fetch.
    """

    def __init__(self, path: Path, encoding: str = "utf-8") -> None:
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def get_paged_items(self, page_index: int, page_size: int, cancellation_token: CancellationToken) -> List[str]:
        start = page_index * page_size
        page: List[str] = []
        with self._path.open("r", encoding=self._encoding) as handle:
            lines = (line.rstrip("\r\n") for line in handle)
            for line in islice((line for line in lines if line.strip()), start, start + page_size):
                cancellation_token.raise_if_cancelled()
                page.append(line)
        logger.debug("Read %d lines from %s (page %d)", len(page), self._path, page_index)
        return page
