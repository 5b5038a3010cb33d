import sys
import threading
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from pageflow.core.cancellation import CancellationToken  # noqa: E402


class ListSource:
    """Serve a fixed list of items page by page and record every request."""

    def __init__(self, items, fail_on=None, error=None):
        self.items = list(items)
        self.calls: list[tuple[int, int]] = []
        self.tokens: list[CancellationToken] = []
        self._fail_on = set(fail_on or ())
        self._error = error or RuntimeError("source failure")

    def get_paged_items(self, page_index, page_size, cancellation_token):
        self.calls.append((page_index, page_size))
        self.tokens.append(cancellation_token)
        if page_index in self._fail_on:
            raise self._error
        start = page_index * page_size
        return self.items[start : start + page_size]


class GatedSource(ListSource):
    """``ListSource`` that blocks each fetch until ``release()`` is called."""

    def __init__(self, items, **kwargs):
        super().__init__(items, **kwargs)
        self.entered = threading.Event()
        self._gate = threading.Event()

    def release(self):
        self._gate.set()

    def get_paged_items(self, page_index, page_size, cancellation_token):
        self.entered.set()
        self._gate.wait(5)
        return super().get_paged_items(page_index, page_size, cancellation_token)


@pytest.fixture
def list_source():
    return ListSource(["A", "B", "C"])


@pytest.fixture
def make_list_source():
    return ListSource


@pytest.fixture
def make_gated_source():
    return GatedSource
