"""Incremental source protocol and helpers."""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Iterable, Optional, Protocol, TypeVar, Union, runtime_checkable

from ..errors import SourceConfigurationError
from .cancellation import CancellationToken

T = TypeVar("T")

PageResult = Union[Iterable[Any], Future]


@runtime_checkable
class IncrementalSource(Protocol[T]):
    """Capability that produces one page of items per call.

    Returning an empty page signals that the source is exhausted.  The call
    runs on a worker thread; implementations may also hand back a
    :class:`concurrent.futures.Future` they resolve themselves.  Long-running
    sources should poll *cancellation_token* and raise
    :class:`~pageflow.errors.OperationCancelledError` when it fires.
    """

    def get_paged_items(
        self,
        page_index: int,
        page_size: int,
        cancellation_token: CancellationToken,
    ) -> PageResult: ...


class FunctionSource:
    """Adapt a plain ``fetch(page_index, page_size, token)`` callable."""

    def __init__(self, fetch: Callable[[int, int, CancellationToken], Any]) -> None:
        if not callable(fetch):
            raise SourceConfigurationError(f"{fetch!r} is not callable")
        self._fetch = fetch

    def get_paged_items(self, page_index, page_size, cancellation_token):
        return self._fetch(page_index, page_size, cancellation_token)

    def __repr__(self) -> str:
        return f"FunctionSource({self._fetch!r})"


def resolve_source(
    source: Optional[IncrementalSource] = None,
    source_factory: Optional[Callable[[], IncrementalSource]] = None,
) -> IncrementalSource:
    """Return a usable source from exactly one of *source* or *source_factory*.

    Raises :class:`SourceConfigurationError` when neither or both are given,
    when the factory fails, or when the result lacks ``get_paged_items``.
    """
    if source is not None and source_factory is not None:
        raise SourceConfigurationError("pass either a source or a source_factory, not both")
    if source is None:
        if source_factory is None:
            raise SourceConfigurationError("an incremental source or source_factory is required")
        if not callable(source_factory):
            raise SourceConfigurationError(f"source_factory {source_factory!r} is not callable")
        try:
            source = source_factory()
        except Exception as exc:
            raise SourceConfigurationError(
                f"source_factory {source_factory!r} could not build a source: {exc}"
            ) from exc
    if not isinstance(source, IncrementalSource):
        raise SourceConfigurationError(
            f"{type(source).__name__} does not implement get_paged_items()"
        )
    return source
