"""Observable, append-oriented sequence."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, Iterable, Iterator, List, TypeVar, overload

from .signal import Signal

T = TypeVar("T")


class ChangeAction(Enum):
    ADD = "add"


@dataclass(frozen=True)
class CollectionChange(Generic[T]):
    """Describes one mutation of an :class:`ObservableSequence`."""

    action: ChangeAction
    new_items: List[T] = field(default_factory=list)
    new_starting_index: int = -1


class ObservableSequence(Sequence, Generic[T]):
    """Read-only sequence whose insertions are observable.

    Observers connect to ``collection_changed`` (one :class:`CollectionChange`
    per inserted item) and ``property_changed`` (emits ``"count"`` after every
    insertion; the count itself is ``len()``, ``count(value)`` keeps its
    ``Sequence`` meaning).  Mutation is reserved to subclasses through
    :meth:`_append_item`.
    """

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: List[T] = list(items)
        self.collection_changed = Signal("collection_changed")
        self.property_changed = Signal("property_changed")

    def __len__(self) -> int:
        return len(self._items)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index):
        return self._items[index]

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._items!r})"

    def snapshot(self) -> List[T]:
        """Return a shallow copy of the current items."""
        return list(self._items)

    def _append_item(self, item: T) -> int:
        index = len(self._items)
        self._items.append(item)
        self.collection_changed.emit(
            CollectionChange(ChangeAction.ADD, [item], index)
        )
        self.property_changed.emit("count")
        return index
