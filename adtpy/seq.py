from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Iterator, List, Tuple, TypeVar

from .option import NONE, Option, Some

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Seq(Generic[T]):
    """Immutable ordered sequence of values of one type."""
    _items: Tuple[T, ...] = ()

    @staticmethod
    def of(*items: T) -> "Seq[T]":
        return Seq(tuple(items))

    @staticmethod
    def from_iterable(items: Iterable[T]) -> "Seq[T]":
        return Seq(tuple(items))

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def to_list(self) -> List[T]:
        return list(self._items)

    def map(self, f: Callable[[T], U]) -> "Seq[U]":
        return Seq(tuple(f(x) for x in self._items))

    def chain(self, f: Callable[[T], "Seq[U]"]) -> "Seq[U]":
        out: List[U] = []
        for x in self._items:
            out.extend(f(x)._items)
        return Seq(tuple(out))

    flat_map = chain

    def fold(self, f: Callable[[U, T], U], start: U) -> U:
        acc = start
        for x in self._items:
            acc = f(acc, x)
        return acc

    def filter(self, p: Callable[[T], bool]) -> "Seq[T]":
        return Seq(tuple(x for x in self._items if p(x)))

    def head(self) -> Option[T]:
        """First item as ``Some``, ``NONE`` only when the sequence is empty.

        A leading ``None`` item gives ``Some(None)``; emptiness and a missing
        value are kept apart.
        """
        return Some(self._items[0]) if self._items else NONE

    def tail(self) -> "Seq[T]":
        return Seq(self._items[1:])

    def append(self, x: T) -> "Seq[T]":
        return Seq(self._items + (x,))

    def extend(self, xs: Iterable[T]) -> "Seq[T]":
        return Seq(self._items + tuple(xs))
