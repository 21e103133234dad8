from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")


class Option(Generic[T]):
    """A value that may be absent: either ``Some(value)`` or ``NONE``.

    Absence carries no diagnostic; use ``Result`` when the reason matters.
    """
    def is_some(self) -> bool: raise NotImplementedError
    def is_none(self) -> bool: return not self.is_some()

    @staticmethod
    def of(value: T) -> "Option[T]":
        return Some(value)

    def map(self, f: Callable[[T], U]) -> "Option[U]":
        if self.is_some():
            return Some(f(self.value))  # type: ignore[attr-defined]
        return NONE

    def chain(self, f: Callable[[T], "Option[U]"]) -> "Option[U]":
        if self.is_some():
            return f(self.value)  # type: ignore[attr-defined]
        return NONE

    flat_map = chain

    def fold(self, on_none: Callable[[], U], on_some: Callable[[T], U]) -> U:
        if self.is_some():
            return on_some(self.value)  # type: ignore[attr-defined]
        return on_none()

    def alt(self, other: "Option[T]") -> "Option[T]":
        return self if self.is_some() else other

    def ap(self, opt: "Option[Any]") -> "Option[Any]":
        # self holds the function
        if self.is_none() or opt.is_none():
            return NONE
        return Some(self.value(opt.value))  # type: ignore[attr-defined]

    def get_or_else(self, default: U) -> T | U:
        return self.value if self.is_some() else default  # type: ignore[attr-defined]

    def get_or_else_get(self, thunk: Callable[[], U]) -> T | U:
        return self.value if self.is_some() else thunk()  # type: ignore[attr-defined]


@dataclass(frozen=True)
class Some(Option[T]):
    value: T
    def is_some(self) -> bool: return True


class _None(Option[Any]):
    __slots__ = ()
    def __repr__(self) -> str: return "NONE"
    def is_some(self) -> bool: return False


NONE: Option[Any] = _None()


def some(value: T) -> Option[T]:
    return Some(value)


def nothing() -> Option[Any]:
    return NONE


def from_nullable(v: Optional[T]) -> Option[T]:
    return Some(v) if v is not None else NONE


def attempt(thunk: Callable[[], T]) -> Option[T]:
    try:
        return Some(thunk())
    except Exception:
        return NONE


def sequence(options: Iterable[Option[T]]) -> Option[List[T]]:
    out: List[T] = []
    for o in options:
        if o.is_none():
            return NONE
        out.append(o.value)  # type: ignore[attr-defined]
    return Some(out)


combine_all = sequence


def map_n(f: Callable[..., U], *options: Option[Any]) -> Option[U]:
    return sequence(options).map(lambda values: f(*values))
