from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

from .errors import NullValueError, as_exception
from .option import NONE, Option, Some

E = TypeVar("E")
A = TypeVar("A")
B = TypeVar("B")


class Result(Generic[E, A]):
    """Either a computed value (``Ok``) or the error that prevented it (``Err``)."""
    def is_ok(self) -> bool: raise NotImplementedError
    def is_err(self) -> bool: return not self.is_ok()

    @staticmethod
    def of(value: A) -> "Result[Any, A]":
        return Ok(value)

    def map(self, f: Callable[[A], B]) -> "Result[E, B]":
        if self.is_ok():
            return Ok(f(self.value))  # type: ignore[attr-defined]
        return self  # type: ignore[return-value]

    def map_err(self, f: Callable[[E], B]) -> "Result[B, A]":
        if self.is_err():
            return Err(f(self.error))  # type: ignore[attr-defined]
        return self  # type: ignore[return-value]

    def chain(self, f: Callable[[A], "Result[E, B]"]) -> "Result[E, B]":
        if self.is_ok():
            return f(self.value)  # type: ignore[attr-defined]
        return self  # type: ignore[return-value]

    flat_map = chain
    and_then = chain

    def fold(self, on_err: Callable[[E], B], on_ok: Callable[[A], B]) -> B:
        if self.is_ok():
            return on_ok(self.value)  # type: ignore[attr-defined]
        return on_err(self.error)  # type: ignore[attr-defined]

    def alt(self, other: "Result[E, A]") -> "Result[E, A]":
        return self if self.is_ok() else other

    def ap(self, res: "Result[E, Any]") -> "Result[E, Any]":
        # self holds the function; its error wins over the argument's
        if self.is_err():
            return self
        if res.is_err():
            return res
        return Ok(self.value(res.value))  # type: ignore[attr-defined]

    def get_or_else(self, default: A) -> A:
        return self.value if self.is_ok() else default  # type: ignore[attr-defined]

    def unwrap(self) -> A:
        if self.is_ok():
            return self.value  # type: ignore[attr-defined]
        raise as_exception(self.error)  # type: ignore[attr-defined]


@dataclass(frozen=True)
class Ok(Result[E, A]):
    value: A
    def is_ok(self) -> bool: return True


@dataclass(frozen=True)
class Err(Result[E, A]):
    error: E
    def __post_init__(self) -> None:
        if self.error is None:
            raise TypeError("Err requires an error value")
    def is_ok(self) -> bool: return False


def ok(value: A) -> Result[Any, A]:
    return Ok(value)


def err(error: E) -> Result[E, Any]:
    return Err(error)


def from_nullable(v: Optional[A]) -> Result[NullValueError, A]:
    return Ok(v) if v is not None else Err(NullValueError())


def attempt(thunk: Callable[[], A]) -> Result[Exception, A]:
    try:
        return Ok(thunk())
    except Exception as ex:
        return Err(ex)


def sequence(results: Iterable[Result[E, A]]) -> Result[E, List[A]]:
    out: List[A] = []
    for r in results:
        if r.is_err():
            return r  # type: ignore[return-value]
        out.append(r.value)  # type: ignore[attr-defined]
    return Ok(out)


combine_all = sequence


def map_n(f: Callable[..., B], *results: Result[E, Any]) -> Result[E, B]:
    return sequence(results).map(lambda values: f(*values))


def from_option(opt: Option[A], error: E) -> Result[E, A]:
    if isinstance(opt, Some):
        return Ok(opt.value)
    return Err(error)


def to_option(r: Result[E, A]) -> Option[A]:
    if isinstance(r, Ok):
        return Some(r.value)
    return NONE
