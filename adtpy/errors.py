from __future__ import annotations
from typing import Generic, TypeVar

E = TypeVar("E")


class AdtError(Exception):
    """Base class for errors raised or carried by adtpy containers."""


class NullValueError(AdtError, ValueError):
    def __init__(self, message: str = "Value was null"):
        super().__init__(message)


class AbsentValueError(AdtError, LookupError):
    def __init__(self, message: str = "Maybe was Nothing"):
        super().__init__(message)


class Failure(AdtError, Generic[E]):
    """Carries a failure value that is not itself an exception.

    Task and Result failures may hold any value. When such a value has to be
    raised (awaiting a future, unwrapping a Result) it travels inside a
    Failure; ``error`` gives back the original value.
    """
    def __init__(self, error: E):
        super().__init__(repr(error)); self.error = error


def as_exception(error: object) -> BaseException:
    if isinstance(error, BaseException):
        return error
    return Failure(error)
