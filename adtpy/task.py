from __future__ import annotations
import asyncio
import threading
from typing import Any, Awaitable, Callable, Generic, Iterable, List, Optional, Set, Tuple, TypeVar

from .errors import AbsentValueError, NullValueError, as_exception
from .option import Option
from .result import Result

A = TypeVar("A"); B = TypeVar("B")

OnFailure = Callable[[Any], None]
Computation = Callable[[OnFailure, Callable[[A], None]], None]


class Task(Generic[A]):
    """A cold, continuation-based computation that eventually fails or succeeds.

    A Task wraps a single function ``computation(on_failure, on_success)``.
    Building a Task does no work; ``fork`` runs the computation, which calls
    exactly one of the two continuations exactly once. Every fork is a fresh,
    independent run: results are never cached or shared between forks.

    Combinators (``map``, ``chain``, ``fold``...) return new Tasks and never
    catch exceptions raised by the functions given to them. Use ``attempt``
    to turn a raising function into a failing Task.

    Example:
        ```python
        t = resolve(3).chain(lambda x: resolve(x * 2)).map(lambda x: x + 1)
        t.fork(print_error, print)  # prints 7
        ```
    """
    __slots__ = ("_computation",)

    def __init__(self, computation: Computation[A]): self._computation = computation

    def fork(self, on_failure: OnFailure, on_success: Callable[[A], None]) -> None:
        self._computation(on_failure, on_success)

    @staticmethod
    def of(value: A) -> "Task[A]":
        return resolve(value)

    def map(self, f: Callable[[A], B]) -> "Task[B]":
        def run(rej: OnFailure, res: Callable[[B], None]): self.fork(rej, lambda a: res(f(a)))
        return Task(run)

    def chain(self, f: Callable[[A], "Task[B]"]) -> "Task[B]":
        def run(rej: OnFailure, res: Callable[[B], None]): self.fork(rej, lambda a: f(a).fork(rej, res))
        return Task(run)

    flat_map = chain

    # Both branches produce Tasks, so a failure can be turned into a success
    def fold(self, on_failure: Callable[[Any], "Task[B]"], on_success: Callable[[A], "Task[B]"]) -> "Task[B]":
        def run(rej: OnFailure, res: Callable[[B], None]):
            self.fork(lambda e: on_failure(e).fork(rej, res), lambda a: on_success(a).fork(rej, res))
        return Task(run)

    def alt(self, other: "Task[A]") -> "Task[A]":
        return self.fold(lambda _e: other, resolve)

    def ap(self, task: "Task[Any]") -> "Task[Any]":
        # self produces the function and is forked first
        return self.chain(lambda fn: task.map(fn))

    def catch_all(self, f: Callable[[Any], "Task[A]"]) -> "Task[A]":
        return self.fold(f, resolve)

    def map_error(self, f: Callable[[Any], Any]) -> "Task[A]":
        def run(rej: OnFailure, res: Callable[[A], None]): self.fork(lambda e: rej(f(e)), res)
        return Task(run)

    # Run a follow-up step for its effect and keep the current value
    def tap(self, f: Callable[[A], "Task[Any]"]) -> "Task[A]":
        return self.chain(lambda a: f(a).map(lambda _: a))

    def zip(self, other: "Task[B]") -> "Task[Tuple[A, B]]":
        return self.chain(lambda a: other.map(lambda b: (a, b)))


def resolve(value: A) -> Task[A]:
    def run(_rej: OnFailure, res: Callable[[A], None]): res(value)
    return Task(run)


def reject(error: Any) -> Task[Any]:
    def run(rej: OnFailure, _res: Callable[[Any], None]): rej(error)
    return Task(run)


succeed = resolve
fail = reject


def from_nullable(value: Optional[A]) -> Task[A]:
    if value is None:
        return reject(NullValueError())
    return resolve(value)


def attempt(thunk: Callable[[], A]) -> Task[A]:
    """Run ``thunk`` on every fork; a raised exception becomes the failure."""
    def run(rej: OnFailure, res: Callable[[A], None]):
        try:
            a = thunk()
        except Exception as ex:
            rej(ex)
            return
        res(a)
    return Task(run)


def sync(thunk: Callable[[], A]) -> Task[A]:
    """Defer a synchronous side effect (log line, clock read) to fork time."""
    def run(_rej: OnFailure, res: Callable[[A], None]): res(thunk())
    return Task(run)


_in_flight: Set["asyncio.Future[Any]"] = set()


def from_async(thunk: Callable[[], Awaitable[A]]) -> Task[A]:
    """Bridge an awaitable factory into a Task.

    Each fork calls ``thunk`` and schedules the awaitable on the running event
    loop. The exception it raises is forwarded unchanged as the failure. An
    exception raised by a later step while handling the value is turned into
    the failure too, since no caller is left on the stack to receive it.
    """
    def run(rej: OnFailure, res: Callable[[A], None]):
        fut = asyncio.ensure_future(thunk())
        _in_flight.add(fut)
        def _on_done(f: "asyncio.Future[A]"):
            _in_flight.discard(f)
            if f.cancelled():
                rej(asyncio.CancelledError())
                return
            ex = f.exception()
            if ex is not None:
                rej(ex)
                return
            try:
                res(f.result())
            except Exception as step_ex:
                rej(step_ex)
        fut.add_done_callback(_on_done)
    return Task(run)


def to_future(task: Task[A]) -> "asyncio.Future[A]":
    """Fork ``task`` once, now, and expose its outcome as an asyncio Future.

    Must be called with an event loop running. Continuations fired from
    another thread are handed back to the loop thread. Failures that are not
    exceptions are set wrapped in ``Failure``.
    """
    loop = asyncio.get_running_loop()
    fut: "asyncio.Future[A]" = loop.create_future()

    def settle(ok: bool, payload: Any) -> None:
        if fut.done():
            return
        if ok:
            fut.set_result(payload)
        elif isinstance(payload, asyncio.CancelledError):
            fut.cancel()
        else:
            fut.set_exception(as_exception(payload))

    def dispatch(ok: bool, payload: Any) -> None:
        try:
            current = asyncio.get_running_loop()
        except RuntimeError:
            current = None
        if current is loop:
            settle(ok, payload)
        else:
            loop.call_soon_threadsafe(settle, ok, payload)

    try:
        task.fork(lambda e: dispatch(False, e), lambda a: dispatch(True, a))
    except Exception as ex:
        if fut.done():
            raise
        fut.set_exception(ex)
    return fut


def from_callback(f: Callable[[Callable[..., None]], None]) -> Task[Any]:
    """Bridge an errback-style operation, ``f(done)`` with ``done(error, value)``.

    A non-None ``error`` fails the Task; otherwise it succeeds with ``value``,
    which may be None. Only the first ``done`` call of a fork counts.

    When ``done`` fires after ``f`` has returned (another thread, a later
    loop iteration), an exception raised by a later step becomes the failure;
    when it fires inside ``f`` it propagates to whoever forked the Task.
    """
    def run(rej: OnFailure, res: Callable[[Any], None]):
        settled = False
        forking = True
        forking_thread = threading.get_ident()
        def done(error: Any = None, value: Any = None) -> None:
            nonlocal settled
            if settled:
                from .logger import get_logger
                get_logger().warn("callback invoked after settlement; ignored", error=repr(error))
                return
            settled = True
            if error is not None:
                rej(error)
            elif forking and threading.get_ident() == forking_thread:
                res(value)
            else:
                try:
                    res(value)
                except Exception as step_ex:
                    rej(step_ex)
        try:
            f(done)
        finally:
            forking = False
    return Task(run)


def from_option(opt: Option[A]) -> Task[A]:
    return opt.fold(lambda: reject(AbsentValueError()), resolve)


def from_result(r: Result[Any, A]) -> Task[A]:
    return r.fold(reject, resolve)


def sequence(tasks: Iterable[Task[A]]) -> Task[List[A]]:
    """Fork ``tasks`` one after another and collect their values in order.

    The next task is forked only once the previous one succeeded; the first
    failure settles the whole Task and the remaining tasks are never forked.
    Tasks that settle synchronously are driven by a loop rather than by
    nested calls, so long lists do not grow the stack.
    """
    items: Tuple[Task[A], ...] = tuple(tasks)

    def run(rej: OnFailure, res: Callable[[List[A]], None]):
        values: List[A] = []
        forking = False
        settled_inline = False

        def on_success(a: A) -> None:
            nonlocal settled_inline
            values.append(a)
            if forking:
                settled_inline = True
            else:
                step()

        def step() -> None:
            nonlocal forking, settled_inline
            while len(values) < len(items):
                forking = True; settled_inline = False
                items[len(values)].fork(rej, on_success)
                forking = False
                if not settled_inline:
                    # pending (or failed); on_success resumes the loop
                    return
            res(values)

        step()
    return Task(run)


combine_all = sequence


def map_n(f: Callable[..., B], *tasks: Task[Any]) -> Task[B]:
    return sequence(tasks).map(lambda values: f(*values))
