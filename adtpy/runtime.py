from __future__ import annotations
import asyncio
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from .errors import Failure
from .logger import ConsoleLogger, get_logger
from .task import Task, to_future

E = TypeVar("E"); A = TypeVar("A")


@dataclass
class Exit(Generic[E, A]):
    success: bool
    value: Optional[A] = None
    error: Optional[E] = None


class Fiber(Generic[A]):
    """One forked Task, observed through an asyncio Future.

    Args:
        future: The future driven by the forked Task
        name: Optional name for debugging

    Attributes:
        name: Optional name for debugging
        status: Current status ('running', 'done', 'failed')
    """
    def __init__(self, future: "asyncio.Future[A]", name: Optional[str] = None):
        self._future = future
        self.name: Optional[str] = name
        self._status: str = "running"

    @property
    def status(self) -> str:
        return self._status

    async def await_(self) -> Exit[Any, A]:
        """Wait for the Task to settle and get the structured outcome.

        Returns:
            Exit holding either the success value or the failure value.
            Failures that were wrapped in ``Failure`` on the way are unwrapped.

        Example:
            ```python
            fiber = runtime.fork(fetch_page(url))
            exit_ = await fiber.await_()
            if not exit_.success:
                print(f"Failure: {exit_.error!r}")
            ```
        """
        try:
            v = await asyncio.shield(self._future)
            self._status = "done"
            return Exit(success=True, value=v)
        except Failure as fe:
            self._status = "failed"
            return Exit(success=False, error=fe.error)
        except asyncio.CancelledError as ex:
            if not self._future.cancelled():
                raise
            self._status = "failed"
            return Exit(success=False, error=ex)
        except Exception as ex:
            self._status = "failed"
            return Exit(success=False, error=ex)

    async def join(self) -> A:
        """Wait for the Task to settle and get the success value.

        Raises:
            The failure itself when it is an exception, ``Failure`` otherwise.
        """
        return await asyncio.shield(self._future)


class Runtime:
    """Runs Tasks at the program boundary on asyncio.

    A Task is forked exactly once per ``fork``/``run``/``main`` call. There is
    no supervision, retry or cancellation: a forked Task runs to completion.

    Args:
        logger: Logger used to report the outcome in ``main``
            (default: the module default logger)

    Example:
        ```python
        def cli() -> int:
            return Runtime().main(build_pipeline(sys.argv))

        if __name__ == "__main__":
            sys.exit(cli())
        ```
    """
    def __init__(self, logger: Optional[ConsoleLogger] = None):
        self.logger = logger or get_logger()

    def fork(self, task: Task[A], name: Optional[str] = None) -> Fiber[A]:
        """Fork a Task now and return a Fiber observing it.

        Must be called while an event loop is running.
        """
        fut = to_future(task)
        fiber: Fiber[A] = Fiber(fut, name=name)

        def _on_done(f: "asyncio.Future[A]"):
            if f.cancelled() or f.exception() is not None:
                fiber._status = "failed"
            else:
                fiber._status = "done"

        fut.add_done_callback(_on_done)
        return fiber

    async def run(self, task: Task[A]) -> A:
        return await self.fork(task).join()

    async def run_exit(self, task: Task[A]) -> Exit[Any, A]:
        return await self.fork(task).await_()

    def main(self, task: Task[Any], name: str = "main") -> int:
        """Fork ``task`` once on a fresh event loop, report it, return an exit code."""
        exit_ = asyncio.run(self.run_exit(task))
        return report(exit_, self.logger, name)


def report(exit_: Exit[Any, Any], logger: ConsoleLogger, name: str) -> int:
    if exit_.success:
        logger.info("completed", task=name)
        return 0
    logger.error("failed", task=name, error=repr(exit_.error))
    return 1
