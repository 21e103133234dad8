from __future__ import annotations
from typing import Any, Dict, Optional, TypeVar
import anyio
from .errors import Failure, as_exception
from .logger import ConsoleLogger, get_logger
from .runtime import Exit, report
from .task import Task

A = TypeVar('A')


async def run_task(task: Task[A]) -> A:
    """Fork ``task`` once and wait for it under any anyio backend.

    Continuations must fire on the event loop thread. Tasks built with
    ``from_async`` need the asyncio backend.
    """
    done = anyio.Event(); outcome: Dict[str, Any] = {}
    def settle(ok: bool, payload: Any) -> None:
        if outcome: return
        outcome.update(ok=ok, payload=payload); done.set()
    task.fork(lambda e: settle(False, e), lambda a: settle(True, a))
    await done.wait()
    if outcome['ok']: return outcome['payload']
    raise as_exception(outcome['payload'])


class AnyIORuntime:
    def __init__(self, logger: Optional[ConsoleLogger] = None, backend: str = 'asyncio'):
        self.logger = logger or get_logger(); self.backend = backend
    async def run(self, task: Task[A]) -> A:
        return await run_task(task)
    async def run_exit(self, task: Task[A]) -> Exit[Any, A]:
        try: return Exit(success=True, value=await run_task(task))
        except Failure as fe: return Exit(success=False, error=fe.error)
        except Exception as ex: return Exit(success=False, error=ex)
    def main(self, task: Task[Any], name: str = 'main') -> int:
        exit_ = anyio.run(self.run_exit, task, backend=self.backend)
        return report(exit_, self.logger, name)
