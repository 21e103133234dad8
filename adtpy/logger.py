from __future__ import annotations
import sys, datetime as _dt, json
from typing import Any, Callable, Dict, Optional, TypeVar

from .task import Task, sync

A = TypeVar("A")

_LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


class ConsoleLogger:
    """Line-oriented logger writing to stderr, as text or as JSON records.

    ``bind`` returns a child sharing name, level threshold and output mode,
    with extra fields attached to every record it writes.
    """
    def __init__(self, name: str = "adtpy", level: str = "INFO", json_output: bool = False, context: Optional[Dict[str, Any]] = None):
        self.name = name
        self.threshold = _LEVELS.get(level.upper(), _LEVELS["INFO"])
        self.json_output = json_output
        self.context = dict(context or {})

    def set_level(self, level: str) -> None:
        self.threshold = _LEVELS.get(level.upper(), self.threshold)

    def enabled(self, level: str) -> bool:
        return _LEVELS[level] >= self.threshold

    def bind(self, **fields: Any) -> "ConsoleLogger":
        child = ConsoleLogger(self.name, json_output=self.json_output, context={**self.context, **fields})
        child.threshold = self.threshold
        return child

    def _render(self, level: str, msg: str, fields: Dict[str, Any]) -> str:
        ts = _dt.datetime.now(_dt.timezone.utc).isoformat()
        if self.json_output:
            record: Dict[str, Any] = {"ts": ts, "name": self.name, "level": level, "msg": msg}
            if fields:
                record["fields"] = fields
            return json.dumps(record, separators=(",", ":"), default=repr)
        extras = "".join(f" {k}={v}" for k, v in sorted(fields.items()))
        return f"[{ts}] {self.name} {level}: {msg}{extras}"

    def _log(self, level: str, msg: str, **fields: Any) -> None:
        if not self.enabled(level):
            return
        print(self._render(level, msg, {**self.context, **fields}), file=sys.stderr)

    def debug(self, msg: str, **fields: Any) -> None: self._log("DEBUG", msg, **fields)
    def info(self, msg: str, **fields: Any) -> None: self._log("INFO", msg, **fields)
    def warn(self, msg: str, **fields: Any) -> None: self._log("WARN", msg, **fields)
    def error(self, msg: str, **fields: Any) -> None: self._log("ERROR", msg, **fields)


_default = ConsoleLogger()


def get_logger() -> ConsoleLogger:
    return _default


def set_logger(logger: ConsoleLogger) -> None:
    global _default
    _default = logger


def timestamp() -> Task[str]:
    """Wall-clock time as ``HH:MM:SS``, read when the Task is forked."""
    return sync(_dt.datetime.now).map(lambda d: d.strftime("%H:%M:%S"))


def log_progress(message: str, logger: Optional[ConsoleLogger] = None) -> Callable[[A], Task[A]]:
    """Build a chain step that logs ``message`` and passes its input through.

    Example:
        ```python
        pipeline = open_page(url).chain(log_progress("Page opened")).chain(render)
        ```
    """
    def step(value: A) -> Task[A]:
        def write(ts: str) -> None:
            (logger or get_logger()).info(f"{ts} - {message}")
        return timestamp().map(write).map(lambda _: value)
    return step
