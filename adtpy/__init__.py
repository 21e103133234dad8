from .task import (
    Task,
    resolve,
    reject,
    succeed,
    fail,
    from_nullable,
    attempt,
    sync,
    from_async,
    to_future,
    from_callback,
    from_option,
    from_result,
    sequence,
    combine_all,
    map_n,
)
from .errors import AdtError, NullValueError, AbsentValueError, Failure
from .option import (
    Option,
    Some,
    NONE,
    some,
    nothing,
    from_nullable as option_from_nullable,
    attempt as option_attempt,
    sequence as option_sequence,
    map_n as option_map_n,
)
from .result import (
    Result,
    Ok,
    Err,
    ok,
    err,
    from_nullable as result_from_nullable,
    attempt as result_attempt,
    sequence as result_sequence,
    map_n as result_map_n,
    from_option as result_from_option,
    to_option as result_to_option,
)
from .seq import Seq
from .logger import ConsoleLogger, get_logger, set_logger, log_progress, timestamp
from .runtime import Runtime, Fiber, Exit
from .anyio_runtime import AnyIORuntime, run_task
