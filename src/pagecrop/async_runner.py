"""Bridge coroutines such as diagram uploads into sync callers."""

from __future__ import annotations

import asyncio
import threading
from queue import Queue
from typing import TYPE_CHECKING, Any

from pagecrop.exceptions import AsyncExecutionError

if TYPE_CHECKING:
    from collections.abc import Coroutine


def _run_on_worker_loop[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run `coro` on a private event loop in a worker thread.

    Raises:
        AsyncExecutionError: Wrapping whatever the coroutine raised.
    """
    outcome: Queue[T | BaseException] = Queue(maxsize=1)

    def _worker() -> None:
        try:
            outcome.put(asyncio.run(coro))
        except BaseException as exc:
            outcome.put(exc)

    worker = threading.Thread(target=_worker, name="pagecrop-async", daemon=True)
    worker.start()
    worker.join()

    result = outcome.get()
    if isinstance(result, BaseException):
        raise AsyncExecutionError(result=result) from result
    return result


def run_async[T](coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from sync code.

    Without a running loop the coroutine runs on a fresh loop and its
    exceptions propagate unchanged. Inside a running loop it is moved to a
    worker thread, and failures come back as `AsyncExecutionError`.

    Args:
        coro: The coroutine to run.

    Returns:
        The coroutine result.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    return _run_on_worker_loop(coro)
