"""Background and asynchronous action dispatch for cmdpalette.

Command actions may be plain callables, coroutine functions, or callables
that hand back a pending result. The palette never blocks on them.

Usage:
    from cmdpalette.core.tasks import dispatch_action, run_in_background

    # Fire-and-forget background execution
    run_in_background(some_long_function, callback=on_complete)

    # Run a command action, reporting failures to a sink
    dispatch_action(command.action, on_error=report)
"""

import asyncio
import inspect
import threading
from concurrent.futures import Future
from typing import Any, Awaitable, Callable, Optional, Union

from cmdpalette.core.logging import get_logger

logger = get_logger(__name__)

ErrorCallback = Callable[[BaseException], None]
DispatchHandle = Union[asyncio.Task, threading.Thread, Future]


def run_in_background(
    func: Callable[..., Any],
    args: tuple = (),
    kwargs: Optional[dict] = None,
    callback: Optional[Callable[[Any], None]] = None,
    error_callback: Optional[ErrorCallback] = None,
) -> threading.Thread:
    """Run a function in a background thread.

    Simple fire-and-forget background execution.

    Args:
        func: Function to execute
        args: Positional arguments
        kwargs: Keyword arguments
        callback: Function to call with result on success
        error_callback: Function to call with exception on failure; when
            given it owns reporting and the failure is not logged here

    Returns:
        The started thread
    """
    kwargs = kwargs or {}

    def wrapper() -> None:
        try:
            result = func(*args, **kwargs)
            if callback:
                callback(result)
        except Exception as e:
            if error_callback:
                error_callback(e)
            else:
                logger.error(f"Background task failed: {e}", exc_info=True)

    thread = threading.Thread(target=wrapper, daemon=True)
    thread.start()
    return thread


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _watch_task(task: asyncio.Task, on_error: ErrorCallback) -> None:
    def on_done(t: asyncio.Task) -> None:
        if t.cancelled():
            return
        exc = t.exception()
        if exc is not None:
            on_error(exc)

    task.add_done_callback(on_done)


def _watch_future(future: Future, on_error: ErrorCallback) -> None:
    def on_done(f: Future) -> None:
        if f.cancelled():
            return
        exc = f.exception()
        if exc is not None:
            on_error(exc)

    future.add_done_callback(on_done)


def dispatch_action(
    action: Callable[[], Any],
    on_error: ErrorCallback,
) -> Optional[DispatchHandle]:
    """Invoke a zero-argument action without blocking on its result.

    A synchronous exception is passed to on_error immediately. When the
    action returns an awaitable it is scheduled on the running event loop
    if there is one, otherwise driven to completion on a background
    thread. A concurrent.futures.Future result is watched in place.
    Asynchronous failures also go to on_error.

    Args:
        action: Callable taking no arguments
        on_error: Receives any exception raised by the action

    Returns:
        The task, thread or future tracking pending work, or None when
        the action completed (or failed) synchronously
    """
    try:
        result = action()
    except Exception as e:
        on_error(e)
        return None

    if isinstance(result, Future):
        _watch_future(result, on_error)
        return result

    if not inspect.isawaitable(result):
        return None

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        task = loop.create_task(_await(result))
        _watch_task(task, on_error)
        return task

    def drive() -> Any:
        return asyncio.run(_await(result))

    return run_in_background(drive, error_callback=on_error)
