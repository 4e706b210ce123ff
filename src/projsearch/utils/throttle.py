"""
Call coalescing for search entry points.

A ``RequestThrottler`` wraps one function. A call arriving at least ``wait``
seconds after the last recorded call runs immediately. A call arriving
sooner replaces whatever call is pending and is scheduled ``wait`` seconds
out; only the latest arguments within a busy window are ever executed.

The caller of a deferred call gets an ``asyncio.Future`` that resolves with
the wrapped function's result (awaiting it first when the function is a
coroutine function). Futures of superseded calls fail with
``SupersededCallError``, so coalescing is distinguishable from a cancelled task.

The window is anchored to call arrival: a deferred execution records the
arrival time of the call that scheduled it, not the time it ran.

Example:
    >>> throttled = RequestThrottler(search.search, wait=0.05)
    >>> results = await throttled(request)
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Callable
from typing import Any

from .error_handling import SupersededCallError
from .logging_config import get_logger


class RequestThrottler:
    """Stateful throttle around a single callable (state: last call, pending call)."""

    def __init__(
        self,
        func: Callable[..., Any],
        wait: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.func = func
        self.wait = wait
        self._clock = clock
        self.last_call: float | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._pending: asyncio.Future[Any] | None = None
        self.logger = get_logger()

    @property
    def has_pending(self) -> bool:
        return self._timer is not None

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        now = self._clock()
        if self.last_call is not None and now - self.last_call < self.wait:
            return self._schedule(now, args, kwargs)

        self.cancel()
        self.last_call = now
        return self.func(*args, **kwargs)

    def cancel(self) -> None:
        """Drop the pending call, if any; its future fails with SupersededCallError."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._pending is not None and not self._pending.done():
            self._pending.set_exception(SupersededCallError())
            # mark retrieved: the caller may never await a superseded call
            self._pending.exception()
        self._pending = None

    def _schedule(
        self, arrived: float, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> asyncio.Future[Any]:
        if self._timer is not None:
            self.logger.debug(
                f"Coalescing call to {getattr(self.func, '__name__', self.func)!s}",
                operation="throttle_coalesce",
            )
        self.cancel()

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()
        self._pending = future
        self._timer = loop.call_later(self.wait, self._fire, future, arrived, args, kwargs)
        return future

    def _fire(
        self,
        future: asyncio.Future[Any],
        arrived: float,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> None:
        self._timer = None
        self._pending = None
        self.last_call = arrived
        if future.done():
            return

        try:
            result = self.func(*args, **kwargs)
        except Exception as exc:
            future.set_exception(exc)
            return

        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            task.add_done_callback(lambda done: _chain(done, future))
        else:
            future.set_result(result)


def _chain(source: asyncio.Future[Any], target: asyncio.Future[Any]) -> None:
    if target.done():
        return
    if source.cancelled():
        target.cancel()
    elif source.exception() is not None:
        target.set_exception(source.exception())
    else:
        target.set_result(source.result())
