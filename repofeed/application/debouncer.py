from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable

log = logging.getLogger(__name__)


class Debouncer:
    """
    Trailing-edge debounce for an async callable.

    Every call() restarts the quiet-window timer and replaces the pending
    arguments. When the window elapses with no further calls, the wrapped
    function runs once with the latest arguments and its result is handed
    to the caller of that last call. Earlier callers that were collapsed
    into it get None straight away, so they can tell they were superseded
    without waiting for the window.
    """

    def __init__(self, func: Callable[..., Awaitable[Any]], wait: float) -> None:
        self._func    = func
        self._wait    = wait
        self._timer:  asyncio.TimerHandle | None = None
        self._waiter: asyncio.Future | None = None
        self._args:   tuple = ()
        self._inflight: asyncio.Future | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def call(self, *args: Any) -> asyncio.Future:
        loop = asyncio.get_running_loop()

        # Atomic swap: take the old timer and waiter out before replacing them
        old_timer, self._timer = self._timer, None
        old_waiter, self._waiter = self._waiter, None
        if old_timer is not None:
            old_timer.cancel()
        if old_waiter is not None and not old_waiter.done():
            log.debug("Debounced call collapsed into a newer one")
            old_waiter.set_result(None)

        self._args   = args
        self._waiter = loop.create_future()
        self._timer  = loop.call_later(self._wait, self._fire)
        return self._waiter

    def cancel(self) -> None:
        """Drop the pending trailing call, if any. Its caller receives None."""
        timer, self._timer = self._timer, None
        waiter, self._waiter = self._waiter, None
        if timer is not None:
            timer.cancel()
        if waiter is not None and not waiter.done():
            waiter.set_result(None)

    def _fire(self) -> None:
        waiter, self._waiter = self._waiter, None
        self._timer = None
        task = self._inflight = asyncio.ensure_future(self._func(*self._args))

        def _deliver(done: asyncio.Future) -> None:
            if self._inflight is done:
                self._inflight = None
            if done.cancelled():
                if not waiter.done():
                    waiter.cancel()
                return
            exc = done.exception()
            if waiter.done():
                if exc is not None:
                    log.error("Debounced call failed after its caller went away: %s", exc)
                return
            if exc is not None:
                waiter.set_exception(exc)
            else:
                waiter.set_result(done.result())

        task.add_done_callback(_deliver)
