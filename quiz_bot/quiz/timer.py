"""Cancellable periodic tick sources for the test-mode countdown."""
import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

TimerFactory = Callable[[Callable[[], None]], "TimerHandle"]


class TimerHandle(Protocol):
    @property
    def cancelled(self) -> bool: ...

    def cancel(self) -> None: ...


class AsyncioTicker:
    """Calls ``callback`` once per ``interval`` seconds until cancelled."""

    def __init__(self, callback: Callable[[], None], interval: float = 1.0):
        self._callback = callback
        self._interval = interval
        self._cancelled = False
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._task.cancel()

    async def _run(self) -> None:
        while not self._cancelled:
            await asyncio.sleep(self._interval)
            # The callback may cancel this ticker (answer recorded, advance);
            # no further tick must be delivered after that.
            if self._cancelled:
                break
            try:
                self._callback()
            except Exception:
                logger.exception("Countdown tick failed")
                self.cancel()


def asyncio_timer_factory(interval: float = 1.0) -> TimerFactory:
    def factory(callback: Callable[[], None]) -> AsyncioTicker:
        return AsyncioTicker(callback, interval)
    return factory
