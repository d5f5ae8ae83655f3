import asyncio
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class Timer:
    """One-shot named timer on an asyncio event loop.

    Arming an armed timer replaces the pending expiry, so a timer never
    fires twice for one arming.
    """

    def __init__(self, name: str, callback: Callable[[], None], loop=None):
        self.name = name
        self._callback = callback
        self._loop = loop
        self._handle = None
        self._interval: float | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    @property
    def interval(self) -> float | None:
        return self._interval

    def arm(self, interval: float):
        self.disarm()

        loop = self._loop or asyncio.get_running_loop()
        self._interval = interval
        self._handle = loop.call_later(interval, self._fire)
        logger.debug(f"Timer '{self.name}' armed for {interval}s")

    def disarm(self):
        if self._handle is None:
            return

        self._handle.cancel()
        self._handle = None
        self._interval = None
        logger.debug(f"Timer '{self.name}' disarmed")

    def _fire(self):
        self._handle = None
        self._interval = None
        logger.debug(f"Timer '{self.name}' expired")
        self._callback()
