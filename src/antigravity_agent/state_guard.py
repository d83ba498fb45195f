"""
Gate deciding when window geometry may be written

Programmatic repositioning during the startup restore fires the same
move/resize events as the user does. The guard suppresses saves until the
restore has settled and then lets through at most one save per debounce
interval.
"""

import asyncio
import logging
import threading
import time
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)

SETTLE_DELAY = 0.5
DEBOUNCE_INTERVAL = 1.0


class GuardState(Enum):
    RESTORING = "restoring"
    ACTIVE = "active"


class StateSaveGuard:
    """Two-state gate with one lock around both the state and the timestamp"""

    def __init__(
        self,
        debounce_interval: float = DEBOUNCE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.debounce_interval = debounce_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._state = GuardState.RESTORING
        self._last_save_at = clock()

    @property
    def state(self) -> GuardState:
        with self._lock:
            return self._state

    @property
    def restoring(self) -> bool:
        return self.state is GuardState.RESTORING

    def activate(self) -> bool:
        """Leave RESTORING; only the first call has an effect"""
        with self._lock:
            if self._state is GuardState.ACTIVE:
                return False
            self._state = GuardState.ACTIVE
        logger.debug("Window state restore settled, saves enabled")
        return True

    async def settle(self, delay: float = SETTLE_DELAY) -> None:
        """Wait out the settle delay, then activate"""
        await asyncio.sleep(delay)
        self.activate()

    def attempt_save(self, now: float | None = None) -> bool:
        """Return True if a save may proceed now and record it as the last save"""
        if now is None:
            now = self._clock()
        with self._lock:
            if self._state is GuardState.RESTORING:
                return False
            if now - self._last_save_at < self.debounce_interval:
                return False
            self._last_save_at = now
            return True
