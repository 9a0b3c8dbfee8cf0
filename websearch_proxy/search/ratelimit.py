import asyncio
import logging
import time
from collections import deque
from typing import Awaitable, Callable, Deque

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admet au plus ``requests_per_minute`` opérations par fenêtre glissante.

    ``acquire()`` never fails: when the window is full the caller is
    suspended until the oldest admitted timestamp leaves the window. The
    wait is computed once and not re-checked afterwards.
    """

    def __init__(
        self,
        requests_per_minute: int = 30,
        window_seconds: float = 60.0,
        name: str = "default",
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be >= 1")
        self.requests_per_minute = requests_per_minute
        self.window_seconds = window_seconds
        self.name = name
        self.requests: Deque[float] = deque()
        self._clock = clock
        self._sleep = sleep
        self._lock = asyncio.Lock()

    def _evict(self, now: float):
        while self.requests and now - self.requests[0] >= self.window_seconds:
            self.requests.popleft()

    async def acquire(self):
        # Le verrou couvre évincement, attente et ajout
        async with self._lock:
            now = self._clock()
            self._evict(now)

            if len(self.requests) >= self.requests_per_minute:
                wait_time = self.window_seconds - (now - self.requests[0])
                if wait_time > 0:
                    logger.debug(f"Limiteur '{self.name}' plein, attente de {wait_time:.2f}s")
                    await self._sleep(wait_time)

            self.requests.append(self._clock())

    @property
    def in_window(self) -> int:
        """Nombre d'opérations admises encore dans la fenêtre"""
        self._evict(self._clock())
        return len(self.requests)
