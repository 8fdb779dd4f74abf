"""
Cached health probing of the local inference engine.

The monitor answers "is the local engine up?" from a cached probe result
while the result is younger than the TTL. Failed probes are cached exactly
like successful ones, so a stopped engine is probed once per window rather
than on every keystroke.
"""

import asyncio
import time
from typing import Callable, Optional

from ..utils.logging import get_logger
from .providers.base import BaseLLMProvider

logger = get_logger(__name__)


class AvailabilityMonitor:
    """TTL cache in front of a provider's health check."""

    def __init__(
        self,
        provider: BaseLLMProvider,
        ttl: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.provider = provider
        self.ttl = ttl
        self._clock = clock
        self._available: Optional[bool] = None
        self._checked_at: Optional[float] = None
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def last_checked(self) -> Optional[float]:
        return self._checked_at

    @property
    def cached_value(self) -> Optional[bool]:
        """Last probe result, or None before the first probe."""
        return self._available

    def _probe_lock(self) -> asyncio.Lock:
        """Lock bound to the running loop; a new loop gets a new lock."""
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _is_fresh(self) -> bool:
        return self._checked_at is not None and (self._clock() - self._checked_at) < self.ttl

    async def is_available(self) -> bool:
        """Return the cached result, probing only when the cache has expired."""
        if self._is_fresh():
            return self._available

        # Concurrent callers share one probe.
        async with self._probe_lock():
            if self._is_fresh():
                return self._available

            try:
                available = await self.provider.health_check()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.debug(f"{self.provider.provider_name} probe failed: {e}")
                available = False

            self._available = bool(available)
            self._checked_at = self._clock()
            logger.debug(f"{self.provider.provider_name} available={self._available}")
            return self._available

    def invalidate(self) -> None:
        """Forget the cached result so the next call probes again."""
        self._available = None
        self._checked_at = None
