"""Request-rate governor for the Scryfall API.

Scryfall asks clients to keep 50-100 milliseconds between requests. Every
outbound call (search pages, single objects, bulk downloads) goes through a
``RateGovernor`` so that the aggregate rate stays within that limit no matter
how many streams or tasks are running concurrently.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from typing import Callable, Deque, Dict, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_MIN_INTERVAL = 0.1


class RateGovernor:
    """Enforces a minimum spacing between consecutive dispatches.

    ``acquire`` reads and updates the last dispatch timestamp under a single
    ``asyncio.Lock``. Waiters are woken in FIFO order, so every caller
    eventually proceeds.
    """

    def __init__(
        self,
        min_interval: float = DEFAULT_MIN_INTERVAL,
        history_size: int = 0,
        clock: Callable[[], float] = time.monotonic,
        enabled: bool = True,
    ) -> None:
        """Initialize the governor.

        Args:
            min_interval: Minimum seconds between two dispatches
            history_size: Number of dispatch timestamps to remember (0 disables)
            clock: Monotonic clock, injectable for tests
            enabled: When False, ``acquire`` returns immediately
        """
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.min_interval = min_interval
        self.enabled = enabled
        self._clock = clock
        self._lock = asyncio.Lock()
        self._last_dispatch: Optional[float] = None
        self._history: Optional[Deque[float]] = (
            deque(maxlen=history_size) if history_size > 0 else None
        )
        self.logger = logging.getLogger(self.__class__.__name__)

        # Statistics
        self._stats: Dict[str, float] = {"requests": 0, "total_wait": 0.0}

    @property
    def last_dispatch(self) -> Optional[float]:
        """Clock value of the most recent dispatch, or None."""
        return self._last_dispatch

    @property
    def history(self) -> List[float]:
        """Recorded dispatch timestamps, oldest first."""
        return list(self._history) if self._history is not None else []

    async def acquire(self) -> float:
        """Wait for a dispatch slot and claim it.

        Returns:
            Time waited in seconds
        """
        if not self.enabled:
            return 0.0

        async with self._lock:
            waited = 0.0
            while True:
                now = self._clock()
                if self._last_dispatch is None:
                    break
                remaining = self._last_dispatch + self.min_interval - now
                if remaining <= 0:
                    break
                # The loop may wake a little early; re-check before claiming.
                await asyncio.sleep(remaining)
                waited += remaining

            self._last_dispatch = now
            if self._history is not None:
                self._history.append(now)

        self._stats["requests"] += 1
        self._stats["total_wait"] += waited

        if waited > 0.1:  # Log significant waits
            self.logger.debug("Rate governed: waited %.3fs", waited)

        return waited

    def get_stats(self) -> Dict[str, float]:
        """Get rate limiting statistics."""
        requests = self._stats["requests"]
        total_wait = self._stats["total_wait"]
        return {
            "requests": requests,
            "total_wait_seconds": round(total_wait, 3),
            "avg_wait_seconds": round(total_wait / requests, 3) if requests > 0 else 0,
        }

    def reset_stats(self) -> None:
        """Reset statistics."""
        self._stats = {"requests": 0, "total_wait": 0.0}

    def set_min_interval(self, min_interval: float) -> None:
        """Change the spacing enforced for future dispatches."""
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.min_interval = min_interval
        self.logger.info("Set minimum request interval to %.3fs", min_interval)


# Global governor instance
_rate_governor: Optional[RateGovernor] = None


def get_rate_governor() -> RateGovernor:
    """Get or create the process-wide governor."""
    global _rate_governor
    if _rate_governor is None:
        from scrybe.core.config import get_config

        _rate_governor = RateGovernor(
            min_interval=get_config().get_float(
                "rate_limit.min_interval_seconds", DEFAULT_MIN_INTERVAL
            )
        )
    return _rate_governor


def set_rate_governor(governor: Optional[RateGovernor]) -> None:
    """Replace the process-wide governor (None resets it)."""
    global _rate_governor
    _rate_governor = governor
