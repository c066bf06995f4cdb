"""Per-model sliding-window request counter.

Process-local and advisory: counts are lost on restart and are not shared
between server instances.
"""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Callable

from app.core.errors import RateLimitExceeded
from app.models.profiles import ModelProfile, get_profile

logger = logging.getLogger(__name__)

WINDOW_MS = 60_000
DAILY_RESET_SECONDS = 24 * 60 * 60


def _epoch_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class RateLimitUsage:
    count: int = 0
    last_request_at: int = 0


class RateLimiter:
    def __init__(
        self,
        profile_lookup: Callable[[str], ModelProfile] = get_profile,
        clock: Callable[[], int] = _epoch_ms,
    ):
        self._profile_lookup = profile_lookup
        self._clock = clock
        self._usage: dict[str, RateLimitUsage] = {}
        self.last_reset = clock()

    def check_and_consume(self, model: str) -> None:
        """Record one request for model, or raise RateLimitExceeded if its quota is used."""
        now = self._clock()
        limits = self._profile_lookup(model)
        usage = self._usage.setdefault(model, RateLimitUsage())

        elapsed = now - usage.last_request_at
        if elapsed > WINDOW_MS:
            usage.count = 0

        if usage.count >= limits.requests_per_minute:
            wait_seconds = max(math.ceil((limits.cooldown_ms - elapsed) / 1000), 0)
            logger.info(f"Local rate limit hit for {model} ({usage.count}/{limits.requests_per_minute})")
            raise RateLimitExceeded(model, wait_seconds)

        usage.count += 1
        usage.last_request_at = now

    def usage(self, model: str) -> RateLimitUsage:
        current = self._usage.get(model, RateLimitUsage())
        return RateLimitUsage(count=current.count, last_request_at=current.last_request_at)

    def reset(self) -> None:
        self._usage.clear()
        self.last_reset = self._clock()
        logger.info("API usage counters reset")

    async def run_daily_reset(self, interval_seconds: float = DAILY_RESET_SECONDS) -> None:
        """Clear all counters every interval, starting from when this is awaited."""
        while True:
            await asyncio.sleep(interval_seconds)
            self.reset()
