"""Retry with exponential backoff and fallback across Gemini models.

The decision of what to do after a failed attempt is a pure function
(`decide`) so it can be tested without any I/O. `FallbackScheduler` wires it
to the rate limiter and the actual provider call.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, TypeVar

from app.core.errors import AllModelsRateLimited, RateLimitExceeded
from app.services.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

T = TypeVar("T")

FALLBACK_MODELS: dict[str, list[str]] = {
    "gemini-1.5-pro": ["gemini-2.0-flash", "gemini-2.5-pro"],
    "gemini-2.5-pro": ["gemini-2.0-flash", "gemini-1.5-pro"],
    "gemini-2.0-flash": ["gemini-1.5-pro", "gemini-2.5-pro"],
}

_THROTTLE_MARKERS = ("429", "quota", "Rate limit exceeded")


def candidate_models(primary: str) -> list[str]:
    return [primary, *FALLBACK_MODELS.get(primary, [])]


def is_throttling_error(err: BaseException) -> bool:
    """True when the provider told us we exceeded a quota."""
    for attr in ("status", "code", "status_code"):
        if getattr(err, attr, None) == 429:
            return True
    message = str(err)
    return any(marker in message for marker in _THROTTLE_MARKERS)


def backoff_delay_ms(attempt: int, base_ms: int = 1000, max_ms: int = 30000) -> int:
    return min(base_ms * 2 ** (attempt - 1), max_ms)


@dataclass(frozen=True)
class RetryDecision:
    action: Literal["retry", "advance", "give_up"]
    delay_ms: int = 0


def decide(
    attempt: int,
    max_attempts: int,
    throttled: bool,
    last_candidate: bool,
    base_ms: int = 1000,
    max_ms: int = 30000,
) -> RetryDecision:
    """What to do after attempt (1-based) on the current model failed."""
    if not throttled:
        return RetryDecision("advance")
    if attempt >= max_attempts and last_candidate:
        return RetryDecision("give_up")

    delay = backoff_delay_ms(attempt, base_ms, max_ms)
    if attempt >= max_attempts:
        return RetryDecision("advance", delay)
    return RetryDecision("retry", delay)


async def _sleep_ms(ms: int) -> None:
    await asyncio.sleep(ms / 1000)


class FallbackScheduler:
    def __init__(
        self,
        rate_limiter: RateLimiter,
        max_retries: int = 2,
        base_delay_ms: int = 1000,
        max_delay_ms: int = 30000,
        sleep: Callable[[int], Awaitable[None]] = _sleep_ms,
    ):
        self.rate_limiter = rate_limiter
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self._sleep = sleep

    async def execute(self, call: Callable[[str], Awaitable[T]], primary_model: str) -> T:
        """Run call(model) on primary_model, backing off and falling back on failure."""
        models = candidate_models(primary_model)
        last_error: Exception | None = None

        for index, model in enumerate(models):
            last_candidate = index == len(models) - 1

            try:
                self.rate_limiter.check_and_consume(model)
            except RateLimitExceeded as e:
                logger.info(f"{e} Trying next model...")
                last_error = e
                continue

            for attempt in range(1, self.max_retries + 1):
                try:
                    return await call(model)
                except Exception as e:
                    last_error = e
                    logger.warning(f"Attempt {attempt} failed for {model}: {e}")

                    decision = decide(
                        attempt,
                        self.max_retries,
                        is_throttling_error(e),
                        last_candidate,
                        self.base_delay_ms,
                        self.max_delay_ms,
                    )
                    if decision.action == "give_up":
                        raise AllModelsRateLimited(e) from e
                    if decision.delay_ms:
                        logger.info(f"Rate limited on {model}. Waiting {decision.delay_ms}ms...")
                        await self._sleep(decision.delay_ms)
                    if decision.action == "advance":
                        break

        raise AllModelsRateLimited(last_error)
