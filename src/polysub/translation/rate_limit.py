"""Per-provider rate-limit tracking with exponential backoff."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass

from polysub.core.config import RateLimitConfig


@dataclass(frozen=True)
class RateLimitState:
    consecutive_failures: int = 0
    last_failure_at: float = 0.0


class RateLimitTracker:
    """Counts consecutive failures for one provider and computes backoff delays.

    One instance per provider is shared by every session in the process, so
    failures accumulate across sessions until a success resets them.
    """

    def __init__(self, config: RateLimitConfig | None = None) -> None:
        self.config = config or RateLimitConfig()
        self._consecutive_failures = 0
        self._last_failure_at = 0.0
        self._lock = threading.Lock()

    @property
    def state(self) -> RateLimitState:
        with self._lock:
            return RateLimitState(self._consecutive_failures, self._last_failure_at)

    def record_failure(self, retry_after_seconds: int | None = None) -> int:
        """Record a failed call and return the delay to wait, in milliseconds.

        A server-provided retry-after is used verbatim. Otherwise the delay is
        initial_delay * multiplier^(failures - 1), capped at max_delay.
        """
        with self._lock:
            self._consecutive_failures += 1
            self._last_failure_at = time.time()
            failures = self._consecutive_failures

        if retry_after_seconds is not None and retry_after_seconds > 0:
            return retry_after_seconds * 1000

        exponent = min(failures - 1, 64)  # float overflow guard
        delay = self.config.initial_delay_ms * self.config.multiplier**exponent
        return int(min(delay, self.config.max_delay_ms))

    def record_success(self) -> None:
        with self._lock:
            self._consecutive_failures = 0

    def should_give_up(self) -> bool:
        with self._lock:
            return self._consecutive_failures >= self.config.max_retries

    def reset(self) -> None:
        with self._lock:
            self._consecutive_failures = 0
            self._last_failure_at = 0.0
