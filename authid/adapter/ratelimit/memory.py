"""Fixed-window in-process rate limiter."""

from datetime import datetime, timedelta

from authid.domain.model.common import utcnow
from authid.domain.service.rate_limiter import RateLimiter
from authid.domain.value import RateLimitResult


class InMemoryRateLimiter(RateLimiter):
    """Counts attempts per key in fixed windows.

    Suitable for tests and single-process deployments; multi-process
    deployments bind a shared limiter instead.
    """

    def __init__(self, limit: int = 5, window_seconds: int = 3600) -> None:
        """Initialize limiter.

        Args:
            limit: Attempts allowed per key and window
            window_seconds: Window length
        """
        self.limit = limit
        self.window = timedelta(seconds=window_seconds)
        self._windows: dict[str, tuple[datetime, int]] = {}

    async def check(self, key: str) -> RateLimitResult:
        """Count one attempt against ``key``."""
        now = utcnow()
        reset_at, count = self._windows.get(key, (now + self.window, 0))
        if now >= reset_at:
            reset_at, count = now + self.window, 0

        count += 1
        self._windows[key] = (reset_at, count)
        return RateLimitResult(
            allowed=count <= self.limit,
            remaining=max(0, self.limit - count),
            reset_at=reset_at,
        )
