"""Rate limiting capability."""

from authid.domain.value import RateLimitResult


class RateLimiter:
    """Rate limiter interface.

    Consumed by verification and password reset flows. Keys look like
    ``identifier:email:someone@example.com``.
    """

    async def check(self, key: str) -> RateLimitResult:
        """Count one attempt against ``key``.

        Args:
            key: Rate limit bucket key

        Returns:
            Whether the attempt is allowed, remaining budget and reset time
        """
        raise NotImplementedError
