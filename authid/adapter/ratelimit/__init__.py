"""Rate limiter adapters."""

from .memory import InMemoryRateLimiter

__all__ = ["InMemoryRateLimiter"]
