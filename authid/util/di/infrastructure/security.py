"""Security infrastructure providers."""

from dishka import Scope, provide

from authid.adapter.password import BcryptPasswordHasher
from authid.adapter.ratelimit import InMemoryRateLimiter
from authid.config import SecuritySettings
from authid.domain.service import PasswordHasher, RateLimiter
from authid.util.di.base import ProviderBase


class SecurityProvider(ProviderBase):
    """Hashing and rate limiting bindings.

    APP-scoped: the rate limiter keeps its counters across requests.
    """

    scope = Scope.APP

    @provide
    def get_password_hasher(self, security: SecuritySettings) -> PasswordHasher:
        """Provide bcrypt password hasher."""
        return BcryptPasswordHasher(rounds=security.bcrypt_rounds)

    @provide
    def get_rate_limiter(self, security: SecuritySettings) -> RateLimiter:
        """Provide process-local rate limiter."""
        return InMemoryRateLimiter(
            limit=security.rate_limit_attempts,
            window_seconds=security.rate_limit_window_seconds,
        )
