"""Domain value objects for authid.

Value objects are immutable and defined by their values, not identity.
"""

from datetime import datetime
from enum import Enum

from authid.domain.value.common import ValueObject


class IdentifierType(str, Enum):
    """Identifier types the engine ships defaults for.

    Identifier ``type`` is an open string; any other value is accepted and
    routed with trim-only normalization and no credential eligibility.
    """

    EMAIL = "email"
    USERNAME = "username"
    PHONE = "phone"
    OAUTH = "oauth"
    PASSKEY = "passkey"
    ANONYMOUS = "anonymous"  # Synthetic marker for anonymous accounts


class IdentifierMode(str, Enum):
    """Engine operating mode."""

    VIRTUAL = "virtual"
    DIRECT = "direct"
    LEGACY = "legacy"


class RecoveryLevel(str, Enum):
    """Derived account recovery classification.

    Ordered by decreasing recoverability: FULL > PARTIAL > PSEUDONYMOUS > ANONYMOUS.
    """

    FULL = "FULL"
    PARTIAL = "PARTIAL"
    PSEUDONYMOUS = "PSEUDONYMOUS"
    ANONYMOUS = "ANONYMOUS"

    @property
    def rank(self) -> int:
        """Numeric rank, higher is more recoverable."""
        return _RECOVERY_RANK[self]

    def at_least(self, other: "RecoveryLevel") -> bool:
        """Whether this level is as recoverable as ``other`` or more."""
        return self.rank >= other.rank


_RECOVERY_RANK = {
    RecoveryLevel.ANONYMOUS: 0,
    RecoveryLevel.PSEUDONYMOUS: 1,
    RecoveryLevel.PARTIAL: 2,
    RecoveryLevel.FULL: 3,
}


class RecoveryAction(str, Enum):
    """Suggested next step for improving or using account recovery."""

    RESET_PASSWORD = "RESET_PASSWORD"
    OAUTH_RECOVERY = "OAUTH_RECOVERY"
    VERIFY_IDENTIFIER = "VERIFY_IDENTIFIER"
    ADD_RECOVERY_EMAIL = "ADD_RECOVERY_EMAIL"
    ACCOUNT_UPGRADE = "ACCOUNT_UPGRADE"


class VerificationPurpose(str, Enum):
    """What a verification token is for."""

    VERIFY_IDENTIFIER = "verify_identifier"
    PASSWORD_RESET = "password_reset"


class RateLimitResult(ValueObject):
    """Outcome of a rate limiter check."""

    allowed: bool
    remaining: int
    reset_at: datetime
