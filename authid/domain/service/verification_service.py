"""Verification token domain service."""

import hashlib
import secrets
from datetime import timedelta
from uuid import uuid4

import logfire

from authid.config import SecuritySettings
from authid.domain.error import RateLimitExceeded, VerificationFailed
from authid.domain.model import VerificationToken
from authid.domain.model.common import utcnow
from authid.domain.repository import VerificationRepository
from authid.domain.service.base import Service
from authid.domain.service.rate_limiter import RateLimiter
from authid.domain.value import IdentifierId, UserId, VerificationId, VerificationPurpose


def rate_limit_key(identifier_type: str, value: str) -> str:
    """Rate limit bucket for an identifier (value already normalized)."""
    return f"identifier:{identifier_type}:{value}"


def hash_token(secret: str) -> str:
    """Digest under which a token secret is stored and looked up."""
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()

class VerificationService(Service):
    """Issues and consumes one-shot tokens."""

    def __init__(
        self,
        verification_repository: VerificationRepository,
        rate_limiter: RateLimiter,
        security: SecuritySettings,
    ) -> None:
        """Initialize verification service.

        Args:
            verification_repository: Token repository
            rate_limiter: Rate limiter for token issuance
            security: Token lifetimes
        """
        self.verification_repository = verification_repository
        self.rate_limiter = rate_limiter
        self.security = security

    async def enforce_rate_limit(self, key: str) -> None:
        """Count an attempt and refuse it when over budget.

        Raises:
            RateLimitExceeded: If the limiter refuses the attempt
        """
        result = await self.rate_limiter.check(key)
        if not result.allowed:
            retry_after = max(0, int((result.reset_at - utcnow()).total_seconds()))
            logfire.warn("Rate limit exceeded", retry_after_seconds=retry_after)
            raise RateLimitExceeded(retry_after)

    def _ttl(self, purpose: VerificationPurpose) -> timedelta:
        if purpose is VerificationPurpose.PASSWORD_RESET:
            return timedelta(minutes=self.security.reset_token_ttl_minutes)
        return timedelta(minutes=self.security.verification_token_ttl_minutes)

    async def issue(
        self,
        purpose: VerificationPurpose,
        user_id: UserId,
        destination: str,
        identifier_id: IdentifierId | None = None,
    ) -> VerificationToken:
        """Create and store a new token.

        Args:
            purpose: What the token proves
            user_id: User the token belongs to
            destination: Normalized value the token is sent to
            identifier_id: Identifier being verified (None in legacy mode)

        Returns:
            The stored token, carrying its secret in ``token``
        """
        with logfire.span(
            "verification_service.issue", purpose=purpose.value, user_id=str(user_id)
        ):
            now = utcnow()
            secret = secrets.token_urlsafe(32)
            token = await self.verification_repository.save(
                VerificationToken(
                    id=VerificationId(uuid4()),
                    token_hash=hash_token(secret),
                    purpose=purpose,
                    user_id=user_id,
                    identifier_id=identifier_id,
                    destination=destination,
                    expires_at=now + self._ttl(purpose),
                    created_at=now,
                )
            )
            logfire.info(
                "Verification token issued",
                verification_id=str(token.id),
                purpose=purpose.value,
            )
            return token.model_copy(update={"token": secret})

    async def consume(self, token: str, purpose: VerificationPurpose) -> VerificationToken:
        """Use a token up.

        Args:
            token: Secret token value
            purpose: Expected purpose

        Returns:
            The consumed token

        Raises:
            VerificationFailed: If the token is unknown, used, expired or
                issued for another purpose
        """
        with logfire.span("verification_service.consume", purpose=purpose.value):
            now = utcnow()
            stored = await self.verification_repository.find_by_hash(hash_token(token))
            if stored is None or stored.purpose is not purpose or not stored.is_usable(now):
                logfire.warn("Verification token rejected", purpose=purpose.value)
                raise VerificationFailed()

            consumed = await self.verification_repository.mark_consumed(stored.id, now)
            if consumed is None:
                logfire.warn("Verification token already consumed", purpose=purpose.value)
                raise VerificationFailed()

            logfire.info("Verification token consumed", verification_id=str(consumed.id))
            return consumed

    def confirm_destination(self, token: VerificationToken, current: str | None) -> None:
        """Refuse a token whose address changed after it was sent.

        A token only proves control of the value it was delivered to.

        Args:
            token: Consumed token
            current: The value the token would now mark verified

        Raises:
            VerificationFailed: If ``current`` is not where the token was sent
        """
        if token.destination is None or token.destination != current:
            logfire.warn(
                "Verification token destination changed",
                verification_id=str(token.id),
                purpose=token.purpose.value,
            )
            raise VerificationFailed()
