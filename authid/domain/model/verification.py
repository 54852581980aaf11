"""Verification token entity."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from authid.domain.model.common import DomainModel, utcnow
from authid.domain.value import IdentifierId, UserId, VerificationId, VerificationPurpose


class VerificationToken(DomainModel):
    """One-shot token proving control of an identifier.

    Bound to an identifier, or to a user record in legacy mode where no
    identifier rows exist, and in both cases to the normalized value it
    was sent to. Only a digest of the secret is stored; ``token`` holds
    the secret on the copy returned at issue time and is never persisted.
    """

    id: VerificationId
    token_hash: str
    purpose: VerificationPurpose
    user_id: UserId
    identifier_id: Optional[IdentifierId] = None
    destination: Optional[str] = None
    expires_at: datetime
    consumed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)
    token: Optional[str] = Field(default=None, exclude=True)

    def is_usable(self, now: datetime) -> bool:
        """Whether the token can still be consumed."""
        return self.consumed_at is None and now < self.expires_at
