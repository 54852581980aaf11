"""Identifier entity.

One proof of identity bound to a user: an email address, a username, a
phone number, a federated subject, a passkey credential id, etc.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from authid.domain.model.common import DomainModel, utcnow
from authid.domain.value import IdentifierId, UserId


class Identifier(DomainModel):
    """Typed, normalized identifier owned by exactly one user.

    ``(type, value)`` is unique across all identifiers. ``value`` always
    holds the normalized form; the raw input is never persisted.
    """

    id: IdentifierId
    user_id: UserId
    type: str  # Open-ended; see IdentifierType for the built-in kinds
    value: str  # Normalized value
    verified: bool = False
    credential_hash: Optional[str] = None  # Only on credential-bearing types
    metadata: dict[str, Any] = Field(default_factory=dict)  # Opaque provider detail
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def key(self) -> tuple[str, str]:
        """Uniqueness key."""
        return (self.type, self.value)
