"""User aggregate root.

The stored flat user record. Its legacy columns (``email``,
``email_verified``, ``password_hash``) are authoritative only in legacy
mode; in virtual mode the equivalent fields are projected from identifiers.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from authid.domain.model.common import DomainModel, utcnow
from authid.domain.value import UserId


class User(DomainModel):
    """Flat user record."""

    id: UserId
    name: Optional[str] = None
    role: str = "user"
    custom_data: dict[str, Any] = Field(default_factory=dict)
    is_anonymous: bool = False

    # Legacy columns
    email: Optional[str] = None
    email_verified: bool = False
    password_hash: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
