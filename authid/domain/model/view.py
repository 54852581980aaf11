"""Read projections returned to callers."""

from datetime import datetime
from typing import Any, Optional

from pydantic import Field

from authid.domain.model.common import DomainModel
from authid.domain.model.identifier import Identifier
from authid.domain.value import RecoveryLevel, UserId


class UserView(DomainModel):
    """Legacy-shaped user as seen by callers.

    In virtual mode ``email``/``email_verified`` are computed from the
    identifier set; in legacy mode they come from the flat record; in
    direct mode they are always absent.
    """

    id: UserId
    name: Optional[str] = None
    role: str = "user"
    custom_data: dict[str, Any] = Field(default_factory=dict)
    is_anonymous: bool = False
    email: Optional[str] = None
    email_verified: bool = False
    recovery_level: RecoveryLevel
    identifiers: list[Identifier] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
