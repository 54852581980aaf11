"""Linked federated account (legacy account table)."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from authid.domain.model.common import DomainModel, utcnow
from authid.domain.value import LinkedAccountId, UserId


class LinkedAccount(DomainModel):
    """External provider account linked to a user.

    Pre-identifier record of federation. The migration runner turns each
    row into an ``oauth`` identifier.
    """

    id: LinkedAccountId
    user_id: UserId
    provider: str  # 'github', 'google', ...
    provider_account_id: str  # Subject id at the provider
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    id_token: Optional[str] = None
    token_type: Optional[str] = None
    scope: Optional[str] = None
    expires_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=utcnow)

    @property
    def subject(self) -> str:
        """Identifier value for this account."""
        return f"{self.provider}|{self.provider_account_id}"
