"""Verification token repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from authid.domain.model.verification import VerificationToken
from authid.domain.value import VerificationId


class VerificationRepository(ABC):
    """Repository for one-shot verification tokens."""

    @abstractmethod
    async def save(self, token: VerificationToken) -> VerificationToken:
        """Save a new token."""
        pass

    @abstractmethod
    async def find_by_id(self, token_id: VerificationId) -> Optional[VerificationToken]:
        """Find a token by ID."""
        pass

    @abstractmethod
    async def find_by_hash(self, token_hash: str) -> Optional[VerificationToken]:
        """Find a token by the digest of its secret."""
        pass

    @abstractmethod
    async def mark_consumed(
        self, token_id: VerificationId, consumed_at: datetime
    ) -> Optional[VerificationToken]:
        """Mark a token consumed unless it already is.

        Args:
            token_id: Token to consume
            consumed_at: Consumption time

        Returns:
            The consumed token, or None if another caller consumed it first
        """
        pass
