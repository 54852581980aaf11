"""In-memory verification token repository for testing."""

from datetime import datetime
from typing import Optional

from authid.domain.model import VerificationToken
from authid.domain.repository import VerificationRepository
from authid.domain.value import VerificationId
from authid.persistence.repository.inmemory.store import InMemoryStore


class InMemoryVerificationRepository(VerificationRepository):
    """In-memory implementation of VerificationRepository."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self.store = store or InMemoryStore()

    async def save(self, token: VerificationToken) -> VerificationToken:
        """Save a token."""
        self.store.verifications[token.id] = token
        return token

    async def find_by_id(self, token_id: VerificationId) -> Optional[VerificationToken]:
        """Find a token by ID."""
        return self.store.verifications.get(token_id)

    async def find_by_hash(self, token_hash: str) -> Optional[VerificationToken]:
        """Find a token by the digest of its secret."""
        for stored in self.store.verifications.values():
            if stored.token_hash == token_hash:
                return stored
        return None

    async def mark_consumed(
        self, token_id: VerificationId, consumed_at: datetime
    ) -> Optional[VerificationToken]:
        """Consume a token unless it already is."""
        stored = self.store.verifications.get(token_id)
        if stored is None or stored.consumed_at is not None:
            return None
        consumed = stored.model_copy(update={"consumed_at": consumed_at})
        self.store.verifications[token_id] = consumed
        return consumed
