"""In-memory identifier repository for testing."""

from typing import Optional

from authid.domain.error import DuplicateIdentifierError
from authid.domain.model import Identifier
from authid.domain.repository import IdentifierRepository
from authid.domain.value import IdentifierId, UserId
from authid.persistence.repository.inmemory.store import InMemoryStore


class InMemoryIdentifierRepository(IdentifierRepository):
    """In-memory implementation of IdentifierRepository.

    The ``identifier_keys`` index plays the role of the unique constraint.
    Check and insert happen without an await in between, so concurrent
    claims cannot both pass.
    """

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self.store = store or InMemoryStore()

    def _insert(self, identifier: Identifier) -> None:
        if identifier.key in self.store.identifier_keys:
            raise DuplicateIdentifierError(identifier.type, identifier.value)
        self.store.identifiers[identifier.id] = identifier
        self.store.identifier_keys[identifier.key] = identifier.id

    def _remove(self, identifier_id: IdentifierId) -> None:
        identifier = self.store.identifiers.pop(identifier_id, None)
        if identifier is not None:
            self.store.identifier_keys.pop(identifier.key, None)

    async def create(self, identifier: Identifier) -> Identifier:
        """Insert a new identifier."""
        self._insert(identifier)
        return identifier

    async def find_by_id(self, identifier_id: IdentifierId) -> Optional[Identifier]:
        """Find an identifier by ID."""
        return self.store.identifiers.get(identifier_id)

    async def find_by_value(
        self, identifier_type: str, value: str
    ) -> Optional[Identifier]:
        """Find an identifier by (type, value)."""
        identifier_id = self.store.identifier_keys.get((identifier_type, value))
        return self.store.identifiers.get(identifier_id) if identifier_id else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[Identifier]:
        """Get all identifiers of a user, oldest first."""
        return sorted(
            (i for i in self.store.identifiers.values() if i.user_id == user_id),
            key=lambda i: i.created_at,
        )

    async def find_user_id_by_value(
        self, identifier_type: str, value: str
    ) -> Optional[UserId]:
        """Resolve the owner of an identifier."""
        identifier = await self.find_by_value(identifier_type, value)
        return identifier.user_id if identifier else None

    async def update(self, identifier: Identifier) -> Identifier:
        """Update mutable fields of an existing identifier."""
        current = self.store.identifiers.get(identifier.id)
        if current is None:
            return identifier
        updated = current.model_copy(
            update={
                "verified": identifier.verified,
                "credential_hash": identifier.credential_hash,
                "metadata": identifier.metadata,
                "updated_at": identifier.updated_at,
            }
        )
        self.store.identifiers[identifier.id] = updated
        return updated

    async def replace(self, old_id: IdentifierId, new: Identifier) -> Identifier:
        """Delete ``old_id`` and insert ``new``; nothing changes on conflict."""
        old = self.store.identifiers.get(old_id)
        self._remove(old_id)
        try:
            self._insert(new)
        except DuplicateIdentifierError:
            if old is not None:
                self._insert(old)
            raise
        return new

    async def delete(self, identifier_id: IdentifierId) -> None:
        """Delete an identifier."""
        self._remove(identifier_id)
