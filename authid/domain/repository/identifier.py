"""Identifier repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from authid.domain.model.identifier import Identifier
from authid.domain.value import IdentifierId, UserId


class IdentifierRepository(ABC):
    """Repository for Identifier entity.

    The storage contract the engine requires. ``value`` arguments are
    always normalized by the caller. Implementations must raise
    DuplicateIdentifierError when a write would violate the
    ``(type, value)`` unique constraint.
    """

    @abstractmethod
    async def create(self, identifier: Identifier) -> Identifier:
        """Insert a new identifier.

        Args:
            identifier: The identifier to insert

        Returns:
            The stored identifier

        Raises:
            DuplicateIdentifierError: If (type, value) is already taken
        """
        pass

    @abstractmethod
    async def find_by_id(self, identifier_id: IdentifierId) -> Optional[Identifier]:
        """Find an identifier by ID.

        Args:
            identifier_id: The identifier's unique key

        Returns:
            The identifier if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_value(
        self, identifier_type: str, value: str
    ) -> Optional[Identifier]:
        """Find an identifier by its uniqueness key.

        Args:
            identifier_type: Identifier type
            value: Normalized value

        Returns:
            The identifier if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[Identifier]:
        """Get all identifiers of a user, oldest first.

        Args:
            user_id: The owning user

        Returns:
            Identifiers ordered by created_at (may be empty)
        """
        pass

    @abstractmethod
    async def find_user_id_by_value(
        self, identifier_type: str, value: str
    ) -> Optional[UserId]:
        """Resolve the owner of an identifier.

        Args:
            identifier_type: Identifier type
            value: Normalized value

        Returns:
            The owning user's ID if the identifier exists, None otherwise
        """
        pass

    @abstractmethod
    async def update(self, identifier: Identifier) -> Identifier:
        """Update mutable fields of an existing identifier.

        Only ``verified``, ``credential_hash``, ``metadata`` and
        ``updated_at`` change. Value changes go through ``replace``.

        Args:
            identifier: Identifier carrying the new field values

        Returns:
            The updated identifier
        """
        pass

    @abstractmethod
    async def replace(self, old_id: IdentifierId, new: Identifier) -> Identifier:
        """Atomically delete one identifier and create another.

        Either both happen or neither does.

        Args:
            old_id: Identifier to delete
            new: Identifier to create

        Returns:
            The created identifier

        Raises:
            DuplicateIdentifierError: If the new (type, value) is taken
        """
        pass

    @abstractmethod
    async def delete(self, identifier_id: IdentifierId) -> None:
        """Delete an identifier.

        Args:
            identifier_id: Identifier to delete
        """
        pass
