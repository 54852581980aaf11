"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from authid.domain.model.user import User
from authid.domain.value import Predicate, UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for flat user record persistence.
    Implementations live in the persistence layer.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by the legacy email column.

        Args:
            email: Normalized email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_where(self, predicate: Predicate) -> list[User]:
        """Find users matching a storage predicate.

        Args:
            predicate: Translated filter (see QueryTranslator)

        Returns:
            Matching users ordered by created_at
        """
        pass

    @abstractmethod
    async def find_page(
        self, after: Optional[UserId] = None, limit: int = 100
    ) -> list[User]:
        """Keyset page of users ordered by ID.

        Args:
            after: Return users with an ID greater than this one
            limit: Page size

        Returns:
            Up to ``limit`` users
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass

    @abstractmethod
    async def delete(self, user_id: UserId) -> None:
        """Delete a user and, by cascade, its identifiers and accounts.

        Args:
            user_id: The user's unique identifier
        """
        pass
