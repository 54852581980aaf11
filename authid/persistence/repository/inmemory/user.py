"""In-memory user repository for testing."""

from typing import Optional

from authid.domain.error import DuplicateIdentifierError
from authid.domain.model.user import User
from authid.domain.repository.user import UserRepository
from authid.domain.value import IdentifierType, Predicate, UserId
from authid.persistence.repository.inmemory.predicate import matches
from authid.persistence.repository.inmemory.store import InMemoryStore


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self.store = store or InMemoryStore()

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self.store.users.get(user_id)

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by the legacy email column."""
        for user in self.store.users.values():
            if user.email is not None and user.email == email:
                return user
        return None

    async def find_where(self, predicate: Predicate) -> list[User]:
        """Find users matching a translated filter."""
        identifiers = list(self.store.identifiers.values())
        found = [
            user
            for user in self.store.users.values()
            if matches(predicate, user, (i for i in identifiers if i.user_id == user.id))
        ]
        return sorted(found, key=lambda u: u.created_at)

    async def find_page(
        self, after: Optional[UserId] = None, limit: int = 100
    ) -> list[User]:
        """Keyset page of users ordered by ID."""
        ordered = sorted(self.store.users.values(), key=lambda u: u.id)
        if after is not None:
            ordered = [u for u in ordered if u.id > after]
        return ordered[:limit]

    async def save(self, user: User) -> User:
        """Save or update a user."""
        if user.email is not None:
            for other in self.store.users.values():
                if other.id != user.id and other.email == user.email:
                    raise DuplicateIdentifierError(IdentifierType.EMAIL.value, user.email)
        self.store.users[user.id] = user
        return user

    async def delete(self, user_id: UserId) -> None:
        """Delete a user and cascade to identifiers, accounts and tokens."""
        self.store.users.pop(user_id, None)
        for identifier in [i for i in self.store.identifiers.values() if i.user_id == user_id]:
            self.store.identifiers.pop(identifier.id, None)
            self.store.identifier_keys.pop(identifier.key, None)
        for account_id in [a.id for a in self.store.accounts.values() if a.user_id == user_id]:
            self.store.accounts.pop(account_id, None)
        for token_id in [t.id for t in self.store.verifications.values() if t.user_id == user_id]:
            self.store.verifications.pop(token_id, None)
