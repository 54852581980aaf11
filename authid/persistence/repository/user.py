"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from authid.domain.error import DuplicateIdentifierError
from authid.domain.model import User
from authid.domain.repository import UserRepository
from authid.domain.value import IdentifierType, Predicate, UserId
from authid.persistence.mappers import row_to_user, user_to_dict
from authid.persistence.repository.predicate import compile_predicate
from authid.persistence.tables import users_table

UNIQUE_EMAIL_INDEX = "uq_users_email"


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by the legacy email column.

        Args:
            email: Normalized email to search for

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.email == email)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_where(self, predicate: Predicate) -> list[User]:
        """Find users matching a translated filter."""
        stmt = (
            select(users_table)
            .where(compile_predicate(predicate))
            .order_by(users_table.c.created_at, users_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def find_page(
        self, after: Optional[UserId] = None, limit: int = 100
    ) -> list[User]:
        """Keyset page of users ordered by ID."""
        stmt = select(users_table).order_by(users_table.c.id).limit(limit)
        if after is not None:
            stmt = stmt.where(users_table.c.id > after)
        result = await self.session.execute(stmt)
        return [row_to_user(dict(row)) for row in result.mappings().all()]

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: User to save

        Returns:
            Saved user

        Raises:
            DuplicateIdentifierError: If the legacy email column is taken
        """
        # Check if user exists
        existing = await self.find_by_id(user.id)

        user_dict = user_to_dict(user)

        try:
            async with self.session.begin_nested():
                if existing:
                    stmt = (
                        users_table.update()
                        .where(users_table.c.id == user.id)
                        .values(**user_dict)
                    )
                else:
                    stmt = users_table.insert().values(**user_dict)
                await self.session.execute(stmt)
        except IntegrityError as e:
            if UNIQUE_EMAIL_INDEX not in str(e.orig):
                raise
            raise DuplicateIdentifierError(
                IdentifierType.EMAIL.value, user.email or ""
            ) from e

        return user

    async def delete(self, user_id: UserId) -> None:
        """Delete a user. Identifiers and accounts go with it (ON DELETE CASCADE)."""
        stmt = users_table.delete().where(users_table.c.id == user_id)
        await self.session.execute(stmt)
        await self.session.flush()
