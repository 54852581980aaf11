"""PostgreSQL implementation of Identifier repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from authid.domain.error import DuplicateIdentifierError
from authid.domain.model import Identifier
from authid.domain.repository import IdentifierRepository
from authid.domain.value import IdentifierId, UserId
from authid.persistence.mappers import identifier_to_dict, row_to_identifier
from authid.persistence.tables import identifiers_table

UNIQUE_CONSTRAINT = "uq_identifier_type_value"


class PostgresIdentifierRepository(IdentifierRepository):
    """PostgreSQL implementation of IdentifierRepository.

    Writes that can hit the unique constraint run inside a savepoint so a
    collision leaves the surrounding transaction usable.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, identifier: Identifier) -> Identifier:
        """Insert a new identifier."""
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    identifiers_table.insert().values(**identifier_to_dict(identifier))
                )
        except IntegrityError as e:
            if UNIQUE_CONSTRAINT not in str(e.orig):
                raise
            raise DuplicateIdentifierError(identifier.type, identifier.value) from e
        return identifier

    async def find_by_id(self, identifier_id: IdentifierId) -> Optional[Identifier]:
        """Find an identifier by ID."""
        stmt = select(identifiers_table).where(identifiers_table.c.id == identifier_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_identifier(dict(row)) if row else None

    async def find_by_value(
        self, identifier_type: str, value: str
    ) -> Optional[Identifier]:
        """Find an identifier by (type, value)."""
        stmt = select(identifiers_table).where(
            identifiers_table.c.type == identifier_type,
            identifiers_table.c.value == value,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_identifier(dict(row)) if row else None

    async def find_all_by_user_id(self, user_id: UserId) -> list[Identifier]:
        """Get all identifiers of a user, oldest first."""
        stmt = (
            select(identifiers_table)
            .where(identifiers_table.c.user_id == user_id)
            .order_by(identifiers_table.c.created_at, identifiers_table.c.id)
        )
        result = await self.session.execute(stmt)
        return [row_to_identifier(dict(row)) for row in result.mappings().all()]

    async def find_user_id_by_value(
        self, identifier_type: str, value: str
    ) -> Optional[UserId]:
        """Resolve the owner of an identifier."""
        stmt = select(identifiers_table.c.user_id).where(
            identifiers_table.c.type == identifier_type,
            identifiers_table.c.value == value,
        )
        result = await self.session.execute(stmt)
        user_id = result.scalar_one_or_none()
        return UserId(user_id) if user_id else None

    async def update(self, identifier: Identifier) -> Identifier:
        """Update verification, credential and metadata of an identifier."""
        stmt = (
            identifiers_table.update()
            .where(identifiers_table.c.id == identifier.id)
            .values(
                verified=identifier.verified,
                credential_hash=identifier.credential_hash,
                metadata=identifier.metadata,
                updated_at=identifier.updated_at,
            )
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return identifier

    async def replace(self, old_id: IdentifierId, new: Identifier) -> Identifier:
        """Delete ``old_id`` and insert ``new`` in one savepoint."""
        try:
            async with self.session.begin_nested():
                await self.session.execute(
                    identifiers_table.delete().where(identifiers_table.c.id == old_id)
                )
                await self.session.execute(
                    identifiers_table.insert().values(**identifier_to_dict(new))
                )
        except IntegrityError as e:
            if UNIQUE_CONSTRAINT not in str(e.orig):
                raise
            raise DuplicateIdentifierError(new.type, new.value) from e
        return new

    async def delete(self, identifier_id: IdentifierId) -> None:
        """Delete an identifier."""
        stmt = identifiers_table.delete().where(identifiers_table.c.id == identifier_id)
        await self.session.execute(stmt)
        await self.session.flush()
