"""PostgreSQL implementation of Verification repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from authid.domain.model import VerificationToken
from authid.domain.repository import VerificationRepository
from authid.domain.value import VerificationId
from authid.persistence.mappers import (
    row_to_verification_token,
    verification_token_to_dict,
)
from authid.persistence.tables import verification_tokens_table


class PostgresVerificationRepository(VerificationRepository):
    """PostgreSQL implementation of VerificationRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, token: VerificationToken) -> VerificationToken:
        """Insert a new token."""
        stmt = verification_tokens_table.insert().values(
            **verification_token_to_dict(token)
        )
        await self.session.execute(stmt)
        await self.session.flush()
        return token

    async def find_by_id(self, token_id: VerificationId) -> Optional[VerificationToken]:
        """Find a token by ID."""
        stmt = select(verification_tokens_table).where(
            verification_tokens_table.c.id == token_id
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_verification_token(dict(row)) if row else None

    async def find_by_hash(self, token_hash: str) -> Optional[VerificationToken]:
        """Find a token by the digest of its secret."""
        stmt = select(verification_tokens_table).where(
            verification_tokens_table.c.token_hash == token_hash
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_verification_token(dict(row)) if row else None

    async def mark_consumed(
        self, token_id: VerificationId, consumed_at: datetime
    ) -> Optional[VerificationToken]:
        """Consume a token with a conditional update."""
        stmt = (
            verification_tokens_table.update()
            .where(
                verification_tokens_table.c.id == token_id,
                verification_tokens_table.c.consumed_at.is_(None),
            )
            .values(consumed_at=consumed_at)
            .returning(*verification_tokens_table.c)
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_verification_token(dict(row)) if row else None
