"""PostgreSQL implementation of LinkedAccount repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from authid.domain.model import LinkedAccount
from authid.domain.repository import LinkedAccountRepository
from authid.domain.value import UserId
from authid.persistence.mappers import linked_account_to_dict, row_to_linked_account
from authid.persistence.tables import linked_accounts_table


class PostgresLinkedAccountRepository(LinkedAccountRepository):
    """PostgreSQL implementation of LinkedAccountRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def save(self, account: LinkedAccount) -> LinkedAccount:
        """Save a linked account (create or update)."""
        account_dict = linked_account_to_dict(account)
        existing = await self.session.execute(
            select(linked_accounts_table.c.id).where(
                linked_accounts_table.c.id == account.id
            )
        )

        if existing.first():
            stmt = (
                linked_accounts_table.update()
                .where(linked_accounts_table.c.id == account.id)
                .values(**account_dict)
            )
        else:
            stmt = linked_accounts_table.insert().values(**account_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return account

    async def find_all_by_user_id(self, user_id: UserId) -> list[LinkedAccount]:
        """Get all accounts linked to a user, oldest first."""
        stmt = (
            select(linked_accounts_table)
            .where(linked_accounts_table.c.user_id == user_id)
            .order_by(linked_accounts_table.c.created_at)
        )
        result = await self.session.execute(stmt)
        return [row_to_linked_account(dict(row)) for row in result.mappings().all()]

    async def find_by_provider(
        self, provider: str, provider_account_id: str
    ) -> LinkedAccount | None:
        """Get the account for a provider subject."""
        stmt = select(linked_accounts_table).where(
            linked_accounts_table.c.provider == provider,
            linked_accounts_table.c.provider_account_id == provider_account_id,
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_linked_account(dict(row)) if row else None
