"""PostgreSQL transaction manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from authid.domain.repository import TransactionManager


class PostgresTransactionManager(TransactionManager):
    """Maps atomic blocks to savepoints on the request session.

    The request session itself is committed or rolled back by the
    persistence provider at the end of the request, unless a job commits
    earlier through ``commit()``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        async with self.session.begin_nested():
            yield

    async def commit(self) -> None:
        if self.session.in_nested_transaction():
            raise RuntimeError("commit() inside an atomic block")
        await self.session.commit()
