"""In-memory transaction manager."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from authid.domain.repository import TransactionManager
from authid.persistence.repository.inmemory.store import InMemoryStore


class InMemoryTransactionManager(TransactionManager):
    """Serializes atomic blocks and restores a snapshot on failure.

    The outermost block of a task holds the store lock; inner blocks only
    take a snapshot, so they roll back like savepoints.
    """

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    @asynccontextmanager
    async def atomic(self) -> AsyncIterator[None]:
        depth = self.store.atomic_depth.get()
        if depth == 0:
            await self.store.lock.acquire()
        token = self.store.atomic_depth.set(depth + 1)
        snapshot = self.store.snapshot()
        try:
            yield
        except BaseException:
            self.store.restore(snapshot)
            raise
        finally:
            self.store.atomic_depth.reset(token)
            if depth == 0:
                self.store.lock.release()

    async def commit(self) -> None:
        # Writes are applied in place; only count the boundary
        if self.store.atomic_depth.get() > 0:
            raise RuntimeError("commit() inside an atomic block")
        self.store.commits += 1
