"""Transaction boundary interface."""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager


class TransactionManager(ABC):
    """Groups repository writes into one all-or-nothing unit.

    Usage:
        async with transaction_manager.atomic():
            await user_repository.save(user)
            await identifier_repository.create(identifier)

    Nested ``atomic()`` blocks behave like savepoints: if a block raises,
    the writes made inside it are undone and the exception propagates,
    while the enclosing unit stays usable.
    """

    @abstractmethod
    def atomic(self) -> AbstractAsyncContextManager[None]:
        """Open an atomic unit of work."""
        pass

    @abstractmethod
    async def commit(self) -> None:
        """Make everything written so far durable and release its locks.

        Long-running jobs call this between independent units so that one
        failure or crash never undoes earlier units.

        Raises:
            RuntimeError: If called inside an atomic block
        """
        pass
