"""In-memory linked account repository for testing."""

from authid.domain.model import LinkedAccount
from authid.domain.repository import LinkedAccountRepository
from authid.domain.value import UserId
from authid.persistence.repository.inmemory.store import InMemoryStore


class InMemoryLinkedAccountRepository(LinkedAccountRepository):
    """In-memory implementation of LinkedAccountRepository."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self.store = store or InMemoryStore()

    async def save(self, account: LinkedAccount) -> LinkedAccount:
        """Save or update a linked account."""
        self.store.accounts[account.id] = account
        return account

    async def find_all_by_user_id(self, user_id: UserId) -> list[LinkedAccount]:
        """Get all accounts linked to a user, oldest first."""
        return sorted(
            (a for a in self.store.accounts.values() if a.user_id == user_id),
            key=lambda a: a.created_at,
        )

    async def find_by_provider(
        self, provider: str, provider_account_id: str
    ) -> LinkedAccount | None:
        """Get the account for a provider subject."""
        for account in self.store.accounts.values():
            if (
                account.provider == provider
                and account.provider_account_id == provider_account_id
            ):
                return account
        return None
