"""Linked account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from authid.domain.model.linked_account import LinkedAccount
from authid.domain.value import UserId


class LinkedAccountRepository(ABC):
    """Repository for legacy federated account rows."""

    @abstractmethod
    async def save(self, account: LinkedAccount) -> LinkedAccount:
        """Save a linked account.

        Args:
            account: The account to save

        Returns:
            The saved account
        """
        pass

    @abstractmethod
    async def find_all_by_user_id(self, user_id: UserId) -> list[LinkedAccount]:
        """Get all accounts linked to a user.

        Args:
            user_id: The user's unique identifier

        Returns:
            Accounts ordered by created_at (may be empty)
        """
        pass

    @abstractmethod
    async def find_by_provider(
        self, provider: str, provider_account_id: str
    ) -> Optional[LinkedAccount]:
        """Get the account for a provider subject.

        Args:
            provider: Provider name
            provider_account_id: Subject id at the provider

        Returns:
            The account if linked, None otherwise
        """
        pass
