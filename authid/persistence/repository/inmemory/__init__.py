"""In-memory repository implementations for testing."""

from .identifier import InMemoryIdentifierRepository
from .linked_account import InMemoryLinkedAccountRepository
from .store import InMemoryStore
from .transaction import InMemoryTransactionManager
from .user import InMemoryUserRepository
from .verification import InMemoryVerificationRepository

__all__ = [
    "InMemoryIdentifierRepository",
    "InMemoryLinkedAccountRepository",
    "InMemoryStore",
    "InMemoryTransactionManager",
    "InMemoryUserRepository",
    "InMemoryVerificationRepository",
]
