"""PostgreSQL repository implementations."""

from authid.persistence.repository.identifier import PostgresIdentifierRepository
from authid.persistence.repository.linked_account import PostgresLinkedAccountRepository
from authid.persistence.repository.transaction import PostgresTransactionManager
from authid.persistence.repository.user import PostgresUserRepository
from authid.persistence.repository.verification import PostgresVerificationRepository

__all__ = [
    "PostgresIdentifierRepository",
    "PostgresLinkedAccountRepository",
    "PostgresTransactionManager",
    "PostgresUserRepository",
    "PostgresVerificationRepository",
]
