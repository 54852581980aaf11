"""Repository interfaces for the authid domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from authid.domain.repository.identifier import IdentifierRepository
from authid.domain.repository.linked_account import LinkedAccountRepository
from authid.domain.repository.transaction import TransactionManager
from authid.domain.repository.user import UserRepository
from authid.domain.repository.verification import VerificationRepository

__all__ = [
    "IdentifierRepository",
    "LinkedAccountRepository",
    "TransactionManager",
    "UserRepository",
    "VerificationRepository",
]
