"""Domain value objects for authid."""

from authid.domain.value.identifiers import (
    IdentifierId,
    LinkedAccountId,
    UserId,
    VerificationId,
)
from authid.domain.value.predicate import (
    AllOf,
    AnyOf,
    FieldEquals,
    HasIdentifier,
    Predicate,
)
from authid.domain.value.types import (
    IdentifierMode,
    IdentifierType,
    RateLimitResult,
    RecoveryAction,
    RecoveryLevel,
    VerificationPurpose,
)

__all__ = [
    # Identifiers
    "UserId",
    "IdentifierId",
    "LinkedAccountId",
    "VerificationId",
    # Types
    "IdentifierType",
    "IdentifierMode",
    "RecoveryLevel",
    "RecoveryAction",
    "VerificationPurpose",
    "RateLimitResult",
    # Storage predicates
    "Predicate",
    "FieldEquals",
    "HasIdentifier",
    "AllOf",
    "AnyOf",
]
