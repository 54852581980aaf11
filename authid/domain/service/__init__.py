"""Domain services."""

from .account_service import AccountService, IdentifierInput
from .base import Service
from .delivery import VerificationSender
from .identifier_service import (
    IdentifierService,
    credential_targets,
    primary_credential_identifier,
    resolve_credential_hash,
)
from .jwt_service import JWTService
from .migration_service import (
    MigrationReport,
    MigrationService,
    account_identifier,
    derive_identifiers,
)
from .mode_controller import ModeController
from .normalizer import differs_only_by_case_or_whitespace, normalize
from .password import PasswordHasher
from .query_translator import QueryTranslator
from .rate_limiter import RateLimiter
from .recovery import classify_recovery_level, suggest_recovery_actions
from .validators import IdentifierValidators, validate_password
from .verification_service import VerificationService, hash_token, rate_limit_key
from .virtual_fields import LegacyUserUpdate, VirtualFieldMapper

__all__ = [
    "AccountService",
    "IdentifierInput",
    "IdentifierService",
    "IdentifierValidators",
    "JWTService",
    "LegacyUserUpdate",
    "MigrationReport",
    "MigrationService",
    "ModeController",
    "PasswordHasher",
    "QueryTranslator",
    "RateLimiter",
    "Service",
    "VerificationSender",
    "VerificationService",
    "VirtualFieldMapper",
    "account_identifier",
    "classify_recovery_level",
    "credential_targets",
    "derive_identifiers",
    "differs_only_by_case_or_whitespace",
    "hash_token",
    "normalize",
    "primary_credential_identifier",
    "rate_limit_key",
    "resolve_credential_hash",
    "suggest_recovery_actions",
    "validate_password",
]
