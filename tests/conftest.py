"""Test configuration and fixtures."""

from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from authid.config import IdentifierTableSettings, SecuritySettings, Settings
from authid.domain.model import Identifier, User
from authid.domain.value import IdentifierId, IdentifierMode, RecoveryLevel, UserId

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_settings(
    mode: IdentifierMode = IdentifierMode.VIRTUAL,
    *,
    warn_on_legacy_usage: bool = False,
    migrate_existing_data: bool = False,
    require_email: bool = False,
    minimum_recovery_level: RecoveryLevel | None = None,
    require_verification: bool = False,
    rate_limit_attempts: int = 5,
) -> Settings:
    """Settings for tests: cheap bcrypt, no response padding.

    Args:
        mode: Identifier table mode
        warn_on_legacy_usage: Emit deprecation warnings on legacy calls
        migrate_existing_data: Lazy migration on access
        require_email: Require an email identifier at sign-up
        minimum_recovery_level: Sign-in recovery gate
        require_verification: Sign-in verification gate
        rate_limit_attempts: Rate limit budget per identifier

    Returns:
        Settings object
    """
    return Settings(
        environment="test",
        identifier_table=IdentifierTableSettings(
            mode=mode,
            warn_on_legacy_usage=warn_on_legacy_usage,
            migrate_existing_data=migrate_existing_data,
            require_email=require_email,
        ),
        security=SecuritySettings(
            minimum_recovery_level=minimum_recovery_level,
            require_verification=require_verification,
            min_response_ms=0,
            bcrypt_rounds=4,
            rate_limit_attempts=rate_limit_attempts,
        ),
    )


def make_user(**overrides: Any) -> User:
    """Helper to build a flat user record."""
    data: dict[str, Any] = {
        "id": UserId(uuid4()),
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    data.update(overrides)
    return User(**data)


def make_identifier(
    user_id: UserId,
    identifier_type: str,
    value: str,
    verified: bool = False,
    minutes: int = 0,
    **overrides: Any,
) -> Identifier:
    """Helper to build an identifier created ``minutes`` after BASE_TIME.

    ``value`` is stored as given, so pass it already normalized.
    """
    created_at = BASE_TIME + timedelta(minutes=minutes)
    data: dict[str, Any] = {
        "id": IdentifierId(uuid4()),
        "user_id": user_id,
        "type": identifier_type,
        "value": value,
        "verified": verified,
        "created_at": created_at,
        "updated_at": created_at,
    }
    data.update(overrides)
    return Identifier(**data)
