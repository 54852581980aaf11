"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from authid.domain.model import Identifier, LinkedAccount, User, VerificationToken
from authid.domain.value import (
    IdentifierId,
    LinkedAccountId,
    UserId,
    VerificationId,
    VerificationPurpose,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=UserId(_uuid(row["id"])),
        name=row.get("name"),
        role=row.get("role") or "user",
        custom_data=row.get("custom_data") or {},
        is_anonymous=row.get("is_anonymous", False),
        email=row.get("email"),
        email_verified=row.get("email_verified", False),
        password_hash=row.get("password_hash"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return user.model_dump()


def row_to_identifier(row: Dict[str, Any]) -> Identifier:
    """Convert database row to Identifier domain model."""
    return Identifier(
        id=IdentifierId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        type=row["type"],
        value=row["value"],
        verified=row["verified"],
        credential_hash=row.get("credential_hash"),
        metadata=row.get("metadata") or {},
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def identifier_to_dict(identifier: Identifier) -> Dict[str, Any]:
    """Convert Identifier domain model to database dict."""
    return identifier.model_dump()


def row_to_linked_account(row: Dict[str, Any]) -> LinkedAccount:
    """Convert database row to LinkedAccount domain model."""
    return LinkedAccount(
        id=LinkedAccountId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        provider=row["provider"],
        provider_account_id=row["provider_account_id"],
        access_token=row.get("access_token"),
        refresh_token=row.get("refresh_token"),
        id_token=row.get("id_token"),
        token_type=row.get("token_type"),
        scope=row.get("scope"),
        expires_at=row.get("expires_at"),
        created_at=row["created_at"],
    )


def linked_account_to_dict(account: LinkedAccount) -> Dict[str, Any]:
    """Convert LinkedAccount domain model to database dict."""
    return account.model_dump()


def row_to_verification_token(row: Dict[str, Any]) -> VerificationToken:
    """Convert database row to VerificationToken domain model."""
    identifier_id = row.get("identifier_id")
    return VerificationToken(
        id=VerificationId(_uuid(row["id"])),
        token_hash=row["token_hash"],
        purpose=VerificationPurpose(row["purpose"]),
        user_id=UserId(_uuid(row["user_id"])),
        identifier_id=IdentifierId(_uuid(identifier_id)) if identifier_id else None,
        destination=row.get("destination"),
        expires_at=row["expires_at"],
        consumed_at=row.get("consumed_at"),
        created_at=row["created_at"],
    )


def verification_token_to_dict(token: VerificationToken) -> Dict[str, Any]:
    """Convert VerificationToken domain model to database dict."""
    data = token.model_dump()
    data["purpose"] = token.purpose.value
    return data
