"""SQLAlchemy table definitions for authid.

These table definitions are used with SQLAlchemy Core.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# USERS TABLE (flat record, legacy columns kept for legacy mode and rollback)
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("name", String(255), nullable=True),
    Column("role", String(50), nullable=False, server_default="user"),
    Column("custom_data", JSONB, nullable=False, server_default="{}"),
    Column("is_anonymous", Boolean, nullable=False, server_default="false"),
    Column("email", String(320), nullable=True),  # Legacy column
    Column("email_verified", Boolean, nullable=False, server_default="false"),  # Legacy column
    Column("password_hash", Text, nullable=True),  # Legacy column
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "uq_users_email",
    users_table.c.email,
    unique=True,
    postgresql_where=text("email IS NOT NULL"),
)

# ============================================================================
# IDENTIFIERS TABLE (authoritative in virtual and direct modes)
# ============================================================================
identifiers_table = Table(
    "identifiers",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("type", String(50), nullable=False),  # 'email', 'username', 'phone', ...
    Column("value", String(512), nullable=False),  # Normalized value
    Column("verified", Boolean, nullable=False, server_default="false"),
    Column("credential_hash", Text, nullable=True),
    Column("metadata", JSONB, nullable=False, server_default="{}"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("type", "value", name="uq_identifier_type_value"),
)

Index("idx_identifiers_user_id", identifiers_table.c.user_id)

# ============================================================================
# LINKED ACCOUNTS TABLE (legacy federation records)
# ============================================================================
linked_accounts_table = Table(
    "linked_accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column("provider", String(50), nullable=False),
    Column("provider_account_id", String(255), nullable=False),
    Column("access_token", Text, nullable=True),
    Column("refresh_token", Text, nullable=True),
    Column("id_token", Text, nullable=True),
    Column("token_type", String(50), nullable=True),
    Column("scope", Text, nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("provider", "provider_account_id", name="uq_linked_account"),
)

Index("idx_linked_accounts_user_id", linked_accounts_table.c.user_id)

# ============================================================================
# VERIFICATION TOKENS TABLE
# ============================================================================
verification_tokens_table = Table(
    "verification_tokens",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("token_hash", String(64), nullable=False, unique=True),  # SHA-256 hex
    Column("destination", String(320), nullable=True),
    Column("purpose", String(50), nullable=False),
    Column("user_id", UUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
    Column(
        "identifier_id",
        UUID,
        ForeignKey("identifiers.id", ondelete="CASCADE"),
        nullable=True,
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("consumed_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_verification_tokens_user_id", verification_tokens_table.c.user_id)
