"""hash verification tokens and bind them to a destination

Revision ID: 9d4e2b7c1a38
Revises: 3c1f9a7e2b4d
Create Date: 2026-10-19 16:40:08.201733

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "9d4e2b7c1a38"
down_revision: Union[str, Sequence[str], None] = "3c1f9a7e2b4d"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # 1. Replace stored secrets with their SHA-256 digest
    op.drop_constraint(
        "verification_tokens_token_key", "verification_tokens", type_="unique"
    )
    op.alter_column(
        "verification_tokens",
        "token",
        new_column_name="token_hash",
        type_=sa.String(length=64),
        postgresql_using="encode(sha256(token::bytea), 'hex')",
    )
    op.create_unique_constraint(
        "verification_tokens_token_hash_key", "verification_tokens", ["token_hash"]
    )

    # 2. Record where each token was sent. Outstanding tokens predate it and
    # are expired, since they can no longer be checked against an address.
    op.add_column(
        "verification_tokens",
        sa.Column("destination", sa.String(length=320), nullable=True),
    )
    op.execute("""
        UPDATE verification_tokens
        SET expires_at = NOW()
        WHERE consumed_at IS NULL AND expires_at > NOW()
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_column("verification_tokens", "destination")

    # Digests cannot be turned back into secrets; the column keeps them
    op.drop_constraint(
        "verification_tokens_token_hash_key", "verification_tokens", type_="unique"
    )
    op.alter_column(
        "verification_tokens",
        "token_hash",
        new_column_name="token",
        type_=sa.String(length=128),
    )
    op.create_unique_constraint(
        "verification_tokens_token_key", "verification_tokens", ["token"]
    )
