"""Migration of legacy flat records into identifiers."""

from collections.abc import Sequence
from typing import Any
from uuid import uuid4

import logfire
from pydantic import BaseModel, Field

from authid.config import NormalizationSettings
from authid.domain.error import DomainError
from authid.domain.model import Identifier, LinkedAccount, User
from authid.domain.repository import (
    IdentifierRepository,
    LinkedAccountRepository,
    TransactionManager,
    UserRepository,
)
from authid.domain.service.base import Service
from authid.domain.service.identifier_service import IdentifierService
from authid.domain.service.normalizer import normalize
from authid.domain.value import IdentifierId, IdentifierType, UserId

_TOKEN_FIELDS = ("access_token", "refresh_token", "id_token", "token_type", "scope")


class MigrationReport(BaseModel):
    """Outcome of a batch migration."""

    migrated: list[UserId] = Field(default_factory=list)
    unchanged: list[UserId] = Field(default_factory=list)
    failed: dict[UserId, str] = Field(default_factory=dict)

    @property
    def total(self) -> int:
        return len(self.migrated) + len(self.unchanged) + len(self.failed)


def _account_metadata(account: LinkedAccount) -> dict[str, Any]:
    metadata: dict[str, Any] = {"provider": account.provider}
    for field in _TOKEN_FIELDS:
        value = getattr(account, field)
        if value:
            metadata[field] = value
    if account.expires_at is not None:
        metadata["expires_at"] = account.expires_at.isoformat()
    return metadata


def account_identifier(
    account: LinkedAccount, normalization: NormalizationSettings | None = None
) -> Identifier:
    """The ``oauth`` identifier standing for a linked account."""
    return Identifier(
        id=IdentifierId(uuid4()),
        user_id=account.user_id,
        type=IdentifierType.OAUTH.value,
        value=normalize(IdentifierType.OAUTH, account.subject, normalization),
        verified=True,
        metadata=_account_metadata(account),
        created_at=account.created_at,
        updated_at=account.created_at,
    )


def derive_identifiers(
    user: User,
    accounts: Sequence[LinkedAccount],
    normalization: NormalizationSettings | None = None,
) -> list[Identifier]:
    """Identifiers implied by a flat user record and its linked accounts.

    Args:
        user: Flat user record
        accounts: Accounts linked to the user
        normalization: Normalization policy

    Returns:
        Unsaved identifiers, oldest first
    """
    derived: list[Identifier] = []

    if user.email:
        derived.append(
            Identifier(
                id=IdentifierId(uuid4()),
                user_id=user.id,
                type=IdentifierType.EMAIL.value,
                value=normalize(IdentifierType.EMAIL, user.email, normalization),
                verified=user.email_verified,
                credential_hash=user.password_hash,
                created_at=user.created_at,
                updated_at=user.updated_at,
            )
        )

    derived.extend(account_identifier(account, normalization) for account in accounts)

    return sorted(derived, key=lambda i: i.created_at)


class MigrationService(Service):
    """Moves legacy flat records into the identifier store.

    Legacy columns are left in place; rollback is a mode switch.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        identifier_repository: IdentifierRepository,
        linked_account_repository: LinkedAccountRepository,
        identifier_service: IdentifierService,
        transaction_manager: TransactionManager,
        normalization: NormalizationSettings,
    ) -> None:
        """Initialize migration service.

        Args:
            user_repository: User repository
            identifier_repository: Identifier repository
            linked_account_repository: Linked account repository
            identifier_service: Claims identifiers idempotently
            transaction_manager: Per-user transaction boundary
            normalization: Normalization policy
        """
        self.user_repository = user_repository
        self.identifier_repository = identifier_repository
        self.linked_account_repository = linked_account_repository
        self.identifier_service = identifier_service
        self.transaction_manager = transaction_manager
        self.normalization = normalization

    async def derive(self, user: User) -> list[Identifier]:
        """Derive (without saving) the identifiers of a flat record."""
        accounts = await self.linked_account_repository.find_all_by_user_id(user.id)
        return derive_identifiers(user, accounts, self.normalization)

    async def migrate_user(self, user: User) -> list[Identifier]:
        """Migrate one user. Safe to call any number of times.

        A user who already has identifier rows is migrated: their rows are
        returned untouched and the legacy columns are not read again, so
        later changes made through the identifier table are never undone.

        Args:
            user: Flat user record

        Returns:
            The user's identifiers after migration

        Raises:
            IdentifierConflict: If a derived value is owned by another user
            MigrationInProgress: If a concurrent migration holds a claim
        """
        identifiers, _ = await self._migrate(user)
        return identifiers

    async def _migrate(self, user: User) -> tuple[list[Identifier], bool]:
        with logfire.span("migration_service.migrate_user", user_id=str(user.id)):
            existing = await self.identifier_repository.find_all_by_user_id(user.id)
            if existing:
                logfire.info(
                    "User already migrated",
                    user_id=str(user.id),
                    identifiers=len(existing),
                )
                return existing, False

            derived = await self.derive(user)
            async with self.transaction_manager.atomic():
                for identifier in derived:
                    await self.identifier_service.claim(identifier, migration=True)

            identifiers = await self.identifier_repository.find_all_by_user_id(user.id)
            logfire.info(
                "User migrated" if identifiers else "Nothing to migrate",
                user_id=str(user.id),
                identifiers=len(identifiers),
            )
            return identifiers, bool(identifiers)

    async def migrate_all(self, batch_size: int = 100) -> MigrationReport:
        """Migrate every user, one committed transaction per user.

        Users are paged by id. Each user's outcome is committed before the
        next user starts, so an interrupted run keeps its progress and a
        re-run skips the users it already migrated. A failing user is
        recorded and skipped.

        Args:
            batch_size: Users per page

        Returns:
            Per-user outcome

        Raises:
            RuntimeError: If called inside an atomic block
        """
        report = MigrationReport()
        with logfire.span("migration_service.migrate_all", batch_size=batch_size):
            after: UserId | None = None
            while True:
                page = await self.user_repository.find_page(after=after, limit=batch_size)
                if not page:
                    break

                for user in page:
                    try:
                        _, changed = await self._migrate(user)
                    except DomainError as e:
                        logfire.error(
                            "User migration failed",
                            user_id=str(user.id),
                            error=str(e),
                        )
                        report.failed[user.id] = str(e)
                    else:
                        (report.migrated if changed else report.unchanged).append(user.id)
                    await self.transaction_manager.commit()

                after = page[-1].id
                logfire.info(
                    "Migration batch done",
                    migrated=len(report.migrated),
                    unchanged=len(report.unchanged),
                    failed=len(report.failed),
                )

            return report
