"""Identifier domain service.

Owns the uniqueness and conflict rules for identifiers: normalize, validate,
then let the store's unique constraint decide. A collision with the same
owner is an idempotent success; a collision with another owner is an
IdentifierConflict.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import uuid4

import logfire

from authid.config import IdentifierPolicySettings, NormalizationSettings
from authid.domain.error import (
    DuplicateIdentifierError,
    IdentifierConflict,
    IdentifierNotFound,
    MigrationInProgress,
    ValidationError,
)
from authid.domain.model.identifier import Identifier
from authid.domain.repository import IdentifierRepository, TransactionManager
from authid.domain.service.base import Service
from authid.domain.service.normalizer import normalize
from authid.domain.service.validators import IdentifierValidators
from authid.domain.value import IdentifierId, UserId


def primary_credential_identifier(
    identifiers: Sequence[Identifier], policy: IdentifierPolicySettings
) -> Optional[Identifier]:
    """Pick the identifier backing the user's password login.

    Among credential-bearing identifiers, those already holding a hash win;
    within a group the first verified one wins, else the first created.

    Args:
        identifiers: The user's identifiers, oldest first
        policy: Type routing

    Returns:
        The primary credential identifier, or None if the user has no
        credential-bearing identifier
    """
    eligible = [i for i in identifiers if i.type in policy.credential_types]
    holders = [i for i in eligible if i.credential_hash]
    pool = holders or eligible
    if not pool:
        return None
    return next((i for i in pool if i.verified), pool[0])


def resolve_credential_hash(
    identifier: Identifier,
    identifiers: Sequence[Identifier],
    policy: IdentifierPolicySettings,
) -> Optional[str]:
    """Credential hash to check when signing in through ``identifier``.

    Identifiers without their own hash (a username added after sign-up,
    for instance) sign in with the user's primary credential.
    """
    if identifier.type not in policy.credential_types:
        return None
    if identifier.credential_hash:
        return identifier.credential_hash
    primary = primary_credential_identifier(identifiers, policy)
    return primary.credential_hash if primary else None


def credential_targets(
    identifiers: Sequence[Identifier], policy: IdentifierPolicySettings
) -> list[Identifier]:
    """Identifiers that must receive a new credential hash.

    The primary credential identifier plus any other identifier already
    holding a hash, so that no stale hash stays usable.
    """
    primary = primary_credential_identifier(identifiers, policy)
    if primary is None:
        return []
    return [primary] + [
        i for i in identifiers if i.credential_hash and i.id != primary.id
    ]


class IdentifierService(Service):
    """Domain service for identifier operations."""

    def __init__(
        self,
        identifier_repository: IdentifierRepository,
        transaction_manager: TransactionManager,
        validators: IdentifierValidators,
        policy: IdentifierPolicySettings,
        normalization: NormalizationSettings,
    ) -> None:
        """Initialize identifier service.

        Args:
            identifier_repository: Identifier repository
            transaction_manager: Transaction boundary
            validators: Per-type validation hooks
            policy: Identifier type routing
            normalization: Normalization policy
        """
        self.identifier_repository = identifier_repository
        self.transaction_manager = transaction_manager
        self.validators = validators
        self.policy = policy
        self.normalization = normalization

    def normalize(self, identifier_type: str, raw_value: str) -> str:
        """Normalize a raw value with the configured policy."""
        return normalize(identifier_type, raw_value, self.normalization)

    def default_verified(self, identifier_type: str) -> bool:
        """Whether identifiers of this type start out verified."""
        return identifier_type in self.policy.verified_by_default

    def is_credential_type(self, identifier_type: str) -> bool:
        """Whether identifiers of this type may carry a password hash."""
        return identifier_type in self.policy.credential_types

    def build(
        self,
        user_id: UserId,
        identifier_type: str,
        raw_value: str,
        verified: bool | None = None,
        credential_hash: str | None = None,
        metadata: dict[str, Any] | None = None,
        validate: bool = True,
    ) -> Identifier:
        """Build an unsaved identifier from raw input.

        Args:
            user_id: Owning user
            identifier_type: Identifier type
            raw_value: Value as entered
            verified: Verification state (type default when None)
            credential_hash: Password hash, credential-bearing types only
            metadata: Opaque provider detail
            validate: Run the per-type validation hook

        Returns:
            Identifier ready to be claimed

        Raises:
            InvalidIdentifierFormat: If validation rejects the value
            ValidationError: If a credential is given for a type that cannot carry one
        """
        value = self.normalize(identifier_type, raw_value)
        if validate:
            value = self.validators.validate(identifier_type, value)

        if credential_hash and not self.is_credential_type(identifier_type):
            raise ValidationError(
                f"Identifiers of type '{identifier_type}' cannot carry a credential"
            )

        now = datetime.now(timezone.utc)
        return Identifier(
            id=IdentifierId(uuid4()),
            user_id=user_id,
            type=identifier_type,
            value=value,
            verified=(
                self.default_verified(identifier_type) if verified is None else verified
            ),
            credential_hash=credential_hash,
            metadata=metadata or {},
            created_at=now,
            updated_at=now,
        )

    async def claim(self, identifier: Identifier, migration: bool = False) -> Identifier:
        """Atomically bind an identifier to its user.

        Args:
            identifier: Identifier to create (already normalized)
            migration: Whether the claim comes from the migration runner

        Returns:
            The created identifier, or the existing one when the same user
            already owns this (type, value)

        Raises:
            IdentifierConflict: If another user owns this (type, value)
            MigrationInProgress: If a migration claim collides with a row
                that is not visible yet
        """
        with logfire.span(
            "identifier_service.claim",
            user_id=str(identifier.user_id),
            identifier_type=identifier.type,
            migration=migration,
        ):
            try:
                created = await self.identifier_repository.create(identifier)
                logfire.info(
                    "Identifier created",
                    identifier_id=str(created.id),
                    identifier_type=created.type,
                    user_id=str(created.user_id),
                )
                return created
            except DuplicateIdentifierError:
                existing = await self.identifier_repository.find_by_value(
                    identifier.type, identifier.value
                )

            if existing is None:
                # The winning row belongs to a transaction we cannot see yet
                logfire.warn(
                    "Identifier claim collided with an unresolved write",
                    identifier_type=identifier.type,
                    user_id=str(identifier.user_id),
                )
                if migration:
                    raise MigrationInProgress(str(identifier.user_id))
                raise IdentifierConflict(identifier.type)

            if existing.user_id == identifier.user_id:
                logfire.info(
                    "Identifier already bound to user",
                    identifier_id=str(existing.id),
                    identifier_type=existing.type,
                    user_id=str(existing.user_id),
                )
                return existing

            logfire.warn(
                "Identifier conflict",
                identifier_type=identifier.type,
                user_id=str(identifier.user_id),
            )
            raise IdentifierConflict(identifier.type)

    async def add(
        self,
        user_id: UserId,
        identifier_type: str,
        raw_value: str,
        verified: bool | None = None,
        credential_hash: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> Identifier:
        """Validate and claim a new identifier for a user.

        Raises:
            InvalidIdentifierFormat: If validation rejects the value
            IdentifierConflict: If another user owns this (type, value)
        """
        identifier = self.build(
            user_id,
            identifier_type,
            raw_value,
            verified=verified,
            credential_hash=credential_hash,
            metadata=metadata,
        )
        return await self.claim(identifier)

    async def get_by_value(
        self, identifier_type: str, raw_value: str
    ) -> Identifier | None:
        """Get identifier by type and raw value (normalized here).

        Args:
            identifier_type: Identifier type
            raw_value: Value as entered

        Returns:
            Identifier if found, None otherwise
        """
        with logfire.span(
            "identifier_service.get_by_value", identifier_type=identifier_type
        ):
            return await self.identifier_repository.find_by_value(
                identifier_type, self.normalize(identifier_type, raw_value)
            )

    async def get_user_identifiers(self, user_id: UserId) -> list[Identifier]:
        """Get all identifiers of a user, oldest first."""
        with logfire.span(
            "identifier_service.get_user_identifiers", user_id=str(user_id)
        ):
            identifiers = await self.identifier_repository.find_all_by_user_id(user_id)
            logfire.info(
                "Identifiers retrieved for user",
                user_id=str(user_id),
                count=len(identifiers),
            )
            return identifiers

    async def get_owned(self, user_id: UserId, identifier_id: IdentifierId) -> Identifier:
        """Get an identifier that must belong to ``user_id``.

        Raises:
            IdentifierNotFound: If it does not exist or belongs to someone else
        """
        identifier = await self.identifier_repository.find_by_id(identifier_id)
        if identifier is None or identifier.user_id != user_id:
            raise IdentifierNotFound()
        return identifier

    async def mark_verified(self, identifier: Identifier, verified: bool = True) -> Identifier:
        """Set the verification state of an identifier."""
        with logfire.span(
            "identifier_service.mark_verified",
            identifier_id=str(identifier.id),
            verified=verified,
        ):
            updated = await self.identifier_repository.update(
                identifier.model_copy(
                    update={"verified": verified, "updated_at": datetime.now(timezone.utc)}
                )
            )
            logfire.info(
                "Identifier verification changed",
                identifier_id=str(updated.id),
                identifier_type=updated.type,
                verified=updated.verified,
            )
            return updated

    async def update_credential(self, user_id: UserId, credential_hash: str) -> list[Identifier]:
        """Store a new password hash on the user's credential identifiers.

        Returns:
            The updated identifiers

        Raises:
            IdentifierNotFound: If the user has no credential-bearing identifier
        """
        with logfire.span("identifier_service.update_credential", user_id=str(user_id)):
            identifiers = await self.identifier_repository.find_all_by_user_id(user_id)
            targets = credential_targets(identifiers, self.policy)
            if not targets:
                raise IdentifierNotFound("credential")

            now = datetime.now(timezone.utc)
            updated = []
            async with self.transaction_manager.atomic():
                for target in targets:
                    updated.append(
                        await self.identifier_repository.update(
                            target.model_copy(
                                update={"credential_hash": credential_hash, "updated_at": now}
                            )
                        )
                    )
            logfire.info(
                "Credential updated", user_id=str(user_id), identifiers=len(updated)
            )
            return updated

    async def remove(self, user_id: UserId, identifier_id: IdentifierId) -> None:
        """Delete one of the user's identifiers.

        Raises:
            IdentifierNotFound: If it does not exist or belongs to someone else
        """
        with logfire.span(
            "identifier_service.remove",
            user_id=str(user_id),
            identifier_id=str(identifier_id),
        ):
            identifier = await self.get_owned(user_id, identifier_id)
            await self.identifier_repository.delete(identifier.id)
            logfire.info(
                "Identifier removed",
                identifier_id=str(identifier.id),
                identifier_type=identifier.type,
                user_id=str(user_id),
            )
