"""Virtual field mapping between the legacy user shape and identifiers.

Reads project the identifier set into the flat ``email``/``email_verified``
shape. Writes in that shape are decomposed into identifier mutations and
applied inside one transaction.
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any, Optional, Union
from uuid import uuid4

import logfire
from pydantic import BaseModel

from authid.config import IdentifierPolicySettings, NormalizationSettings
from authid.domain.error import DuplicateIdentifierError, IdentifierConflict, IdentifierNotFound
from authid.domain.model import Identifier, User, UserView
from authid.domain.repository import IdentifierRepository, TransactionManager
from authid.domain.service.base import Service
from authid.domain.service.identifier_service import credential_targets
from authid.domain.service.normalizer import differs_only_by_case_or_whitespace, normalize
from authid.domain.service.recovery import classify_recovery_level
from authid.domain.service.validators import IdentifierValidators
from authid.domain.value import IdentifierId, IdentifierMode, IdentifierType, UserId
from authid.domain.value.common import ValueObject


class LegacyUserUpdate(BaseModel):
    """Partial update in the legacy flat shape.

    Only fields explicitly set take part in the update, so ``email=None``
    (clear the email) differs from leaving ``email`` out.
    """

    name: Optional[str] = None
    role: Optional[str] = None
    custom_data: Optional[dict[str, Any]] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    password_hash: Optional[str] = None

    def is_set(self, field: str) -> bool:
        """Whether ``field`` was given by the caller."""
        return field in self.model_fields_set

    def profile_changes(self) -> dict[str, Any]:
        """Changes that land on the user record itself."""
        return {
            field: getattr(self, field)
            for field in ("name", "role", "custom_data")
            if self.is_set(field) and getattr(self, field) is not None
        }


class CreateIdentifier(ValueObject):
    """Insert a new identifier."""

    identifier: Identifier


class ReplaceIdentifier(ValueObject):
    """Delete ``old_id`` and insert ``new`` atomically."""

    old_id: IdentifierId
    new: Identifier


class UpdateIdentifier(ValueObject):
    """Change verification, credential or metadata of an identifier."""

    identifier: Identifier


class DeleteIdentifier(ValueObject):
    """Remove an identifier."""

    identifier_id: IdentifierId


IdentifierMutation = Union[
    CreateIdentifier, ReplaceIdentifier, UpdateIdentifier, DeleteIdentifier
]


def first_of_type(
    identifiers: Sequence[Identifier], identifier_type: str
) -> Optional[Identifier]:
    """First identifier of a type by creation time."""
    matching = [i for i in identifiers if i.type == identifier_type]
    return min(matching, key=lambda i: i.created_at) if matching else None


def _target(mutation: IdentifierMutation) -> Optional[Identifier]:
    if isinstance(mutation, (CreateIdentifier, UpdateIdentifier)):
        return mutation.identifier
    if isinstance(mutation, ReplaceIdentifier):
        return mutation.new
    return None


def _retarget(mutation: IdentifierMutation, identifier: Identifier) -> IdentifierMutation:
    if isinstance(mutation, ReplaceIdentifier):
        return ReplaceIdentifier(old_id=mutation.old_id, new=identifier)
    return type(mutation)(identifier=identifier)


def preview(
    identifiers: Sequence[Identifier], mutations: Sequence[IdentifierMutation]
) -> list[Identifier]:
    """Identifier set as it will look once ``mutations`` are applied."""
    result = {i.id: i for i in identifiers}
    for mutation in mutations:
        if isinstance(mutation, DeleteIdentifier):
            result.pop(mutation.identifier_id, None)
        elif isinstance(mutation, ReplaceIdentifier):
            result.pop(mutation.old_id, None)
            result[mutation.new.id] = mutation.new
        else:
            result[mutation.identifier.id] = mutation.identifier
    return sorted(result.values(), key=lambda i: i.created_at)


class VirtualFieldMapper(Service):
    """Translates between the legacy user shape and the identifier set."""

    def __init__(
        self,
        identifier_repository: IdentifierRepository,
        transaction_manager: TransactionManager,
        validators: IdentifierValidators,
        policy: IdentifierPolicySettings,
        normalization: NormalizationSettings,
    ) -> None:
        """Initialize mapper.

        Args:
            identifier_repository: Identifier repository
            transaction_manager: Transaction boundary for ``apply``
            validators: Per-type validation hooks
            policy: Identifier type routing
            normalization: Normalization policy
        """
        self.identifier_repository = identifier_repository
        self.transaction_manager = transaction_manager
        self.validators = validators
        self.policy = policy
        self.normalization = normalization

    def project(
        self, user: User, identifiers: Sequence[Identifier], mode: IdentifierMode
    ) -> UserView:
        """Build the caller-facing view of a user.

        Args:
            user: Stored user record
            identifiers: The user's identifiers. In legacy mode these are
                derived from the flat record and only feed classification.
            mode: Operating mode

        Returns:
            User view with recovery level recomputed from ``identifiers``
        """
        email: Optional[str] = None
        email_verified = False
        listed: list[Identifier] = []

        if mode is IdentifierMode.VIRTUAL:
            primary_email = first_of_type(identifiers, IdentifierType.EMAIL)
            if primary_email is not None:
                email = primary_email.value
                email_verified = primary_email.verified
            listed = list(identifiers)
        elif mode is IdentifierMode.DIRECT:
            listed = list(identifiers)
        else:
            email = user.email
            email_verified = user.email_verified

        return UserView(
            id=user.id,
            name=user.name,
            role=user.role,
            custom_data=user.custom_data,
            is_anonymous=user.is_anonymous,
            email=email,
            email_verified=email_verified,
            recovery_level=classify_recovery_level(identifiers, self.policy),
            identifiers=listed,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

    def decompose(
        self,
        user_id: UserId,
        identifiers: Sequence[Identifier],
        update: LegacyUserUpdate,
    ) -> list[IdentifierMutation]:
        """Turn a legacy-shaped update into identifier mutations.

        Pure: nothing is read or written here.

        Args:
            user_id: User being updated
            identifiers: The user's current identifiers
            update: Legacy-shaped partial update

        Returns:
            Mutations in application order

        Raises:
            InvalidIdentifierFormat: If the new email is rejected
            IdentifierNotFound: If a verification or password change has
                no identifier to land on
        """
        now = datetime.now(timezone.utc)
        mutations: list[IdentifierMutation] = []
        current = first_of_type(identifiers, IdentifierType.EMAIL)
        verified_given = update.is_set("email_verified") and update.email_verified is not None

        if update.is_set("email"):
            if update.email is None:
                if current is not None:
                    mutations.append(DeleteIdentifier(identifier_id=current.id))
            else:
                value = self.validators.validate(
                    IdentifierType.EMAIL,
                    normalize(IdentifierType.EMAIL, update.email, self.normalization),
                )
                if current is None:
                    mutations.append(
                        CreateIdentifier(
                            identifier=Identifier(
                                id=IdentifierId(uuid4()),
                                user_id=user_id,
                                type=IdentifierType.EMAIL.value,
                                value=value,
                                verified=bool(update.email_verified) if verified_given else False,
                                created_at=now,
                                updated_at=now,
                            )
                        )
                    )
                elif value == current.value:
                    if verified_given and update.email_verified != current.verified:
                        mutations.append(
                            UpdateIdentifier(
                                identifier=current.model_copy(
                                    update={"verified": update.email_verified, "updated_at": now}
                                )
                            )
                        )
                else:
                    if verified_given:
                        verified = bool(update.email_verified)
                    elif differs_only_by_case_or_whitespace(current.value, value):
                        verified = current.verified
                    else:
                        verified = False
                    # created_at is kept so the replacement stays the primary email
                    mutations.append(
                        ReplaceIdentifier(
                            old_id=current.id,
                            new=current.model_copy(
                                update={
                                    "id": IdentifierId(uuid4()),
                                    "value": value,
                                    "verified": verified,
                                    "updated_at": now,
                                }
                            ),
                        )
                    )
        elif verified_given:
            if current is None:
                raise IdentifierNotFound(IdentifierType.EMAIL.value)
            if update.email_verified != current.verified:
                mutations.append(
                    UpdateIdentifier(
                        identifier=current.model_copy(
                            update={"verified": update.email_verified, "updated_at": now}
                        )
                    )
                )

        if update.is_set("password_hash") and update.password_hash is not None:
            mutations = self._with_credential(
                identifiers, mutations, update.password_hash, now
            )

        return mutations

    def _with_credential(
        self,
        identifiers: Sequence[Identifier],
        mutations: list[IdentifierMutation],
        credential_hash: str,
        now: datetime,
    ) -> list[IdentifierMutation]:
        targets = credential_targets(preview(identifiers, mutations), self.policy)
        if not targets:
            raise IdentifierNotFound("credential")

        mutations = list(mutations)
        for target in targets:
            updated = target.model_copy(
                update={"credential_hash": credential_hash, "updated_at": now}
            )
            pending = next(
                (n for n, m in enumerate(mutations) if (t := _target(m)) and t.id == target.id),
                None,
            )
            if pending is None:
                mutations.append(UpdateIdentifier(identifier=updated))
            else:
                mutations[pending] = _retarget(mutations[pending], updated)
        return mutations

    async def apply(self, user_id: UserId, mutations: Sequence[IdentifierMutation]) -> None:
        """Execute mutations as one all-or-nothing unit.

        Raises:
            IdentifierConflict: If a new value is owned by another user
        """
        if not mutations:
            return

        with logfire.span(
            "virtual_field_mapper.apply", user_id=str(user_id), mutations=len(mutations)
        ):
            async with self.transaction_manager.atomic():
                for mutation in mutations:
                    await self._apply_one(user_id, mutation)
            logfire.info(
                "Legacy update applied to identifiers",
                user_id=str(user_id),
                mutations=len(mutations),
            )

    async def _apply_one(self, user_id: UserId, mutation: IdentifierMutation) -> None:
        repository = self.identifier_repository

        if isinstance(mutation, DeleteIdentifier):
            await repository.delete(mutation.identifier_id)
            return
        if isinstance(mutation, UpdateIdentifier):
            await repository.update(mutation.identifier)
            return

        new = mutation.identifier if isinstance(mutation, CreateIdentifier) else mutation.new
        try:
            if isinstance(mutation, CreateIdentifier):
                await repository.create(new)
            else:
                await repository.replace(mutation.old_id, new)
            return
        except DuplicateIdentifierError:
            existing = await repository.find_by_value(new.type, new.value)

        if existing is None or existing.user_id != user_id:
            logfire.warn(
                "Identifier conflict on legacy update",
                identifier_type=new.type,
                user_id=str(user_id),
            )
            raise IdentifierConflict(new.type)

        # The user already owns the new value as a secondary identifier
        if isinstance(mutation, ReplaceIdentifier):
            await repository.delete(mutation.old_id)
        if new.credential_hash and existing.credential_hash != new.credential_hash:
            await repository.update(
                existing.model_copy(
                    update={
                        "credential_hash": new.credential_hash,
                        "updated_at": new.updated_at,
                    }
                )
            )
