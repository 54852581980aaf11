"""Legacy user update use case."""

from typing import Any, Optional
from uuid import UUID

import logfire
from pydantic import BaseModel

from authid.config import Settings
from authid.domain.error import DuplicateIdentifierError, IdentifierConflict
from authid.domain.model import User, UserView
from authid.domain.model.common import utcnow
from authid.domain.repository import TransactionManager, UserRepository
from authid.domain.service import (
    IdentifierValidators,
    LegacyUserUpdate,
    ModeController,
    PasswordHasher,
    VirtualFieldMapper,
    differs_only_by_case_or_whitespace,
    normalize,
    validate_password,
)
from authid.domain.value import IdentifierMode, IdentifierType, UserId


class UpdateUserRequest(BaseModel):
    """Partial update in the legacy flat shape.

    Fields left out are untouched; ``email=None`` clears the email.
    """

    user_id: str
    name: Optional[str] = None
    role: Optional[str] = None
    custom_data: Optional[dict[str, Any]] = None
    email: Optional[str] = None
    email_verified: Optional[bool] = None
    password: Optional[str] = None


class UpdateUserResponse(BaseModel):
    """Update user response."""

    user: UserView


class UpdateUserUseCase:
    """Legacy entry point for updating a user.

    In virtual mode the email and password parts become identifier
    mutations, applied in the same transaction as the profile change.
    """

    def __init__(
        self,
        user_repository: UserRepository,
        mode_controller: ModeController,
        mapper: VirtualFieldMapper,
        validators: IdentifierValidators,
        password_hasher: PasswordHasher,
        transaction_manager: TransactionManager,
        settings: Settings,
    ) -> None:
        self.user_repository = user_repository
        self.mode_controller = mode_controller
        self.mapper = mapper
        self.validators = validators
        self.password_hasher = password_hasher
        self.transaction_manager = transaction_manager
        self.settings = settings

    async def execute(self, request: UpdateUserRequest) -> UpdateUserResponse:
        """Apply the update all-or-nothing.

        Raises:
            NotFoundError: If the user does not exist
            InvalidIdentifierFormat: If the new email is rejected
            IdentifierConflict: If the new email belongs to another user
            IdentifierNotFound: If a verification or password change has
                no identifier to land on
            ValidationError: If the new password breaks a length rule
            LegacyDisabled: In direct mode
        """
        self.mode_controller.enter_legacy("update_user")
        update = self._to_legacy_update(request)

        with logfire.span("update_user", user_id=request.user_id):
            async with self.transaction_manager.atomic():
                user = await self.mode_controller.get_user(UserId(UUID(request.user_id)))
                if self.mode_controller.mode is IdentifierMode.LEGACY:
                    user = await self._update_flat(user, update)
                else:
                    user = await self._update_virtual(user, update)

            logfire.info(
                "User updated",
                user_id=str(user.id),
                fields=sorted(update.model_fields_set),
            )
            return UpdateUserResponse(user=await self.mode_controller.view(user))

    def _to_legacy_update(self, request: UpdateUserRequest) -> LegacyUserUpdate:
        given = request.model_fields_set - {"user_id", "password"}
        changes: dict[str, Any] = {field: getattr(request, field) for field in given}
        if "password" in request.model_fields_set and request.password is not None:
            changes["password_hash"] = self.password_hasher.hash(
                validate_password(request.password)
            )
        return LegacyUserUpdate(**changes)

    async def _update_virtual(self, user: User, update: LegacyUserUpdate) -> User:
        identifiers = await self.mode_controller.load_identifiers(user)
        mutations = self.mapper.decompose(user.id, identifiers, update)
        await self.mapper.apply(user.id, mutations)
        return await self.user_repository.save(
            user.model_copy(update={**update.profile_changes(), "updated_at": utcnow()})
        )

    async def _update_flat(self, user: User, update: LegacyUserUpdate) -> User:
        changes: dict[str, Any] = {**update.profile_changes(), "updated_at": utcnow()}
        verified_given = update.is_set("email_verified") and update.email_verified is not None

        if update.is_set("email"):
            if update.email is None:
                changes["email"] = None
                changes["email_verified"] = False
            else:
                email = self.validators.validate(
                    IdentifierType.EMAIL,
                    normalize(IdentifierType.EMAIL, update.email, self.settings.normalization),
                )
                changes["email"] = email
                if email != user.email and not verified_given:
                    changes["email_verified"] = (
                        user.email is not None
                        and user.email_verified
                        and differs_only_by_case_or_whitespace(user.email, email)
                    )
        if verified_given:
            changes["email_verified"] = update.email_verified
        if update.is_set("password_hash") and update.password_hash is not None:
            changes["password_hash"] = update.password_hash

        try:
            return await self.user_repository.save(user.model_copy(update=changes))
        except DuplicateIdentifierError as e:
            logfire.warn("Identifier conflict on legacy update", user_id=str(user.id))
            raise IdentifierConflict(IdentifierType.EMAIL.value) from e
