"""Sign-up use cases."""

from typing import Any
from uuid import uuid4

import logfire
from pydantic import BaseModel, Field

from authid.config import Settings
from authid.domain.error import (
    IdentifierConflict,
    InvalidIdentifierFormat,
    SignUpFailed,
    ValidationError,
)
from authid.domain.model import User, UserView
from authid.domain.model.common import utcnow
from authid.domain.repository import UserRepository
from authid.domain.service import (
    AccountService,
    IdentifierInput,
    JWTService,
    ModeController,
    PasswordHasher,
    validate_password,
)
from authid.domain.value import IdentifierMode, IdentifierType, UserId


class SignUpWithIdentifiersRequest(BaseModel):
    """Sign-up with one or more identifiers."""

    identifiers: list[IdentifierInput] = Field(min_length=1)
    password: str | None = None
    name: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)


class SignUpWithIdentifierRequest(BaseModel):
    """Sign-up with a single identifier."""

    identifier: str
    identifier_type: str = IdentifierType.EMAIL.value
    password: str | None = None
    name: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)


class SignUpResponse(BaseModel):
    """Sign-up response."""

    user: UserView
    token: str


class SignUpWithIdentifiersUseCase:
    """Use case for creating a user together with its identifiers."""

    def __init__(
        self,
        account_service: AccountService,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> None:
        """Initialize sign-up use case.

        Args:
            account_service: Registration domain service
            mode_controller: Mode routing
            password_hasher: Password hashing capability
            jwt_service: Session token service
            settings: Application settings
        """
        self.account_service = account_service
        self.mode_controller = mode_controller
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.settings = settings

    async def execute(self, request: SignUpWithIdentifiersRequest) -> SignUpResponse:
        """Register a new user.

        Format and uniqueness failures are both reported as SignUpFailed,
        so sign-up cannot be used to enumerate existing identifiers.

        Args:
            request: Identifiers, optional password and profile

        Returns:
            The new user's view and a session token

        Raises:
            SignUpFailed: If an identifier is rejected or already taken
            ValidationError: If the password or identifier set breaks a rule
            IdentifierTableDisabled: In legacy mode
        """
        self.mode_controller.require_identifier_table("sign_up_with_identifiers")
        self._check_required_email(request.identifiers)

        credential_hash = None
        if request.password is not None:
            credential_hash = self.password_hasher.hash(validate_password(request.password))

        with logfire.span(
            "sign_up", identifier_types=[i.type for i in request.identifiers]
        ):
            try:
                user, _ = await self.account_service.register(
                    request.identifiers,
                    credential_hash=credential_hash,
                    name=request.name,
                    custom_data=request.custom_data,
                )
            except (InvalidIdentifierFormat, IdentifierConflict) as e:
                logfire.warn("Sign-up failed", reason=type(e).__name__)
                raise SignUpFailed() from e

            view = await self.mode_controller.view(user)
            token = self.jwt_service.create_token(
                str(user.id), request.identifiers[0].type
            )
            return SignUpResponse(user=view, token=token)

    def _check_required_email(self, identifiers: list[IdentifierInput]) -> None:
        if self.mode_controller.mode is not IdentifierMode.VIRTUAL:
            return
        if not self.settings.identifier_table.require_email:
            return
        if not any(i.type == IdentifierType.EMAIL for i in identifiers):
            raise ValidationError("An email identifier is required")


class SignUpWithIdentifierUseCase:
    """Use case for signing up with a single identifier."""

    def __init__(self, sign_up: SignUpWithIdentifiersUseCase) -> None:
        self.sign_up = sign_up

    async def execute(self, request: SignUpWithIdentifierRequest) -> SignUpResponse:
        """Register a new user with one identifier."""
        return await self.sign_up.execute(
            SignUpWithIdentifiersRequest(
                identifiers=[
                    IdentifierInput(type=request.identifier_type, value=request.identifier)
                ],
                password=request.password,
                name=request.name,
                custom_data=request.custom_data,
            )
        )


class CreateAnonymousUserUseCase:
    """Use case for creating an anonymous account."""

    def __init__(
        self,
        account_service: AccountService,
        user_repository: UserRepository,
        mode_controller: ModeController,
        jwt_service: JWTService,
    ) -> None:
        self.account_service = account_service
        self.user_repository = user_repository
        self.mode_controller = mode_controller
        self.jwt_service = jwt_service

    async def execute(self) -> SignUpResponse:
        """Create an anonymous user.

        Outside legacy mode the user holds only the anonymous marker
        identifier, so it classifies as ANONYMOUS.

        Returns:
            The anonymous user's view and a session token
        """
        with logfire.span("create_anonymous_user"):
            if self.mode_controller.mode is IdentifierMode.LEGACY:
                now = utcnow()
                user = await self.user_repository.save(
                    User(id=UserId(uuid4()), is_anonymous=True, created_at=now, updated_at=now)
                )
            else:
                user, _ = await self.account_service.register_anonymous()

            logfire.info("Anonymous user created", user_id=str(user.id))
            view = await self.mode_controller.view(user)
            token = self.jwt_service.create_token(
                str(user.id), IdentifierType.ANONYMOUS.value
            )
            return SignUpResponse(user=view, token=token)
