"""Legacy email sign-up use case."""

from typing import Any
from uuid import uuid4

import logfire
from pydantic import BaseModel, Field

from authid.application.usecase.auth.sign_up import (
    SignUpResponse,
    SignUpWithIdentifierRequest,
    SignUpWithIdentifierUseCase,
)
from authid.config import Settings
from authid.domain.error import DuplicateIdentifierError, InvalidIdentifierFormat, SignUpFailed
from authid.domain.model import User
from authid.domain.model.common import utcnow
from authid.domain.repository import UserRepository
from authid.domain.service import (
    IdentifierValidators,
    JWTService,
    ModeController,
    PasswordHasher,
    normalize,
    validate_password,
)
from authid.domain.value import IdentifierMode, IdentifierType, UserId


class SignUpEmailRequest(BaseModel):
    """Legacy email and password sign-up."""

    email: str
    password: str
    name: str | None = None
    custom_data: dict[str, Any] = Field(default_factory=dict)


class SignUpEmailUseCase:
    """Legacy entry point for email sign-up.

    Writes the flat record in legacy mode and goes through the identifier
    table in virtual mode.
    """

    def __init__(
        self,
        sign_up: SignUpWithIdentifierUseCase,
        user_repository: UserRepository,
        mode_controller: ModeController,
        validators: IdentifierValidators,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> None:
        self.sign_up = sign_up
        self.user_repository = user_repository
        self.mode_controller = mode_controller
        self.validators = validators
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.settings = settings

    async def execute(self, request: SignUpEmailRequest) -> SignUpResponse:
        """Register with email and password.

        Raises:
            SignUpFailed: If the email is rejected or already taken
            ValidationError: If the password breaks a length rule
            LegacyDisabled: In direct mode
        """
        self.mode_controller.enter_legacy("sign_up_email")

        if self.mode_controller.mode is not IdentifierMode.LEGACY:
            return await self.sign_up.execute(
                SignUpWithIdentifierRequest(
                    identifier=request.email,
                    identifier_type=IdentifierType.EMAIL.value,
                    password=request.password,
                    name=request.name,
                    custom_data=request.custom_data,
                )
            )

        credential_hash = self.password_hasher.hash(validate_password(request.password))

        with logfire.span("sign_up_email"):
            now = utcnow()
            try:
                email = self.validators.validate(
                    IdentifierType.EMAIL,
                    normalize(IdentifierType.EMAIL, request.email, self.settings.normalization),
                )
                user = await self.user_repository.save(
                    User(
                        id=UserId(uuid4()),
                        name=request.name,
                        custom_data=request.custom_data,
                        email=email,
                        email_verified=False,
                        password_hash=credential_hash,
                        created_at=now,
                        updated_at=now,
                    )
                )
            except (InvalidIdentifierFormat, DuplicateIdentifierError) as e:
                logfire.warn("Sign-up failed", reason=type(e).__name__)
                raise SignUpFailed() from e

            logfire.info("User registered", user_id=str(user.id), identifiers=1)
            view = await self.mode_controller.view(user)
            token = self.jwt_service.create_token(str(user.id), IdentifierType.EMAIL.value)
            return SignUpResponse(user=view, token=token)
