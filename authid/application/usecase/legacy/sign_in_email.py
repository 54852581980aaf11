"""Legacy email sign-in use case."""

import logfire
from pydantic import BaseModel

from authid.application.usecase.auth.sign_in import (
    SignInResponse,
    SignInWithIdentifierRequest,
    SignInWithIdentifierUseCase,
    enforce_sign_in_policy,
)
from authid.config import Settings
from authid.domain.error import InvalidCredentials
from authid.domain.repository import UserRepository
from authid.domain.service import JWTService, ModeController, PasswordHasher, normalize
from authid.domain.value import IdentifierMode, IdentifierType
from authid.util.timing import minimum_duration


class SignInEmailRequest(BaseModel):
    """Legacy email and password sign-in."""

    email: str
    password: str


class SignInEmailUseCase:
    """Legacy entry point for email sign-in."""

    def __init__(
        self,
        sign_in: SignInWithIdentifierUseCase,
        user_repository: UserRepository,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> None:
        self.sign_in = sign_in
        self.user_repository = user_repository
        self.mode_controller = mode_controller
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.settings = settings

    async def execute(self, request: SignInEmailRequest) -> SignInResponse:
        """Authenticate with email and password.

        Failure behaves exactly like identifier sign-in: one message, one
        hash comparison, padded response time.

        Raises:
            InvalidCredentials: If authentication fails for any reason
            VerificationRequired: If the email must be verified first
            RecoveryLevelInsufficient: If the account is below the minimum level
            LegacyDisabled: In direct mode
        """
        self.mode_controller.enter_legacy("sign_in_email")

        if self.mode_controller.mode is not IdentifierMode.LEGACY:
            return await self.sign_in.execute(
                SignInWithIdentifierRequest(
                    identifier=request.email,
                    identifier_type=IdentifierType.EMAIL.value,
                    password=request.password,
                )
            )

        with logfire.span("sign_in_email"):
            async with minimum_duration(self.settings.security.min_response_ms):
                user = await self.user_repository.find_by_email(
                    normalize(IdentifierType.EMAIL, request.email, self.settings.normalization)
                )
                password_hash = user.password_hash if user else None

                if user is None or not self.password_hasher.verify(
                    request.password, password_hash
                ):
                    logfire.warn("Sign-in failed", identifier_type=IdentifierType.EMAIL.value)
                    raise InvalidCredentials()

                view = await self.mode_controller.view(user)
                enforce_sign_in_policy(view, user.email_verified, self.settings.security)

            token = self.jwt_service.create_token(str(user.id), IdentifierType.EMAIL.value)
            logfire.info("User signed in", user_id=str(user.id), identifier_type="email")
            return SignInResponse(user=view, token=token)
