"""Password reset use cases."""

import logfire
from pydantic import BaseModel

from authid.config import Settings
from authid.domain.error import VerificationFailed
from authid.domain.model import UserView
from authid.domain.model.common import utcnow
from authid.domain.repository import (
    IdentifierRepository,
    TransactionManager,
    UserRepository,
)
from authid.domain.service import (
    IdentifierService,
    ModeController,
    PasswordHasher,
    VerificationSender,
    VerificationService,
    normalize,
    rate_limit_key,
    validate_password,
)
from authid.domain.value import IdentifierMode, IdentifierType, VerificationPurpose
from authid.util.timing import minimum_duration


class RequestPasswordResetRequest(BaseModel):
    """Ask for a password reset token."""

    identifier: str
    identifier_type: str = IdentifierType.EMAIL.value


class RequestPasswordResetResponse(BaseModel):
    """Always the same, whether or not the identifier exists."""

    success: bool = True


class ResetPasswordRequest(BaseModel):
    """Set a new password with a reset token."""

    token: str
    password: str


class ResetPasswordResponse(BaseModel):
    """Reset password response."""

    user: UserView


class RequestPasswordResetUseCase:
    """Use case for starting a password reset."""

    def __init__(
        self,
        verification_service: VerificationService,
        verification_sender: VerificationSender,
        mode_controller: ModeController,
        user_repository: UserRepository,
        settings: Settings,
    ) -> None:
        self.verification_service = verification_service
        self.verification_sender = verification_sender
        self.mode_controller = mode_controller
        self.user_repository = user_repository
        self.settings = settings

    async def execute(
        self, request: RequestPasswordResetRequest
    ) -> RequestPasswordResetResponse:
        """Issue and deliver a reset token if the identifier can receive one.

        The response and its timing do not depend on whether the
        identifier exists.

        Raises:
            RateLimitExceeded: If too many resets were requested for this identifier
        """
        value = normalize(
            request.identifier_type, request.identifier, self.settings.normalization
        )

        with logfire.span("request_password_reset", identifier_type=request.identifier_type):
            async with minimum_duration(self.settings.security.min_response_ms):
                await self.verification_service.enforce_rate_limit(
                    rate_limit_key(request.identifier_type, value)
                )

                if self.mode_controller.mode is IdentifierMode.LEGACY:
                    await self._request_legacy(request.identifier_type, value)
                else:
                    await self._request(request.identifier_type, request.identifier)

            return RequestPasswordResetResponse()

    async def _request(self, identifier_type: str, raw_value: str) -> None:
        if identifier_type not in self.settings.identifiers.contact_types:
            return
        identifier = await self.mode_controller.find_identifier(identifier_type, raw_value)
        if identifier is None:
            return

        token = await self.verification_service.issue(
            VerificationPurpose.PASSWORD_RESET, identifier.user_id, identifier.value, identifier.id
        )
        await self.verification_sender.send(identifier.value, token)

    async def _request_legacy(self, identifier_type: str, value: str) -> None:
        if identifier_type != IdentifierType.EMAIL:
            return
        user = await self.user_repository.find_by_email(value)
        if user is None:
            return

        token = await self.verification_service.issue(
            VerificationPurpose.PASSWORD_RESET, user.id, value
        )
        await self.verification_sender.send(value, token)


class ResetPasswordUseCase:
    """Use case for completing a password reset."""

    def __init__(
        self,
        verification_service: VerificationService,
        identifier_service: IdentifierService,
        identifier_repository: IdentifierRepository,
        user_repository: UserRepository,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        transaction_manager: TransactionManager,
    ) -> None:
        self.verification_service = verification_service
        self.identifier_service = identifier_service
        self.identifier_repository = identifier_repository
        self.user_repository = user_repository
        self.mode_controller = mode_controller
        self.password_hasher = password_hasher
        self.transaction_manager = transaction_manager

    async def execute(self, request: ResetPasswordRequest) -> ResetPasswordResponse:
        """Consume the token and store the new password.

        Receiving the token proves control of the identifier, so it is
        marked verified as well.

        Raises:
            VerificationFailed: If the token is unknown, used or expired, or
                was sent to an address the account no longer holds
            ValidationError: If the new password breaks a length rule
        """
        credential_hash = self.password_hasher.hash(validate_password(request.password))

        with logfire.span("reset_password"):
            async with self.transaction_manager.atomic():
                token = await self.verification_service.consume(
                    request.token, VerificationPurpose.PASSWORD_RESET
                )
                user = await self.mode_controller.get_user(token.user_id)

                if self.mode_controller.mode is IdentifierMode.LEGACY:
                    self.verification_service.confirm_destination(token, user.email)
                    user = await self.user_repository.save(
                        user.model_copy(
                            update={
                                "password_hash": credential_hash,
                                "email_verified": True,
                                "updated_at": utcnow(),
                            }
                        )
                    )
                else:
                    identifier = None
                    if token.identifier_id is not None:
                        identifier = await self.identifier_repository.find_by_id(
                            token.identifier_id
                        )
                    if identifier is None or identifier.user_id != user.id:
                        raise VerificationFailed()
                    self.verification_service.confirm_destination(token, identifier.value)
                    await self.identifier_service.mark_verified(identifier)
                    await self.identifier_service.update_credential(user.id, credential_hash)

            logfire.info("Password reset", user_id=str(user.id))
            return ResetPasswordResponse(user=await self.mode_controller.view(user))
