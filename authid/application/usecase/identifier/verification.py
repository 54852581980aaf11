"""Identifier verification use cases."""

from datetime import datetime
from uuid import UUID

import logfire
from pydantic import BaseModel

from authid.config import Settings
from authid.domain.error import IdentifierNotFound, ValidationError, VerificationFailed
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
    VerificationSender,
    VerificationService,
    rate_limit_key,
)
from authid.domain.value import (
    IdentifierId,
    IdentifierMode,
    IdentifierType,
    UserId,
    VerificationPurpose,
)


class SendIdentifierVerificationRequest(BaseModel):
    """Send a verification token to one of the user's identifiers.

    ``identifier_id`` is ignored in legacy mode, where the email column is
    verified instead.
    """

    user_id: str  # From authenticated user
    identifier_id: str | None = None


class SendIdentifierVerificationResponse(BaseModel):
    """Send verification response."""

    sent: bool
    already_verified: bool = False
    expires_at: datetime | None = None


class SendIdentifierVerificationUseCase:
    """Use case for starting identifier verification."""

    def __init__(
        self,
        verification_service: VerificationService,
        verification_sender: VerificationSender,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        settings: Settings,
    ) -> None:
        self.verification_service = verification_service
        self.verification_sender = verification_sender
        self.identifier_service = identifier_service
        self.mode_controller = mode_controller
        self.settings = settings

    async def execute(
        self, request: SendIdentifierVerificationRequest
    ) -> SendIdentifierVerificationResponse:
        """Issue a token and hand it to the delivery capability.

        Raises:
            NotFoundError: If the user does not exist
            IdentifierNotFound: If there is nothing to verify
            ValidationError: If the identifier type cannot receive messages
            RateLimitExceeded: If too many tokens were requested
        """
        user = await self.mode_controller.get_user(UserId(UUID(request.user_id)))

        if self.mode_controller.mode is IdentifierMode.LEGACY:
            if not user.email:
                raise IdentifierNotFound(IdentifierType.EMAIL.value)
            identifier_type, destination = IdentifierType.EMAIL.value, user.email
            identifier_id, verified = None, user.email_verified
        else:
            if request.identifier_id is None:
                raise IdentifierNotFound()
            identifier = await self.identifier_service.get_owned(
                user.id, IdentifierId(UUID(request.identifier_id))
            )
            identifier_type, destination = identifier.type, identifier.value
            identifier_id, verified = identifier.id, identifier.verified

        if verified:
            return SendIdentifierVerificationResponse(sent=False, already_verified=True)
        if identifier_type not in self.settings.identifiers.contact_types:
            raise ValidationError(f"Identifier type '{identifier_type}' cannot receive messages")

        with logfire.span(
            "send_identifier_verification",
            user_id=str(user.id),
            identifier_type=identifier_type,
        ):
            await self.verification_service.enforce_rate_limit(
                rate_limit_key(identifier_type, destination)
            )
            token = await self.verification_service.issue(
                VerificationPurpose.VERIFY_IDENTIFIER, user.id, destination, identifier_id
            )
            await self.verification_sender.send(destination, token)
            return SendIdentifierVerificationResponse(sent=True, expires_at=token.expires_at)


class VerifyIdentifierRequest(BaseModel):
    """Complete verification with a token."""

    token: str


class VerifyIdentifierResponse(BaseModel):
    """Verify identifier response, recovery level recomputed."""

    user: UserView


class VerifyIdentifierUseCase:
    """Use case for completing identifier verification."""

    def __init__(
        self,
        verification_service: VerificationService,
        identifier_service: IdentifierService,
        identifier_repository: IdentifierRepository,
        user_repository: UserRepository,
        mode_controller: ModeController,
        transaction_manager: TransactionManager,
    ) -> None:
        self.verification_service = verification_service
        self.identifier_service = identifier_service
        self.identifier_repository = identifier_repository
        self.user_repository = user_repository
        self.mode_controller = mode_controller
        self.transaction_manager = transaction_manager

    async def execute(self, request: VerifyIdentifierRequest) -> VerifyIdentifierResponse:
        """Consume the token and mark its identifier verified.

        Raises:
            VerificationFailed: If the token is unknown, used or expired, or
                its identifier is gone or no longer holds the address the
                token was sent to
        """
        with logfire.span("verify_identifier"):
            async with self.transaction_manager.atomic():
                token = await self.verification_service.consume(
                    request.token, VerificationPurpose.VERIFY_IDENTIFIER
                )
                user = await self.mode_controller.get_user(token.user_id)

                if self.mode_controller.mode is IdentifierMode.LEGACY:
                    self.verification_service.confirm_destination(token, user.email)
                    user = await self.user_repository.save(
                        user.model_copy(update={"email_verified": True, "updated_at": utcnow()})
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

            logfire.info("Identifier verified", user_id=str(user.id))
            return VerifyIdentifierResponse(user=await self.mode_controller.view(user))
