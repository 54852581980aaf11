"""Sign-in use case."""

import logfire
from pydantic import BaseModel

from authid.config import SecuritySettings, Settings
from authid.domain.error import (
    InvalidCredentials,
    RecoveryLevelInsufficient,
    VerificationRequired,
)
from authid.domain.model import UserView
from authid.domain.service import (
    IdentifierService,
    JWTService,
    ModeController,
    PasswordHasher,
    resolve_credential_hash,
)
from authid.domain.value import IdentifierType
from authid.util.timing import minimum_duration


class SignInWithIdentifierRequest(BaseModel):
    """Sign-in with an identifier and password."""

    identifier: str
    identifier_type: str = IdentifierType.EMAIL.value
    password: str


class SignInResponse(BaseModel):
    """Sign-in response."""

    user: UserView
    token: str


def enforce_sign_in_policy(
    view: UserView, identifier_verified: bool, security: SecuritySettings
) -> None:
    """Policy gates applied once the password has been accepted.

    Raises:
        VerificationRequired: If verification is required and missing
        RecoveryLevelInsufficient: If the account is below the minimum level
    """
    if security.require_verification and not identifier_verified:
        logfire.warn("Sign-in blocked: unverified identifier", user_id=str(view.id))
        raise VerificationRequired()

    minimum = security.minimum_recovery_level
    if minimum is not None and not view.recovery_level.at_least(minimum):
        logfire.warn(
            "Sign-in blocked: recovery level insufficient",
            user_id=str(view.id),
            required=minimum.value,
            actual=view.recovery_level.value,
        )
        raise RecoveryLevelInsufficient(minimum.value, view.recovery_level.value)


class SignInWithIdentifierUseCase:
    """Use case for password sign-in through any credential-bearing identifier."""

    def __init__(
        self,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> None:
        """Initialize sign-in use case.

        Args:
            identifier_service: Identifier domain service
            mode_controller: Mode routing
            password_hasher: Password hashing capability
            jwt_service: Session token service
            settings: Application settings
        """
        self.identifier_service = identifier_service
        self.mode_controller = mode_controller
        self.password_hasher = password_hasher
        self.jwt_service = jwt_service
        self.settings = settings

    async def execute(self, request: SignInWithIdentifierRequest) -> SignInResponse:
        """Authenticate and open a session.

        Unknown identifier, missing credential and wrong password all raise
        the same InvalidCredentials after the same amount of work and at
        least ``security.min_response_ms``.

        Raises:
            InvalidCredentials: If authentication fails for any reason
            VerificationRequired: If the identifier must be verified first
            RecoveryLevelInsufficient: If the account is below the minimum level
            IdentifierTableDisabled: In legacy mode
        """
        self.mode_controller.require_identifier_table("sign_in_with_identifier")
        policy = self.settings.identifiers

        with logfire.span("sign_in", identifier_type=request.identifier_type):
            async with minimum_duration(self.settings.security.min_response_ms):
                identifier = await self.mode_controller.find_identifier(
                    request.identifier_type, request.identifier
                )
                credential_hash = None
                if identifier is not None:
                    identifiers = await self.identifier_service.get_user_identifiers(
                        identifier.user_id
                    )
                    credential_hash = resolve_credential_hash(identifier, identifiers, policy)

                if identifier is None or not self.password_hasher.verify(
                    request.password, credential_hash
                ):
                    logfire.warn("Sign-in failed", identifier_type=request.identifier_type)
                    raise InvalidCredentials()

                user = await self.mode_controller.get_user(identifier.user_id)
                view = await self.mode_controller.view(user)
                enforce_sign_in_policy(view, identifier.verified, self.settings.security)

            token = self.jwt_service.create_token(str(user.id), identifier.type)
            logfire.info(
                "User signed in", user_id=str(user.id), identifier_type=identifier.type
            )
            return SignInResponse(user=view, token=token)
