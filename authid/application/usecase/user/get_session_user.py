"""Get session user use case."""

from uuid import UUID

from pydantic import BaseModel

from authid.domain.model import UserView
from authid.domain.service import JWTService, ModeController
from authid.domain.value import UserId


class GetSessionUserRequest(BaseModel):
    """Get session user request."""

    token: str  # JWT token


class GetSessionUserResponse(BaseModel):
    """The signed-in user and how they signed in."""

    user: UserView
    identifier_type: str
    session_id: str


class GetSessionUserUseCase:
    """Use case for resolving a session token to its user."""

    def __init__(self, jwt_service: JWTService, mode_controller: ModeController) -> None:
        """Initialize get session user use case.

        Args:
            jwt_service: Session token service
            mode_controller: Mode routing and projection
        """
        self.jwt_service = jwt_service
        self.mode_controller = mode_controller

    async def execute(self, request: GetSessionUserRequest) -> GetSessionUserResponse:
        """Execute get session user flow.

        Steps:
        1. Verify the token signature and expiry
        2. Load the user named by the token
        3. Project the user for the current mode

        Raises:
            JWTError: If the token is invalid or expired
            NotFoundError: If the user no longer exists
        """
        payload = self.jwt_service.verify_token(request.token)
        user = await self.mode_controller.get_user(UserId(UUID(payload.user_id)))

        return GetSessionUserResponse(
            user=await self.mode_controller.view(user),
            identifier_type=payload.identifier_type,
            session_id=payload.session_id,
        )
