"""Legacy get-user-by-email use case."""

from pydantic import BaseModel

from authid.application.usecase.user.get_user import GetUserResponse
from authid.domain.service import ModeController
from authid.domain.value import IdentifierType


class GetUserByEmailRequest(BaseModel):
    """Get user by email request."""

    email: str


class GetUserByEmailUseCase:
    """Legacy entry point for looking a user up by email."""

    def __init__(self, mode_controller: ModeController) -> None:
        self.mode_controller = mode_controller

    async def execute(self, request: GetUserByEmailRequest) -> GetUserResponse | None:
        """Resolve the owner of an email address.

        Returns:
            The user view if found, None otherwise

        Raises:
            LegacyDisabled: In direct mode
        """
        self.mode_controller.enter_legacy("get_user_by_email")
        user = await self.mode_controller.find_user_by_identifier(
            IdentifierType.EMAIL.value, request.email
        )
        if not user:
            return None
        return GetUserResponse(user=await self.mode_controller.view(user))
