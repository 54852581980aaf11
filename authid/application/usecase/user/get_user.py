"""Get user use cases."""

from uuid import UUID

from pydantic import BaseModel

from authid.domain.model import UserView
from authid.domain.repository import UserRepository
from authid.domain.service import ModeController
from authid.domain.value import IdentifierType, UserId


class GetUserRequest(BaseModel):
    """Get user request."""

    user_id: str


class GetUserByIdentifierRequest(BaseModel):
    """Get user by identifier request."""

    identifier: str
    identifier_type: str = IdentifierType.EMAIL.value


class GetUserResponse(BaseModel):
    """Get user response."""

    user: UserView


class GetUserUseCase:
    """Use case for reading a user in the legacy shape."""

    def __init__(
        self,
        user_repository: UserRepository,
        mode_controller: ModeController,
    ) -> None:
        """Initialize get user use case.

        Args:
            user_repository: User repository
            mode_controller: Mode routing and projection
        """
        self.user_repository = user_repository
        self.mode_controller = mode_controller

    async def execute(self, request: GetUserRequest) -> GetUserResponse | None:
        """Execute get user flow.

        Steps:
        1. Load the flat record
        2. Load identifiers for the mode (lazy migration when enabled)
        3. Project email fields and recompute the recovery level

        Returns:
            The user view if the user exists, None otherwise
        """
        user = await self.user_repository.find_by_id(UserId(UUID(request.user_id)))
        if not user:
            return None
        return GetUserResponse(user=await self.mode_controller.view(user))


class GetUserByIdentifierUseCase:
    """Use case for resolving the owner of an identifier."""

    def __init__(self, mode_controller: ModeController) -> None:
        self.mode_controller = mode_controller

    async def execute(self, request: GetUserByIdentifierRequest) -> GetUserResponse | None:
        """Look the user up by any identifier (email only in legacy mode).

        Returns:
            The owner's view if found, None otherwise
        """
        user = await self.mode_controller.find_user_by_identifier(
            request.identifier_type, request.identifier
        )
        if not user:
            return None
        return GetUserResponse(user=await self.mode_controller.view(user))
