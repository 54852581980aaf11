"""Get recovery actions use case."""

from uuid import UUID

from pydantic import BaseModel

from authid.config import Settings
from authid.domain.service import (
    ModeController,
    classify_recovery_level,
    suggest_recovery_actions,
)
from authid.domain.value import RecoveryAction, RecoveryLevel, UserId


class GetRecoveryActionsRequest(BaseModel):
    """Get recovery actions request."""

    user_id: str


class GetRecoveryActionsResponse(BaseModel):
    """Current recovery level and what would improve or use it."""

    recovery_level: RecoveryLevel
    actions: list[RecoveryAction]


class GetRecoveryActionsUseCase:
    """Use case for suggesting recovery steps to a user.

    Both the level and the actions are computed from the identifier set
    as it is now; nothing is cached.
    """

    def __init__(self, mode_controller: ModeController, settings: Settings) -> None:
        self.mode_controller = mode_controller
        self.settings = settings

    async def execute(self, request: GetRecoveryActionsRequest) -> GetRecoveryActionsResponse:
        """Classify the user and list suggested actions.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.mode_controller.get_user(UserId(UUID(request.user_id)))
        identifiers = await self.mode_controller.load_identifiers(user)
        return GetRecoveryActionsResponse(
            recovery_level=classify_recovery_level(identifiers, self.settings.identifiers),
            actions=suggest_recovery_actions(identifiers, self.settings.identifiers),
        )
