"""Add identifier use case."""

from typing import Any
from uuid import UUID

import logfire
from pydantic import BaseModel

from authid.domain.model import Identifier, UserView
from authid.domain.service import IdentifierService, ModeController
from authid.domain.value import UserId


class AddIdentifierRequest(BaseModel):
    """Attach a new identifier to an existing user."""

    user_id: str  # From authenticated user
    identifier_type: str
    identifier: str
    metadata: dict[str, Any] | None = None


class AddIdentifierResponse(BaseModel):
    """Add identifier response."""

    identifier: Identifier
    user: UserView


class AddIdentifierUseCase:
    """Use case for adding an identifier to a user.

    The identifier starts verified only for types verified by default
    (username, oauth, passkey). Contact identifiers go through
    verification before they count towards recovery.
    """

    def __init__(
        self,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
    ) -> None:
        """Initialize add identifier use case.

        Args:
            identifier_service: Identifier domain service
            mode_controller: Mode routing
        """
        self.identifier_service = identifier_service
        self.mode_controller = mode_controller

    async def execute(self, request: AddIdentifierRequest) -> AddIdentifierResponse:
        """Validate and claim the identifier.

        Raises:
            NotFoundError: If the user does not exist
            InvalidIdentifierFormat: If validation rejects the value
            IdentifierConflict: If another user owns the value
            IdentifierTableDisabled: In legacy mode
        """
        self.mode_controller.require_identifier_table("add_identifier")
        user = await self.mode_controller.get_user(UserId(UUID(request.user_id)))

        identifier = await self.identifier_service.add(
            user.id,
            request.identifier_type,
            request.identifier,
            metadata=request.metadata,
        )
        logfire.info(
            "Identifier added",
            user_id=str(user.id),
            identifier_type=identifier.type,
        )
        return AddIdentifierResponse(
            identifier=identifier, user=await self.mode_controller.view(user)
        )
