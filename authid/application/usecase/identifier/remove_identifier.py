"""Remove identifier use case."""

from uuid import UUID

from pydantic import BaseModel

from authid.config import Settings
from authid.domain.error import ValidationError
from authid.domain.model import Identifier, UserView
from authid.domain.repository import TransactionManager
from authid.domain.service import IdentifierService, ModeController
from authid.domain.value import IdentifierId, IdentifierMode, IdentifierType, UserId


class RemoveIdentifierRequest(BaseModel):
    """Detach an identifier from its user."""

    user_id: str  # From authenticated user
    identifier_id: str


class RemoveIdentifierResponse(BaseModel):
    """Remove identifier response, recovery level recomputed."""

    user: UserView


class RemoveIdentifierUseCase:
    """Use case for removing one of a user's identifiers."""

    def __init__(
        self,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        transaction_manager: TransactionManager,
        settings: Settings,
    ) -> None:
        self.identifier_service = identifier_service
        self.mode_controller = mode_controller
        self.transaction_manager = transaction_manager
        self.settings = settings

    async def execute(self, request: RemoveIdentifierRequest) -> RemoveIdentifierResponse:
        """Delete the identifier.

        Raises:
            IdentifierNotFound: If it does not exist or belongs to someone else
            ValidationError: If it is the last email and an email is required
            IdentifierTableDisabled: In legacy mode
        """
        self.mode_controller.require_identifier_table("remove_identifier")
        user_id = UserId(UUID(request.user_id))
        identifier_id = IdentifierId(UUID(request.identifier_id))

        async with self.transaction_manager.atomic():
            identifier = await self.identifier_service.get_owned(user_id, identifier_id)
            identifiers = await self.identifier_service.get_user_identifiers(user_id)
            self._check_required_email(identifier, identifiers)
            await self.identifier_service.remove(user_id, identifier_id)

        user = await self.mode_controller.get_user(user_id)
        return RemoveIdentifierResponse(user=await self.mode_controller.view(user))

    def _check_required_email(
        self, identifier: Identifier, identifiers: list[Identifier]
    ) -> None:
        if identifier.type != IdentifierType.EMAIL:
            return
        if self.mode_controller.mode is not IdentifierMode.VIRTUAL:
            return
        if not self.settings.identifier_table.require_email:
            return
        if not any(i.type == IdentifierType.EMAIL and i.id != identifier.id for i in identifiers):
            raise ValidationError("An email identifier is required")
