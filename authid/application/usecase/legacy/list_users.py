"""Legacy list-users use case."""

from typing import Any

from pydantic import BaseModel, Field

from authid.domain.model import UserView
from authid.domain.repository import UserRepository
from authid.domain.service import ModeController, QueryTranslator


class ListUsersRequest(BaseModel):
    """List users with an optional legacy filter.

    Example filter: ``{"OR": [{"email": "a@b.com"}, {"username": "alice"}]}``
    """

    model: str = "user"
    where: dict[str, Any] | None = None
    limit: int = Field(default=100, ge=1, le=1000)


class ListUsersResponse(BaseModel):
    """List users response."""

    users: list[UserView]


class ListUsersUseCase:
    """Legacy entry point for filtered user listing."""

    def __init__(
        self,
        user_repository: UserRepository,
        mode_controller: ModeController,
        translator: QueryTranslator,
    ) -> None:
        self.user_repository = user_repository
        self.mode_controller = mode_controller
        self.translator = translator

    async def execute(self, request: ListUsersRequest) -> ListUsersResponse:
        """Translate the filter and run it against the store.

        Raises:
            UnsupportedQuery: If the filter cannot be translated exactly
            LegacyDisabled: In direct mode
        """
        self.mode_controller.enter_legacy("list_users")

        if request.where is None:
            users = await self.user_repository.find_page(limit=request.limit)
        else:
            predicate = self.translator.translate(request.model, request.where)
            users = (await self.user_repository.find_where(predicate))[: request.limit]

        return ListUsersResponse(
            users=[await self.mode_controller.view(user) for user in users]
        )
