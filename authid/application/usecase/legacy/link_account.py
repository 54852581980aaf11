"""Legacy account linking use case."""

from datetime import datetime
from uuid import UUID, uuid4

import logfire
from pydantic import BaseModel

from authid.config import Settings
from authid.domain.error import IdentifierConflict
from authid.domain.model import LinkedAccount, UserView
from authid.domain.model.common import utcnow
from authid.domain.repository import LinkedAccountRepository
from authid.domain.service import IdentifierService, ModeController, account_identifier
from authid.domain.value import IdentifierMode, IdentifierType, LinkedAccountId, UserId


class LinkAccountRequest(BaseModel):
    """Link an external provider account to a user."""

    user_id: str
    provider: str
    provider_account_id: str
    access_token: str | None = None
    refresh_token: str | None = None
    id_token: str | None = None
    token_type: str | None = None
    scope: str | None = None
    expires_at: datetime | None = None


class LinkAccountResponse(BaseModel):
    """Link account response, recovery level recomputed."""

    user: UserView


class LinkAccountUseCase:
    """Legacy entry point for federated account linking.

    Legacy mode stores a linked account row; virtual mode stores the
    equivalent verified ``oauth`` identifier instead.
    """

    def __init__(
        self,
        linked_account_repository: LinkedAccountRepository,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        settings: Settings,
    ) -> None:
        self.linked_account_repository = linked_account_repository
        self.identifier_service = identifier_service
        self.mode_controller = mode_controller
        self.settings = settings

    async def execute(self, request: LinkAccountRequest) -> LinkAccountResponse:
        """Link the account. Linking the same account twice is a no-op.

        Raises:
            NotFoundError: If the user does not exist
            IdentifierConflict: If the account is linked to another user
            LegacyDisabled: In direct mode
        """
        self.mode_controller.enter_legacy("link_account")
        user = await self.mode_controller.get_user(UserId(UUID(request.user_id)))
        account = LinkedAccount(
            id=LinkedAccountId(uuid4()),
            user_id=user.id,
            provider=request.provider,
            provider_account_id=request.provider_account_id,
            access_token=request.access_token,
            refresh_token=request.refresh_token,
            id_token=request.id_token,
            token_type=request.token_type,
            scope=request.scope,
            expires_at=request.expires_at,
            created_at=utcnow(),
        )

        with logfire.span("link_account", user_id=str(user.id), provider=request.provider):
            if self.mode_controller.mode is IdentifierMode.LEGACY:
                await self._link_flat(account)
            else:
                await self.identifier_service.claim(
                    account_identifier(account, self.settings.normalization)
                )
            logfire.info("Account linked", user_id=str(user.id), provider=request.provider)

        return LinkAccountResponse(user=await self.mode_controller.view(user))

    async def _link_flat(self, account: LinkedAccount) -> None:
        existing = await self.linked_account_repository.find_by_provider(
            account.provider, account.provider_account_id
        )
        if existing is None:
            await self.linked_account_repository.save(account)
        elif existing.user_id != account.user_id:
            logfire.warn("Account already linked to another user", provider=account.provider)
            raise IdentifierConflict(IdentifierType.OAUTH.value)
