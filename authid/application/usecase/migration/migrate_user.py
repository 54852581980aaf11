"""Migration use cases."""

from uuid import UUID

from pydantic import BaseModel, Field

from authid.domain.model import Identifier
from authid.domain.service import MigrationReport, MigrationService, ModeController
from authid.domain.value import UserId


class MigrateUserRequest(BaseModel):
    """Migrate one user request."""

    user_id: str


class MigrateUserResponse(BaseModel):
    """The user's identifiers after migration."""

    identifiers: list[Identifier]


class MigrateAllUsersRequest(BaseModel):
    """Batch migration request."""

    batch_size: int = Field(default=100, ge=1, le=10_000)


class MigrateUserUseCase:
    """Use case for migrating a single legacy record."""

    def __init__(
        self,
        migration_service: MigrationService,
        mode_controller: ModeController,
    ) -> None:
        self.migration_service = migration_service
        self.mode_controller = mode_controller

    async def execute(self, request: MigrateUserRequest) -> MigrateUserResponse:
        """Derive and claim the user's identifiers. Idempotent.

        Raises:
            NotFoundError: If the user does not exist
            IdentifierConflict: If a derived value belongs to another user
            IdentifierTableDisabled: In legacy mode
        """
        self.mode_controller.require_identifier_table("migrate_user")
        user = await self.mode_controller.get_user(UserId(UUID(request.user_id)))
        identifiers = await self.migration_service.migrate_user(user)
        return MigrateUserResponse(identifiers=identifiers)


class MigrateAllUsersUseCase:
    """Use case for the batch migration runner."""

    def __init__(
        self,
        migration_service: MigrationService,
        mode_controller: ModeController,
    ) -> None:
        self.migration_service = migration_service
        self.mode_controller = mode_controller

    async def execute(self, request: MigrateAllUsersRequest) -> MigrationReport:
        """Migrate every user, one transaction each.

        Raises:
            IdentifierTableDisabled: In legacy mode
        """
        self.mode_controller.require_identifier_table("migrate_all_users")
        return await self.migration_service.migrate_all(batch_size=request.batch_size)
