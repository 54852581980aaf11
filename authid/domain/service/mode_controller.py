"""Operating mode routing.

The mode is read once from frozen settings at construction. Every
authentication-facing operation asks the controller whether it may run
and where user data lives.
"""

import warnings

import logfire

from authid.config import IdentifierTableSettings, NormalizationSettings
from authid.domain.error import IdentifierTableDisabled, LegacyDisabled, NotFoundError
from authid.domain.model import Identifier, User, UserView
from authid.domain.repository import IdentifierRepository, UserRepository
from authid.domain.service.base import Service
from authid.domain.service.migration_service import MigrationService
from authid.domain.service.normalizer import normalize
from authid.domain.service.virtual_fields import VirtualFieldMapper
from authid.domain.value import IdentifierMode, IdentifierType, UserId


class ModeController(Service):
    """Routes operations according to the configured mode."""

    def __init__(
        self,
        settings: IdentifierTableSettings,
        normalization: NormalizationSettings,
        user_repository: UserRepository,
        identifier_repository: IdentifierRepository,
        migration_service: MigrationService,
        mapper: VirtualFieldMapper,
    ) -> None:
        """Initialize mode controller.

        Args:
            settings: Frozen mode settings
            normalization: Normalization policy
            user_repository: User repository
            identifier_repository: Identifier repository
            migration_service: Lazy migration
            mapper: Projection of users into views
        """
        self.settings = settings
        self.normalization = normalization
        self.user_repository = user_repository
        self.identifier_repository = identifier_repository
        self.migration_service = migration_service
        self.mapper = mapper

    @property
    def mode(self) -> IdentifierMode:
        return self.settings.mode

    @property
    def lazy_migration(self) -> bool:
        return self.settings.migrate_existing_data and self.mode is not IdentifierMode.LEGACY

    def enter_legacy(self, operation: str) -> None:
        """Gate a legacy entry point.

        Args:
            operation: Name of the legacy operation

        Raises:
            LegacyDisabled: In direct mode
        """
        if self.mode is IdentifierMode.DIRECT:
            logfire.warn("Legacy operation rejected", operation=operation)
            raise LegacyDisabled(operation)

        if self.settings.warn_on_legacy_usage:
            message = f"'{operation}' is deprecated; use the identifier API instead"
            warnings.warn(message, DeprecationWarning, stacklevel=3)
            logfire.warn("Deprecated legacy operation used", operation=operation)

    def require_identifier_table(self, operation: str) -> None:
        """Gate an identifier operation.

        Raises:
            IdentifierTableDisabled: In legacy mode
        """
        if self.mode is IdentifierMode.LEGACY:
            logfire.warn("Identifier operation rejected", operation=operation)
            raise IdentifierTableDisabled(operation)

    async def get_user(self, user_id: UserId) -> User:
        """Get a user record.

        Raises:
            NotFoundError: If the user does not exist
        """
        user = await self.user_repository.find_by_id(user_id)
        if user is None:
            logfire.warn("User not found", user_id=str(user_id))
            raise NotFoundError("User", str(user_id))
        return user

    async def load_identifiers(self, user: User) -> list[Identifier]:
        """The identifiers that describe ``user`` in the current mode.

        In legacy mode they are derived from the flat record and never
        saved. Otherwise they come from the store, after a lazy migration
        when enabled and the user has none yet.
        """
        if self.mode is IdentifierMode.LEGACY:
            return await self.migration_service.derive(user)

        identifiers = await self.identifier_repository.find_all_by_user_id(user.id)
        if not identifiers and self.lazy_migration:
            logfire.info("Lazy migration on read", user_id=str(user.id))
            identifiers = await self.migration_service.migrate_user(user)
        return identifiers

    async def find_identifier(self, identifier_type: str, raw_value: str) -> Identifier | None:
        """Look up an identifier, falling back to the legacy email column.

        Args:
            identifier_type: Identifier type
            raw_value: Value as entered

        Returns:
            The identifier if found (possibly just migrated), None otherwise
        """
        value = normalize(identifier_type, raw_value, self.normalization)
        identifier = await self.identifier_repository.find_by_value(identifier_type, value)
        if identifier is not None or not self.lazy_migration:
            return identifier
        if identifier_type != IdentifierType.EMAIL:
            return None

        legacy_user = await self.user_repository.find_by_email(value)
        if legacy_user is None:
            return None
        # Already migrated: the legacy column is stale, the table is authoritative
        if await self.identifier_repository.find_all_by_user_id(legacy_user.id):
            return None

        logfire.info("Lazy migration on lookup", user_id=str(legacy_user.id))
        await self.migration_service.migrate_user(legacy_user)
        return await self.identifier_repository.find_by_value(identifier_type, value)

    async def find_user_by_identifier(
        self, identifier_type: str, raw_value: str
    ) -> User | None:
        """Resolve the owner of an identifier in the current mode.

        In legacy mode only email lookups are possible, on the flat column.
        """
        if self.mode is IdentifierMode.LEGACY:
            if identifier_type != IdentifierType.EMAIL:
                return None
            return await self.user_repository.find_by_email(
                normalize(identifier_type, raw_value, self.normalization)
            )

        identifier = await self.find_identifier(identifier_type, raw_value)
        if identifier is None:
            return None
        return await self.user_repository.find_by_id(identifier.user_id)

    async def view(self, user: User) -> UserView:
        """Project a user for callers, recovery level recomputed."""
        identifiers = await self.load_identifiers(user)
        return self.mapper.project(user, identifiers, self.mode)
