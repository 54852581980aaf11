"""Domain layer DI providers."""

from dishka import Scope, provide

from authid.config import (
    AuthSettings,
    IdentifierPolicySettings,
    IdentifierTableSettings,
    NormalizationSettings,
    SecuritySettings,
)
from authid.domain.repository import (
    IdentifierRepository,
    LinkedAccountRepository,
    TransactionManager,
    UserRepository,
    VerificationRepository,
)
from authid.domain.service import (
    AccountService,
    IdentifierService,
    IdentifierValidators,
    JWTService,
    MigrationService,
    ModeController,
    QueryTranslator,
    RateLimiter,
    VerificationService,
    VirtualFieldMapper,
)
from authid.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_jwt_service(self, auth_settings: AuthSettings) -> JWTService:
        """Provide JWT token domain service."""
        return JWTService(auth_settings=auth_settings)

    @provide
    def get_identifier_service(
        self,
        identifier_repository: IdentifierRepository,
        transaction_manager: TransactionManager,
        validators: IdentifierValidators,
        policy: IdentifierPolicySettings,
        normalization: NormalizationSettings,
    ) -> IdentifierService:
        """Provide identifier domain service."""
        return IdentifierService(
            identifier_repository=identifier_repository,
            transaction_manager=transaction_manager,
            validators=validators,
            policy=policy,
            normalization=normalization,
        )

    @provide
    def get_virtual_field_mapper(
        self,
        identifier_repository: IdentifierRepository,
        transaction_manager: TransactionManager,
        validators: IdentifierValidators,
        policy: IdentifierPolicySettings,
        normalization: NormalizationSettings,
    ) -> VirtualFieldMapper:
        """Provide virtual field mapper."""
        return VirtualFieldMapper(
            identifier_repository=identifier_repository,
            transaction_manager=transaction_manager,
            validators=validators,
            policy=policy,
            normalization=normalization,
        )

    @provide
    def get_query_translator(
        self,
        identifier_table: IdentifierTableSettings,
        normalization: NormalizationSettings,
    ) -> QueryTranslator:
        """Provide query translator for the configured mode."""
        return QueryTranslator(mode=identifier_table.mode, normalization=normalization)

    @provide
    def get_migration_service(
        self,
        user_repository: UserRepository,
        identifier_repository: IdentifierRepository,
        linked_account_repository: LinkedAccountRepository,
        identifier_service: IdentifierService,
        transaction_manager: TransactionManager,
        normalization: NormalizationSettings,
    ) -> MigrationService:
        """Provide migration service."""
        return MigrationService(
            user_repository=user_repository,
            identifier_repository=identifier_repository,
            linked_account_repository=linked_account_repository,
            identifier_service=identifier_service,
            transaction_manager=transaction_manager,
            normalization=normalization,
        )

    @provide
    def get_mode_controller(
        self,
        identifier_table: IdentifierTableSettings,
        normalization: NormalizationSettings,
        user_repository: UserRepository,
        identifier_repository: IdentifierRepository,
        migration_service: MigrationService,
        mapper: VirtualFieldMapper,
    ) -> ModeController:
        """Provide mode controller."""
        return ModeController(
            settings=identifier_table,
            normalization=normalization,
            user_repository=user_repository,
            identifier_repository=identifier_repository,
            migration_service=migration_service,
            mapper=mapper,
        )

    @provide
    def get_account_service(
        self,
        user_repository: UserRepository,
        identifier_service: IdentifierService,
        transaction_manager: TransactionManager,
    ) -> AccountService:
        """Provide account registration service."""
        return AccountService(
            user_repository=user_repository,
            identifier_service=identifier_service,
            transaction_manager=transaction_manager,
        )

    @provide
    def get_verification_service(
        self,
        verification_repository: VerificationRepository,
        rate_limiter: RateLimiter,
        security: SecuritySettings,
    ) -> VerificationService:
        """Provide verification token service."""
        return VerificationService(
            verification_repository=verification_repository,
            rate_limiter=rate_limiter,
            security=security,
        )
