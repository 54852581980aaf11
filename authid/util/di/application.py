"""Application layer DI providers."""

from dishka import Scope, provide

from authid.application.usecase.auth import (
    CreateAnonymousUserUseCase,
    RequestPasswordResetUseCase,
    ResetPasswordUseCase,
    SignInWithIdentifierUseCase,
    SignUpWithIdentifierUseCase,
    SignUpWithIdentifiersUseCase,
)
from authid.application.usecase.identifier import (
    AddIdentifierUseCase,
    RemoveIdentifierUseCase,
    SendIdentifierVerificationUseCase,
    VerifyIdentifierUseCase,
)
from authid.application.usecase.legacy import (
    GetUserByEmailUseCase,
    LinkAccountUseCase,
    ListUsersUseCase,
    SignInEmailUseCase,
    SignUpEmailUseCase,
    UpdateUserUseCase,
)
from authid.application.usecase.migration import (
    MigrateAllUsersUseCase,
    MigrateUserUseCase,
)
from authid.application.usecase.user import (
    GetRecoveryActionsUseCase,
    GetSessionUserUseCase,
    GetUserByIdentifierUseCase,
    GetUserUseCase,
)
from authid.config import Settings
from authid.domain.repository import (
    IdentifierRepository,
    LinkedAccountRepository,
    TransactionManager,
    UserRepository,
)
from authid.domain.service import (
    AccountService,
    IdentifierService,
    IdentifierValidators,
    JWTService,
    MigrationService,
    ModeController,
    PasswordHasher,
    QueryTranslator,
    VerificationSender,
    VerificationService,
    VirtualFieldMapper,
)
from authid.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_sign_up_with_identifiers_use_case(
        self,
        account_service: AccountService,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> SignUpWithIdentifiersUseCase:
        """Provide multi-identifier sign-up use case."""
        return SignUpWithIdentifiersUseCase(
            account_service=account_service,
            mode_controller=mode_controller,
            password_hasher=password_hasher,
            jwt_service=jwt_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_sign_up_with_identifier_use_case(
        self, sign_up: SignUpWithIdentifiersUseCase
    ) -> SignUpWithIdentifierUseCase:
        """Provide single-identifier sign-up use case."""
        return SignUpWithIdentifierUseCase(sign_up=sign_up)

    @provide(scope=Scope.REQUEST)
    def get_create_anonymous_user_use_case(
        self,
        account_service: AccountService,
        user_repository: UserRepository,
        mode_controller: ModeController,
        jwt_service: JWTService,
    ) -> CreateAnonymousUserUseCase:
        """Provide anonymous sign-up use case."""
        return CreateAnonymousUserUseCase(
            account_service=account_service,
            user_repository=user_repository,
            mode_controller=mode_controller,
            jwt_service=jwt_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_sign_in_with_identifier_use_case(
        self,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> SignInWithIdentifierUseCase:
        """Provide identifier sign-in use case."""
        return SignInWithIdentifierUseCase(
            identifier_service=identifier_service,
            mode_controller=mode_controller,
            password_hasher=password_hasher,
            jwt_service=jwt_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_request_password_reset_use_case(
        self,
        verification_service: VerificationService,
        verification_sender: VerificationSender,
        mode_controller: ModeController,
        user_repository: UserRepository,
        settings: Settings,
    ) -> RequestPasswordResetUseCase:
        """Provide password reset request use case."""
        return RequestPasswordResetUseCase(
            verification_service=verification_service,
            verification_sender=verification_sender,
            mode_controller=mode_controller,
            user_repository=user_repository,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_reset_password_use_case(
        self,
        verification_service: VerificationService,
        identifier_service: IdentifierService,
        identifier_repository: IdentifierRepository,
        user_repository: UserRepository,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        transaction_manager: TransactionManager,
    ) -> ResetPasswordUseCase:
        """Provide password reset use case."""
        return ResetPasswordUseCase(
            verification_service=verification_service,
            identifier_service=identifier_service,
            identifier_repository=identifier_repository,
            user_repository=user_repository,
            mode_controller=mode_controller,
            password_hasher=password_hasher,
            transaction_manager=transaction_manager,
        )

    # Identifier use cases
    @provide(scope=Scope.REQUEST)
    def get_add_identifier_use_case(
        self, identifier_service: IdentifierService, mode_controller: ModeController
    ) -> AddIdentifierUseCase:
        """Provide add identifier use case."""
        return AddIdentifierUseCase(
            identifier_service=identifier_service, mode_controller=mode_controller
        )

    @provide(scope=Scope.REQUEST)
    def get_remove_identifier_use_case(
        self,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        transaction_manager: TransactionManager,
        settings: Settings,
    ) -> RemoveIdentifierUseCase:
        """Provide remove identifier use case."""
        return RemoveIdentifierUseCase(
            identifier_service=identifier_service,
            mode_controller=mode_controller,
            transaction_manager=transaction_manager,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_send_identifier_verification_use_case(
        self,
        verification_service: VerificationService,
        verification_sender: VerificationSender,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        settings: Settings,
    ) -> SendIdentifierVerificationUseCase:
        """Provide send verification use case."""
        return SendIdentifierVerificationUseCase(
            verification_service=verification_service,
            verification_sender=verification_sender,
            identifier_service=identifier_service,
            mode_controller=mode_controller,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_verify_identifier_use_case(
        self,
        verification_service: VerificationService,
        identifier_service: IdentifierService,
        identifier_repository: IdentifierRepository,
        user_repository: UserRepository,
        mode_controller: ModeController,
        transaction_manager: TransactionManager,
    ) -> VerifyIdentifierUseCase:
        """Provide verify identifier use case."""
        return VerifyIdentifierUseCase(
            verification_service=verification_service,
            identifier_service=identifier_service,
            identifier_repository=identifier_repository,
            user_repository=user_repository,
            mode_controller=mode_controller,
            transaction_manager=transaction_manager,
        )

    # User use cases
    @provide(scope=Scope.REQUEST)
    def get_get_user_use_case(
        self, user_repository: UserRepository, mode_controller: ModeController
    ) -> GetUserUseCase:
        """Provide get user use case."""
        return GetUserUseCase(
            user_repository=user_repository, mode_controller=mode_controller
        )

    @provide(scope=Scope.REQUEST)
    def get_get_user_by_identifier_use_case(
        self, mode_controller: ModeController
    ) -> GetUserByIdentifierUseCase:
        """Provide get user by identifier use case."""
        return GetUserByIdentifierUseCase(mode_controller=mode_controller)

    @provide(scope=Scope.REQUEST)
    def get_get_session_user_use_case(
        self, jwt_service: JWTService, mode_controller: ModeController
    ) -> GetSessionUserUseCase:
        """Provide get session user use case."""
        return GetSessionUserUseCase(
            jwt_service=jwt_service, mode_controller=mode_controller
        )

    @provide(scope=Scope.REQUEST)
    def get_get_recovery_actions_use_case(
        self, mode_controller: ModeController, settings: Settings
    ) -> GetRecoveryActionsUseCase:
        """Provide recovery actions use case."""
        return GetRecoveryActionsUseCase(mode_controller=mode_controller, settings=settings)

    # Migration use cases
    @provide(scope=Scope.REQUEST)
    def get_migrate_user_use_case(
        self, migration_service: MigrationService, mode_controller: ModeController
    ) -> MigrateUserUseCase:
        """Provide single-user migration use case."""
        return MigrateUserUseCase(
            migration_service=migration_service, mode_controller=mode_controller
        )

    @provide(scope=Scope.REQUEST)
    def get_migrate_all_users_use_case(
        self, migration_service: MigrationService, mode_controller: ModeController
    ) -> MigrateAllUsersUseCase:
        """Provide batch migration use case."""
        return MigrateAllUsersUseCase(
            migration_service=migration_service, mode_controller=mode_controller
        )

    # Legacy use cases
    @provide(scope=Scope.REQUEST)
    def get_sign_up_email_use_case(
        self,
        sign_up: SignUpWithIdentifierUseCase,
        user_repository: UserRepository,
        mode_controller: ModeController,
        validators: IdentifierValidators,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> SignUpEmailUseCase:
        """Provide legacy email sign-up use case."""
        return SignUpEmailUseCase(
            sign_up=sign_up,
            user_repository=user_repository,
            mode_controller=mode_controller,
            validators=validators,
            password_hasher=password_hasher,
            jwt_service=jwt_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_sign_in_email_use_case(
        self,
        sign_in: SignInWithIdentifierUseCase,
        user_repository: UserRepository,
        mode_controller: ModeController,
        password_hasher: PasswordHasher,
        jwt_service: JWTService,
        settings: Settings,
    ) -> SignInEmailUseCase:
        """Provide legacy email sign-in use case."""
        return SignInEmailUseCase(
            sign_in=sign_in,
            user_repository=user_repository,
            mode_controller=mode_controller,
            password_hasher=password_hasher,
            jwt_service=jwt_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_update_user_use_case(
        self,
        user_repository: UserRepository,
        mode_controller: ModeController,
        mapper: VirtualFieldMapper,
        validators: IdentifierValidators,
        password_hasher: PasswordHasher,
        transaction_manager: TransactionManager,
        settings: Settings,
    ) -> UpdateUserUseCase:
        """Provide legacy update user use case."""
        return UpdateUserUseCase(
            user_repository=user_repository,
            mode_controller=mode_controller,
            mapper=mapper,
            validators=validators,
            password_hasher=password_hasher,
            transaction_manager=transaction_manager,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_user_by_email_use_case(
        self, mode_controller: ModeController
    ) -> GetUserByEmailUseCase:
        """Provide legacy get user by email use case."""
        return GetUserByEmailUseCase(mode_controller=mode_controller)

    @provide(scope=Scope.REQUEST)
    def get_list_users_use_case(
        self,
        user_repository: UserRepository,
        mode_controller: ModeController,
        translator: QueryTranslator,
    ) -> ListUsersUseCase:
        """Provide legacy list users use case."""
        return ListUsersUseCase(
            user_repository=user_repository,
            mode_controller=mode_controller,
            translator=translator,
        )

    @provide(scope=Scope.REQUEST)
    def get_link_account_use_case(
        self,
        linked_account_repository: LinkedAccountRepository,
        identifier_service: IdentifierService,
        mode_controller: ModeController,
        settings: Settings,
    ) -> LinkAccountUseCase:
        """Provide legacy account linking use case."""
        return LinkAccountUseCase(
            linked_account_repository=linked_account_repository,
            identifier_service=identifier_service,
            mode_controller=mode_controller,
            settings=settings,
        )
