"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from authid.config import (
    AuthSettings,
    IdentifierPolicySettings,
    IdentifierTableSettings,
    NormalizationSettings,
    SecuritySettings,
    Settings,
)
from authid.domain.service import IdentifierValidators
from authid.util.di.base import ProviderBase
from authid.util.error import ConfigurationError

DEFAULT_JWT_SECRET = AuthSettings.model_fields["jwt_secret"].default


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        settings = Settings()
        if settings.environment == "production" and settings.auth.jwt_secret == DEFAULT_JWT_SECRET:
            raise ConfigurationError("AUTH__JWT_SECRET must be set in production")
        return settings

    @provide(scope=Scope.APP)
    def provide_auth_settings(self, settings: Settings) -> AuthSettings:
        """Provide auth settings."""
        return settings.auth

    @provide(scope=Scope.APP)
    def provide_identifier_table_settings(self, settings: Settings) -> IdentifierTableSettings:
        """Provide the frozen mode settings."""
        return settings.identifier_table

    @provide(scope=Scope.APP)
    def provide_identifier_policy(self, settings: Settings) -> IdentifierPolicySettings:
        """Provide identifier type routing."""
        return settings.identifiers

    @provide(scope=Scope.APP)
    def provide_normalization_settings(self, settings: Settings) -> NormalizationSettings:
        """Provide normalization policy."""
        return settings.normalization

    @provide(scope=Scope.APP)
    def provide_security_settings(self, settings: Settings) -> SecuritySettings:
        """Provide sign-in policy settings."""
        return settings.security

    @provide(scope=Scope.APP)
    def provide_validators(self) -> IdentifierValidators:
        """Provide the default per-type validation hooks.

        Override this provider to register custom hooks.
        """
        return IdentifierValidators()
