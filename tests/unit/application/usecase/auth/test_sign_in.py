"""Unit tests for SignInWithIdentifierUseCase."""

import pytest

from authid.application.usecase.auth import (
    SignInWithIdentifierRequest,
    SignInWithIdentifierUseCase,
    SignUpWithIdentifierRequest,
    SignUpWithIdentifierUseCase,
    SignUpWithIdentifiersRequest,
    SignUpWithIdentifiersUseCase,
)
from authid.application.usecase.legacy import UpdateUserRequest, UpdateUserUseCase
from authid.application.usecase.migration import MigrateUserRequest, MigrateUserUseCase
from authid.domain.error import (
    INVALID_CREDENTIALS_MESSAGE,
    InvalidCredentials,
    RecoveryLevelInsufficient,
    VerificationRequired,
)
from authid.domain.repository import IdentifierRepository, UserRepository
from authid.domain.service import IdentifierInput, IdentifierService, PasswordHasher
from authid.domain.value import RecoveryLevel
from tests.conftest import make_settings, make_user
from tests.harness import create_env_fixture

PASSWORD = "correct horse battery"

# Unit test fixtures
unit_env = create_env_fixture()
verified_only_env = create_env_fixture(settings=make_settings(require_verification=True))
full_recovery_env = create_env_fixture(
    settings=make_settings(minimum_recovery_level=RecoveryLevel.FULL)
)
lazy_env = create_env_fixture(settings=make_settings(migrate_existing_data=True))


async def sign_up(env, identifier="user@example.com", identifier_type="email"):
    use_case = await env.get(SignUpWithIdentifierUseCase)
    return await use_case.execute(
        SignUpWithIdentifierRequest(
            identifier=identifier, identifier_type=identifier_type, password=PASSWORD
        )
    )


class TestSignIn:
    """Tests for SignInWithIdentifierUseCase."""

    @pytest.mark.asyncio
    async def test_sign_in_with_any_spelling(self, unit_env):
        """Should match the normalized value."""
        # Arrange
        signed_up = await sign_up(unit_env)
        use_case = await unit_env.get(SignInWithIdentifierUseCase)

        # Act
        response = await use_case.execute(
            SignInWithIdentifierRequest(identifier=" USER@Example.com ", password=PASSWORD)
        )

        # Assert
        assert response.user.id == signed_up.user.id
        assert response.token

    @pytest.mark.asyncio
    async def test_failures_are_indistinguishable(self, unit_env):
        """Unknown identifier, wrong password and missing credential read the same."""
        # Arrange
        await sign_up(unit_env)
        oauth_sign_up = await unit_env.get(SignUpWithIdentifiersUseCase)
        await oauth_sign_up.execute(
            SignUpWithIdentifiersRequest(
                identifiers=[
                    IdentifierInput(type="oauth", value="github|7"),
                    IdentifierInput(type="username", value="nopassword"),
                ]
            )
        )
        use_case = await unit_env.get(SignInWithIdentifierUseCase)
        attempts = [
            SignInWithIdentifierRequest(identifier="nobody@example.com", password=PASSWORD),
            SignInWithIdentifierRequest(identifier="user@example.com", password="wrong password"),
            SignInWithIdentifierRequest(
                identifier="nopassword", identifier_type="username", password=PASSWORD
            ),
            SignInWithIdentifierRequest(
                identifier="github|7", identifier_type="oauth", password=PASSWORD
            ),
        ]

        # Act
        messages = []
        for request in attempts:
            with pytest.raises(InvalidCredentials) as exc_info:
                await use_case.execute(request)
            messages.append(str(exc_info.value))

        # Assert
        assert set(messages) == {INVALID_CREDENTIALS_MESSAGE}

    @pytest.mark.asyncio
    async def test_username_added_later_uses_primary_credential(self, unit_env):
        signed_up = await sign_up(unit_env)
        identifier_service = await unit_env.get(IdentifierService)
        await identifier_service.add(signed_up.user.id, "username", "user1")
        use_case = await unit_env.get(SignInWithIdentifierUseCase)

        response = await use_case.execute(
            SignInWithIdentifierRequest(
                identifier="user1", identifier_type="username", password=PASSWORD
            )
        )

        assert response.user.id == signed_up.user.id

    @pytest.mark.asyncio
    async def test_unverified_identifier_blocked_when_required(self, verified_only_env):
        await sign_up(verified_only_env)
        use_case = await verified_only_env.get(SignInWithIdentifierUseCase)

        with pytest.raises(VerificationRequired):
            await use_case.execute(
                SignInWithIdentifierRequest(identifier="user@example.com", password=PASSWORD)
            )

    @pytest.mark.asyncio
    async def test_verification_gate_only_after_password(self, verified_only_env):
        """A wrong password never reveals the verification state."""
        await sign_up(verified_only_env)
        use_case = await verified_only_env.get(SignInWithIdentifierUseCase)

        with pytest.raises(InvalidCredentials):
            await use_case.execute(
                SignInWithIdentifierRequest(identifier="user@example.com", password="wrong one")
            )

    @pytest.mark.asyncio
    async def test_recovery_gate(self, full_recovery_env):
        """Unverified email is PSEUDONYMOUS; verifying it lifts the gate."""
        # Arrange
        signed_up = await sign_up(full_recovery_env)
        use_case = await full_recovery_env.get(SignInWithIdentifierUseCase)
        identifier_repo = await full_recovery_env.get(IdentifierRepository)
        identifier_service = await full_recovery_env.get(IdentifierService)
        request = SignInWithIdentifierRequest(identifier="user@example.com", password=PASSWORD)

        # Act / Assert
        with pytest.raises(RecoveryLevelInsufficient) as exc_info:
            await use_case.execute(request)
        assert exc_info.value.required == "FULL"
        assert exc_info.value.actual == "PSEUDONYMOUS"

        email = await identifier_repo.find_by_value("email", "user@example.com")
        await identifier_service.mark_verified(email)
        response = await use_case.execute(request)
        assert response.user.id == signed_up.user.id
        assert response.user.recovery_level is RecoveryLevel.FULL

    @pytest.mark.asyncio
    async def test_legacy_user_signs_in_after_lazy_migration(self, lazy_env):
        """A flat record with a bcrypt hash signs in through the identifier path."""
        # Arrange
        user_repo = await lazy_env.get(UserRepository)
        hasher = await lazy_env.get(PasswordHasher)
        user = await user_repo.save(
            make_user(email="old@example.com", password_hash=hasher.hash(PASSWORD))
        )
        use_case = await lazy_env.get(SignInWithIdentifierUseCase)

        # Act
        response = await use_case.execute(
            SignInWithIdentifierRequest(identifier="Old@Example.com", password=PASSWORD)
        )

        # Assert
        assert response.user.id == user.id
        assert response.user.email == "old@example.com"

    @pytest.mark.asyncio
    async def test_stale_legacy_email_does_not_sign_in_after_change(self, lazy_env):
        """Once migrated, the old email column is never migrated again on lookup."""
        # Arrange
        user_repo = await lazy_env.get(UserRepository)
        identifier_repo = await lazy_env.get(IdentifierRepository)
        hasher = await lazy_env.get(PasswordHasher)
        user = await user_repo.save(
            make_user(email="old@example.com", password_hash=hasher.hash("oldpassword1"))
        )
        migrate = await lazy_env.get(MigrateUserUseCase)
        await migrate.execute(MigrateUserRequest(user_id=str(user.id)))
        update = await lazy_env.get(UpdateUserUseCase)
        await update.execute(
            UpdateUserRequest(user_id=str(user.id), email="new@example.com", password=PASSWORD)
        )
        use_case = await lazy_env.get(SignInWithIdentifierUseCase)

        # Act & Assert
        with pytest.raises(InvalidCredentials):
            await use_case.execute(
                SignInWithIdentifierRequest(identifier="old@example.com", password="oldpassword1")
            )

        emails = [
            i.value
            for i in await identifier_repo.find_all_by_user_id(user.id)
            if i.type == "email"
        ]
        assert emails == ["new@example.com"]

        response = await use_case.execute(
            SignInWithIdentifierRequest(identifier="new@example.com", password=PASSWORD)
        )
        assert response.user.id == user.id
