"""Unit tests for the legacy sign-up, sign-in and update use cases."""

import pytest

from authid.application.usecase.legacy import (
    GetUserByEmailRequest,
    GetUserByEmailUseCase,
    SignInEmailRequest,
    SignInEmailUseCase,
    SignUpEmailRequest,
    SignUpEmailUseCase,
    UpdateUserRequest,
    UpdateUserUseCase,
)
from authid.domain.error import (
    IdentifierConflict,
    InvalidCredentials,
    LegacyDisabled,
    SignUpFailed,
)
from authid.domain.repository import IdentifierRepository, UserRepository
from authid.domain.value import IdentifierMode
from tests.conftest import make_settings
from tests.harness import create_env_fixture

PASSWORD = "password one"

# Unit test fixtures
unit_env = create_env_fixture()
legacy_env = create_env_fixture(settings=make_settings(IdentifierMode.LEGACY))
direct_env = create_env_fixture(settings=make_settings(IdentifierMode.DIRECT))
warning_env = create_env_fixture(settings=make_settings(warn_on_legacy_usage=True))


async def sign_up_email(env, email="user@example.com", password=PASSWORD):
    use_case = await env.get(SignUpEmailUseCase)
    return await use_case.execute(SignUpEmailRequest(email=email, password=password))


class TestVirtualMode:
    """Legacy calls routed through identifiers."""

    @pytest.mark.asyncio
    async def test_sign_up_writes_identifier_not_column(self, unit_env):
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        identifier_repo = await unit_env.get(IdentifierRepository)

        # Act
        response = await sign_up_email(unit_env, "New@Example.com")

        # Assert
        assert response.user.email == "new@example.com"
        stored = await user_repo.find_by_id(response.user.id)
        assert stored.email is None
        assert stored.password_hash is None
        identifier = await identifier_repo.find_by_value("email", "new@example.com")
        assert identifier is not None and identifier.credential_hash is not None

    @pytest.mark.asyncio
    async def test_update_then_read_back_normalized(self, unit_env):
        """An update with a mixed-case email reads back lower-cased and signs in."""
        # Arrange
        signed_up = await sign_up_email(unit_env, "first@example.com")
        update = await unit_env.get(UpdateUserUseCase)
        get_by_email = await unit_env.get(GetUserByEmailUseCase)
        sign_in = await unit_env.get(SignInEmailUseCase)

        # Act
        updated = await update.execute(
            UpdateUserRequest(user_id=str(signed_up.user.id), email="User@Example.com")
        )
        fetched = await get_by_email.execute(GetUserByEmailRequest(email="user@example.com"))
        signed_in = await sign_in.execute(
            SignInEmailRequest(email="USER@EXAMPLE.COM", password=PASSWORD)
        )

        # Assert
        assert updated.user.email == "user@example.com"
        assert fetched is not None and fetched.user.id == signed_up.user.id
        assert signed_in.user.id == signed_up.user.id
        assert await get_by_email.execute(GetUserByEmailRequest(email="first@example.com")) is None

    @pytest.mark.asyncio
    async def test_update_profile_and_password(self, unit_env):
        signed_up = await sign_up_email(unit_env)
        update = await unit_env.get(UpdateUserUseCase)
        sign_in = await unit_env.get(SignInEmailUseCase)

        updated = await update.execute(
            UpdateUserRequest(
                user_id=str(signed_up.user.id),
                name="Renamed",
                custom_data={"team": "blue"},
                password="brand new password",
            )
        )

        assert updated.user.name == "Renamed"
        assert updated.user.custom_data == {"team": "blue"}
        await sign_in.execute(
            SignInEmailRequest(email="user@example.com", password="brand new password")
        )
        with pytest.raises(InvalidCredentials):
            await sign_in.execute(SignInEmailRequest(email="user@example.com", password=PASSWORD))

    @pytest.mark.asyncio
    async def test_update_to_taken_email_changes_nothing(self, unit_env):
        await sign_up_email(unit_env, "taken@example.com")
        signed_up = await sign_up_email(unit_env, "mine@example.com")
        update = await unit_env.get(UpdateUserUseCase)
        identifier_repo = await unit_env.get(IdentifierRepository)
        user_repo = await unit_env.get(UserRepository)

        with pytest.raises(IdentifierConflict):
            await update.execute(
                UpdateUserRequest(
                    user_id=str(signed_up.user.id), email="taken@example.com", name="Changed"
                )
            )

        mine = await identifier_repo.find_by_value("email", "mine@example.com")
        assert mine is not None and mine.user_id == signed_up.user.id
        stored = await user_repo.find_by_id(signed_up.user.id)
        assert stored.name is None

    @pytest.mark.asyncio
    async def test_duplicate_sign_up_fails_opaquely(self, unit_env):
        await sign_up_email(unit_env)

        with pytest.raises(SignUpFailed):
            await sign_up_email(unit_env, "USER@example.com")

    @pytest.mark.asyncio
    async def test_deprecation_warning(self, warning_env):
        with pytest.warns(DeprecationWarning):
            await sign_up_email(warning_env)


class TestLegacyMode:
    """Legacy calls on the flat record."""

    @pytest.mark.asyncio
    async def test_sign_up_writes_flat_columns(self, legacy_env):
        user_repo = await legacy_env.get(UserRepository)
        identifier_repo = await legacy_env.get(IdentifierRepository)

        response = await sign_up_email(legacy_env, "User@Example.com")

        stored = await user_repo.find_by_id(response.user.id)
        assert stored.email == "user@example.com"
        assert stored.password_hash is not None
        assert await identifier_repo.find_all_by_user_id(response.user.id) == []

    @pytest.mark.asyncio
    async def test_round_trip(self, legacy_env):
        signed_up = await sign_up_email(legacy_env, "first@example.com")
        update = await legacy_env.get(UpdateUserUseCase)
        sign_in = await legacy_env.get(SignInEmailUseCase)

        updated = await update.execute(
            UpdateUserRequest(user_id=str(signed_up.user.id), email="User@Example.com")
        )
        signed_in = await sign_in.execute(
            SignInEmailRequest(email="USER@EXAMPLE.COM", password=PASSWORD)
        )

        assert updated.user.email == "user@example.com"
        assert signed_in.user.id == signed_up.user.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_read_the_same(self, legacy_env):
        await sign_up_email(legacy_env)
        sign_in = await legacy_env.get(SignInEmailUseCase)

        with pytest.raises(InvalidCredentials) as wrong:
            await sign_in.execute(SignInEmailRequest(email="user@example.com", password="bad pass"))
        with pytest.raises(InvalidCredentials) as unknown:
            await sign_in.execute(SignInEmailRequest(email="who@example.com", password=PASSWORD))

        assert str(wrong.value) == str(unknown.value)

    @pytest.mark.asyncio
    async def test_email_change_resets_verification(self, legacy_env):
        signed_up = await sign_up_email(legacy_env)
        update = await legacy_env.get(UpdateUserUseCase)
        await update.execute(
            UpdateUserRequest(user_id=str(signed_up.user.id), email_verified=True)
        )

        updated = await update.execute(
            UpdateUserRequest(user_id=str(signed_up.user.id), email="other@example.com")
        )

        assert updated.user.email_verified is False

    @pytest.mark.asyncio
    async def test_update_to_taken_email(self, legacy_env):
        await sign_up_email(legacy_env, "taken@example.com")
        signed_up = await sign_up_email(legacy_env, "mine@example.com")
        update = await legacy_env.get(UpdateUserUseCase)

        with pytest.raises(IdentifierConflict):
            await update.execute(
                UpdateUserRequest(user_id=str(signed_up.user.id), email="taken@example.com")
            )


class TestDirectMode:
    """Legacy calls are refused in direct mode."""

    @pytest.mark.asyncio
    async def test_sign_up_email_refused(self, direct_env):
        with pytest.raises(LegacyDisabled):
            await sign_up_email(direct_env)

    @pytest.mark.asyncio
    async def test_sign_in_email_refused(self, direct_env):
        sign_in = await direct_env.get(SignInEmailUseCase)

        with pytest.raises(LegacyDisabled):
            await sign_in.execute(SignInEmailRequest(email="a@example.com", password=PASSWORD))

    @pytest.mark.asyncio
    async def test_get_user_by_email_refused(self, direct_env):
        get_by_email = await direct_env.get(GetUserByEmailUseCase)

        with pytest.raises(LegacyDisabled):
            await get_by_email.execute(GetUserByEmailRequest(email="a@example.com"))
