"""Unit tests for the sign-up use cases."""

import pytest

from authid.application.usecase.auth import (
    CreateAnonymousUserUseCase,
    SignUpWithIdentifierRequest,
    SignUpWithIdentifierUseCase,
    SignUpWithIdentifiersRequest,
    SignUpWithIdentifiersUseCase,
)
from authid.domain.error import IdentifierTableDisabled, SignUpFailed, ValidationError
from authid.domain.repository import IdentifierRepository, UserRepository
from authid.domain.service import IdentifierInput, JWTService
from authid.domain.value import IdentifierMode, RecoveryLevel
from tests.conftest import make_settings
from tests.harness import create_env_fixture

# Unit test fixtures
unit_env = create_env_fixture()
direct_env = create_env_fixture(settings=make_settings(IdentifierMode.DIRECT))
legacy_env = create_env_fixture(settings=make_settings(IdentifierMode.LEGACY))
require_email_env = create_env_fixture(settings=make_settings(require_email=True))


class TestSignUpWithIdentifiers:
    """Tests for SignUpWithIdentifiersUseCase."""

    @pytest.mark.asyncio
    async def test_creates_user_with_all_identifiers(self, unit_env):
        """Should create the user and claim every identifier."""
        # Arrange
        use_case = await unit_env.get(SignUpWithIdentifiersUseCase)
        identifier_repo = await unit_env.get(IdentifierRepository)
        jwt_service = await unit_env.get(JWTService)
        request = SignUpWithIdentifiersRequest(
            identifiers=[
                IdentifierInput(type="email", value="Alice@Example.com"),
                IdentifierInput(type="username", value="alice"),
            ],
            password="correct horse",
            name="Alice",
        )

        # Act
        response = await use_case.execute(request)

        # Assert
        assert response.user.name == "Alice"
        assert response.user.email == "alice@example.com"
        assert response.user.email_verified is False
        assert response.user.recovery_level is RecoveryLevel.PSEUDONYMOUS

        stored = await identifier_repo.find_all_by_user_id(response.user.id)
        by_type = {i.type: i for i in stored}
        assert set(by_type) == {"email", "username"}
        assert by_type["email"].credential_hash is not None
        assert by_type["username"].credential_hash is None
        assert by_type["username"].verified is True

        payload = jwt_service.verify_token(response.token)
        assert payload.user_id == str(response.user.id)
        assert payload.identifier_type == "email"

    @pytest.mark.asyncio
    async def test_taken_and_invalid_identifiers_fail_identically(self, unit_env):
        """Sign-up must not reveal whether an identifier exists."""
        # Arrange
        use_case = await unit_env.get(SignUpWithIdentifierUseCase)
        await use_case.execute(
            SignUpWithIdentifierRequest(identifier="taken@example.com", password="password1")
        )

        # Act
        with pytest.raises(SignUpFailed) as taken:
            await use_case.execute(
                SignUpWithIdentifierRequest(identifier="TAKEN@example.com", password="password1")
            )
        with pytest.raises(SignUpFailed) as invalid:
            await use_case.execute(
                SignUpWithIdentifierRequest(identifier="not an email", password="password1")
            )

        # Assert
        assert str(taken.value) == str(invalid.value)

    @pytest.mark.asyncio
    async def test_failed_sign_up_leaves_nothing_behind(self, unit_env):
        """A conflict on the second identifier rolls back the user and the first."""
        # Arrange
        use_case = await unit_env.get(SignUpWithIdentifiersUseCase)
        user_repo = await unit_env.get(UserRepository)
        identifier_repo = await unit_env.get(IdentifierRepository)
        await use_case.execute(
            SignUpWithIdentifiersRequest(
                identifiers=[IdentifierInput(type="username", value="alice")]
            )
        )

        # Act
        with pytest.raises(SignUpFailed):
            await use_case.execute(
                SignUpWithIdentifiersRequest(
                    identifiers=[
                        IdentifierInput(type="email", value="bob@example.com"),
                        IdentifierInput(type="username", value="alice"),
                    ]
                )
            )

        # Assert
        assert await identifier_repo.find_by_value("email", "bob@example.com") is None
        assert len(await user_repo.find_page()) == 1

    @pytest.mark.asyncio
    async def test_password_rules(self, unit_env):
        use_case = await unit_env.get(SignUpWithIdentifierUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                SignUpWithIdentifierRequest(identifier="a@example.com", password="short")
            )
        with pytest.raises(ValidationError):
            await use_case.execute(
                SignUpWithIdentifierRequest(identifier="a@example.com", password="x" * 73)
            )

    @pytest.mark.asyncio
    async def test_password_needs_credential_identifier(self, unit_env):
        use_case = await unit_env.get(SignUpWithIdentifierUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                SignUpWithIdentifierRequest(
                    identifier="github|1", identifier_type="oauth", password="password1"
                )
            )

    @pytest.mark.asyncio
    async def test_passwordless_oauth_sign_up_is_partial(self, unit_env):
        use_case = await unit_env.get(SignUpWithIdentifierUseCase)

        response = await use_case.execute(
            SignUpWithIdentifierRequest(identifier="github|1", identifier_type="oauth")
        )

        assert response.user.recovery_level is RecoveryLevel.PARTIAL

    @pytest.mark.asyncio
    async def test_email_required_in_virtual_mode(self, require_email_env):
        use_case = await require_email_env.get(SignUpWithIdentifierUseCase)

        with pytest.raises(ValidationError):
            await use_case.execute(
                SignUpWithIdentifierRequest(
                    identifier="alice", identifier_type="username", password="password1"
                )
            )

    @pytest.mark.asyncio
    async def test_direct_mode_hides_email_field(self, direct_env):
        use_case = await direct_env.get(SignUpWithIdentifierUseCase)

        response = await use_case.execute(
            SignUpWithIdentifierRequest(identifier="a@example.com", password="password1")
        )

        assert response.user.email is None
        assert [i.value for i in response.user.identifiers] == ["a@example.com"]

    @pytest.mark.asyncio
    async def test_rejected_in_legacy_mode(self, legacy_env):
        use_case = await legacy_env.get(SignUpWithIdentifierUseCase)

        with pytest.raises(IdentifierTableDisabled):
            await use_case.execute(
                SignUpWithIdentifierRequest(identifier="a@example.com", password="password1")
            )


class TestCreateAnonymousUser:
    """Tests for CreateAnonymousUserUseCase."""

    @pytest.mark.asyncio
    async def test_anonymous_user_holds_only_marker(self, unit_env):
        use_case = await unit_env.get(CreateAnonymousUserUseCase)

        response = await use_case.execute()

        assert response.user.is_anonymous is True
        assert response.user.recovery_level is RecoveryLevel.ANONYMOUS
        assert [i.type for i in response.user.identifiers] == ["anonymous"]

    @pytest.mark.asyncio
    async def test_legacy_mode_anonymous_user(self, legacy_env):
        use_case = await legacy_env.get(CreateAnonymousUserUseCase)
        user_repo = await legacy_env.get(UserRepository)

        response = await use_case.execute()

        stored = await user_repo.find_by_id(response.user.id)
        assert stored is not None and stored.is_anonymous is True
        assert response.user.recovery_level is RecoveryLevel.ANONYMOUS
