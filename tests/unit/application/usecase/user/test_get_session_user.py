"""Unit tests for GetSessionUserUseCase."""

import pytest

from authid.application.usecase.auth import (
    SignUpWithIdentifierRequest,
    SignUpWithIdentifierUseCase,
)
from authid.application.usecase.user import GetSessionUserRequest, GetSessionUserUseCase
from authid.config import AuthSettings
from authid.domain.error import NotFoundError
from authid.domain.repository import UserRepository
from authid.domain.value import RecoveryLevel
from authid.util.jwt import JWTError, create_token
from tests.harness import create_env_fixture

# Unit test fixtures
unit_env = create_env_fixture()


class TestGetSessionUser:
    """Tests for GetSessionUserUseCase."""

    @pytest.mark.asyncio
    async def test_resolves_token_from_sign_up(self, unit_env):
        # Arrange
        sign_up = await unit_env.get(SignUpWithIdentifierUseCase)
        signed_up = await sign_up.execute(
            SignUpWithIdentifierRequest(identifier="Bob@Example.com", password="hunter2hunter2")
        )
        use_case = await unit_env.get(GetSessionUserUseCase)

        # Act
        response = await use_case.execute(GetSessionUserRequest(token=signed_up.token))

        # Assert
        assert response.user.id == signed_up.user.id
        assert response.user.email == "bob@example.com"
        assert response.user.recovery_level is RecoveryLevel.PSEUDONYMOUS
        assert response.identifier_type == "email"
        assert response.session_id

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret_is_rejected(self, unit_env):
        # Arrange
        sign_up = await unit_env.get(SignUpWithIdentifierUseCase)
        signed_up = await sign_up.execute(
            SignUpWithIdentifierRequest(identifier="bob@example.com")
        )
        forged = create_token(
            str(signed_up.user.id), "email", AuthSettings(jwt_secret="not-the-secret")
        )
        use_case = await unit_env.get(GetSessionUserUseCase)

        # Act & Assert
        with pytest.raises(JWTError, match="Invalid token"):
            await use_case.execute(GetSessionUserRequest(token=forged))

    @pytest.mark.asyncio
    async def test_deleted_user_is_not_found(self, unit_env):
        # Arrange
        sign_up = await unit_env.get(SignUpWithIdentifierUseCase)
        signed_up = await sign_up.execute(
            SignUpWithIdentifierRequest(identifier="bob@example.com")
        )
        user_repo = await unit_env.get(UserRepository)
        await user_repo.delete(signed_up.user.id)
        use_case = await unit_env.get(GetSessionUserUseCase)

        # Act & Assert
        with pytest.raises(NotFoundError):
            await use_case.execute(GetSessionUserRequest(token=signed_up.token))
