"""Unit tests for LinkAccountUseCase."""

import pytest

from authid.application.usecase.legacy import LinkAccountRequest, LinkAccountUseCase
from authid.domain.error import IdentifierConflict, LegacyDisabled
from authid.domain.repository import (
    IdentifierRepository,
    LinkedAccountRepository,
    UserRepository,
)
from authid.domain.value import IdentifierMode, RecoveryLevel
from tests.conftest import make_settings, make_user
from tests.harness import create_env_fixture

# Unit test fixtures
unit_env = create_env_fixture()
legacy_env = create_env_fixture(settings=make_settings(IdentifierMode.LEGACY))
direct_env = create_env_fixture(settings=make_settings(IdentifierMode.DIRECT))


class TestLinkAccount:
    """Tests for LinkAccountUseCase."""

    @pytest.mark.asyncio
    async def test_virtual_mode_stores_oauth_identifier(self, unit_env):
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        identifier_repo = await unit_env.get(IdentifierRepository)
        user = await user_repo.save(make_user())
        use_case = await unit_env.get(LinkAccountUseCase)

        # Act
        response = await use_case.execute(
            LinkAccountRequest(
                user_id=str(user.id),
                provider="github",
                provider_account_id="42",
                access_token="token",
            )
        )

        # Assert
        assert response.user.recovery_level is RecoveryLevel.PARTIAL
        identifier = await identifier_repo.find_by_value("oauth", "github|42")
        assert identifier is not None
        assert identifier.user_id == user.id
        assert identifier.metadata["access_token"] == "token"

    @pytest.mark.asyncio
    async def test_relinking_is_a_no_op(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        identifier_repo = await unit_env.get(IdentifierRepository)
        user = await user_repo.save(make_user())
        use_case = await unit_env.get(LinkAccountUseCase)
        request = LinkAccountRequest(
            user_id=str(user.id), provider="github", provider_account_id="42"
        )

        await use_case.execute(request)
        await use_case.execute(request)

        assert len(await identifier_repo.find_all_by_user_id(user.id)) == 1

    @pytest.mark.asyncio
    async def test_account_of_another_user(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        first = await user_repo.save(make_user())
        second = await user_repo.save(make_user())
        use_case = await unit_env.get(LinkAccountUseCase)
        await use_case.execute(
            LinkAccountRequest(user_id=str(first.id), provider="github", provider_account_id="42")
        )

        with pytest.raises(IdentifierConflict):
            await use_case.execute(
                LinkAccountRequest(
                    user_id=str(second.id), provider="github", provider_account_id="42"
                )
            )

    @pytest.mark.asyncio
    async def test_legacy_mode_writes_account_row(self, legacy_env):
        user_repo = await legacy_env.get(UserRepository)
        account_repo = await legacy_env.get(LinkedAccountRepository)
        first = await user_repo.save(make_user())
        second = await user_repo.save(make_user())
        use_case = await legacy_env.get(LinkAccountUseCase)

        response = await use_case.execute(
            LinkAccountRequest(user_id=str(first.id), provider="github", provider_account_id="42")
        )

        assert response.user.recovery_level is RecoveryLevel.PARTIAL
        assert len(await account_repo.find_all_by_user_id(first.id)) == 1
        with pytest.raises(IdentifierConflict):
            await use_case.execute(
                LinkAccountRequest(
                    user_id=str(second.id), provider="github", provider_account_id="42"
                )
            )

    @pytest.mark.asyncio
    async def test_refused_in_direct_mode(self, direct_env):
        user_repo = await direct_env.get(UserRepository)
        user = await user_repo.save(make_user())
        use_case = await direct_env.get(LinkAccountUseCase)

        with pytest.raises(LegacyDisabled):
            await use_case.execute(
                LinkAccountRequest(user_id=str(user.id), provider="github", provider_account_id="1")
            )
