"""Unit tests for the migration use cases."""

from uuid import uuid4

import pytest

from authid.application.usecase.legacy import UpdateUserRequest, UpdateUserUseCase
from authid.application.usecase.migration import (
    MigrateAllUsersRequest,
    MigrateAllUsersUseCase,
    MigrateUserRequest,
    MigrateUserUseCase,
)
from authid.domain.error import IdentifierTableDisabled, NotFoundError
from authid.domain.repository import IdentifierRepository, UserRepository
from authid.domain.value import IdentifierMode
from authid.persistence.repository.inmemory import InMemoryStore
from tests.conftest import make_identifier, make_settings, make_user
from tests.harness import create_env_fixture

# Unit test fixtures
unit_env = create_env_fixture()
legacy_env = create_env_fixture(settings=make_settings(IdentifierMode.LEGACY))


class TestMigrateUser:
    """Tests for MigrateUserUseCase."""

    @pytest.mark.asyncio
    async def test_migrates_email(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        user = await user_repo.save(make_user(email="a@example.com", password_hash="hash"))
        use_case = await unit_env.get(MigrateUserUseCase)

        response = await use_case.execute(MigrateUserRequest(user_id=str(user.id)))
        again = await use_case.execute(MigrateUserRequest(user_id=str(user.id)))

        assert [i.value for i in response.identifiers] == ["a@example.com"]
        assert [i.id for i in again.identifiers] == [i.id for i in response.identifiers]

    @pytest.mark.asyncio
    async def test_unknown_user(self, unit_env):
        use_case = await unit_env.get(MigrateUserUseCase)

        with pytest.raises(NotFoundError):
            await use_case.execute(MigrateUserRequest(user_id=str(uuid4())))

    @pytest.mark.asyncio
    async def test_refused_in_legacy_mode(self, legacy_env):
        use_case = await legacy_env.get(MigrateUserUseCase)

        with pytest.raises(IdentifierTableDisabled):
            await use_case.execute(MigrateUserRequest(user_id=str(uuid4())))


class TestMigrateAllUsers:
    """Tests for MigrateAllUsersUseCase."""

    @pytest.mark.asyncio
    async def test_migrates_in_batches(self, unit_env):
        user_repo = await unit_env.get(UserRepository)
        for n in range(5):
            await user_repo.save(make_user(email=f"user{n}@example.com"))
        use_case = await unit_env.get(MigrateAllUsersUseCase)

        report = await use_case.execute(MigrateAllUsersRequest(batch_size=2))

        assert len(report.migrated) == 5
        assert report.failed == {}

    @pytest.mark.asyncio
    async def test_refused_in_legacy_mode(self, legacy_env):
        use_case = await legacy_env.get(MigrateAllUsersUseCase)

        with pytest.raises(IdentifierTableDisabled):
            await use_case.execute(MigrateAllUsersRequest())

    @pytest.mark.asyncio
    async def test_rerun_does_not_restore_changed_email(self, unit_env):
        """Changes made after migration survive a second batch run."""
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        identifier_repo = await unit_env.get(IdentifierRepository)
        user = await user_repo.save(
            make_user(email="old@example.com", email_verified=True, password_hash="old-hash")
        )
        use_case = await unit_env.get(MigrateAllUsersUseCase)
        await use_case.execute(MigrateAllUsersRequest())
        update = await unit_env.get(UpdateUserUseCase)
        await update.execute(
            UpdateUserRequest(user_id=str(user.id), email="new@example.com", password="newpassword1")
        )
        before = await identifier_repo.find_all_by_user_id(user.id)

        # Act
        report = await use_case.execute(MigrateAllUsersRequest())

        # Assert
        after = await identifier_repo.find_all_by_user_id(user.id)
        assert report.migrated == []
        assert report.unchanged == [user.id]
        assert [(i.id, i.value, i.credential_hash) for i in after] == [
            (i.id, i.value, i.credential_hash) for i in before
        ]
        assert [i.value for i in after] == ["new@example.com"]
        assert after[0].credential_hash != "old-hash"

    @pytest.mark.asyncio
    async def test_commits_after_every_user(self, unit_env):
        """Each user's outcome is committed before the next user starts."""
        # Arrange
        user_repo = await unit_env.get(UserRepository)
        identifier_repo = await unit_env.get(IdentifierRepository)
        store = await unit_env.get(InMemoryStore)
        await user_repo.save(make_user(email="a@example.com"))
        await user_repo.save(make_user(email="clash@example.com"))
        await user_repo.save(make_user())
        await identifier_repo.create(make_identifier(uuid4(), "email", "clash@example.com"))
        use_case = await unit_env.get(MigrateAllUsersUseCase)

        # Act
        report = await use_case.execute(MigrateAllUsersRequest(batch_size=2))

        # Assert
        assert report.total == 3
        assert len(report.failed) == 1
        assert store.commits == 3
