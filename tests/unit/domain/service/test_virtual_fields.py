"""Unit tests for VirtualFieldMapper."""

from uuid import uuid4

import pytest

from authid.domain.error import IdentifierConflict, IdentifierNotFound, InvalidIdentifierFormat
from authid.domain.repository import IdentifierRepository
from authid.domain.service import LegacyUserUpdate, VirtualFieldMapper
from authid.domain.service.virtual_fields import (
    CreateIdentifier,
    DeleteIdentifier,
    ReplaceIdentifier,
    UpdateIdentifier,
)
from authid.domain.value import IdentifierMode, RecoveryLevel, UserId
from tests.conftest import make_identifier, make_user
from tests.harness import create_env_fixture

# Unit test fixture
unit_env = create_env_fixture()


class TestProject:
    """Tests for VirtualFieldMapper.project()."""

    @pytest.mark.asyncio
    async def test_virtual_mode_projects_first_email(self, unit_env):
        """The earliest email identifier backs the email field."""
        # Arrange
        mapper = await unit_env.get(VirtualFieldMapper)
        user = make_user()
        identifiers = [
            make_identifier(user.id, "email", "first@example.com", verified=True),
            make_identifier(user.id, "email", "second@example.com", minutes=5),
        ]

        # Act
        view = mapper.project(user, identifiers, IdentifierMode.VIRTUAL)

        # Assert
        assert view.email == "first@example.com"
        assert view.email_verified is True
        assert view.recovery_level is RecoveryLevel.FULL
        assert len(view.identifiers) == 2

    @pytest.mark.asyncio
    async def test_virtual_mode_without_email(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user = make_user()
        identifiers = [make_identifier(user.id, "username", "alice", verified=True)]

        view = mapper.project(user, identifiers, IdentifierMode.VIRTUAL)

        assert view.email is None
        assert view.email_verified is False
        assert view.recovery_level is RecoveryLevel.PSEUDONYMOUS

    @pytest.mark.asyncio
    async def test_direct_mode_never_exposes_email(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user = make_user()
        identifiers = [make_identifier(user.id, "email", "a@example.com", verified=True)]

        view = mapper.project(user, identifiers, IdentifierMode.DIRECT)

        assert view.email is None
        assert view.identifiers == identifiers
        assert view.recovery_level is RecoveryLevel.FULL

    @pytest.mark.asyncio
    async def test_legacy_mode_reads_flat_columns(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user = make_user(email="legacy@example.com", email_verified=True)
        derived = [make_identifier(user.id, "email", "legacy@example.com", verified=True)]

        view = mapper.project(user, derived, IdentifierMode.LEGACY)

        assert view.email == "legacy@example.com"
        assert view.email_verified is True
        assert view.identifiers == []
        assert view.recovery_level is RecoveryLevel.FULL


class TestDecompose:
    """Tests for VirtualFieldMapper.decompose()."""

    @pytest.mark.asyncio
    async def test_new_email_creates_unverified_identifier(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())

        mutations = mapper.decompose(user_id, [], LegacyUserUpdate(email="New@Example.com"))

        assert len(mutations) == 1
        assert isinstance(mutations[0], CreateIdentifier)
        assert mutations[0].identifier.value == "new@example.com"
        assert mutations[0].identifier.verified is False

    @pytest.mark.asyncio
    async def test_same_email_after_normalization_is_a_no_op(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())
        current = make_identifier(user_id, "email", "user@example.com", verified=True)

        mutations = mapper.decompose(
            user_id, [current], LegacyUserUpdate(email=" USER@example.com ")
        )

        assert mutations == []

    @pytest.mark.asyncio
    async def test_changed_email_replaces_and_resets_verification(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())
        current = make_identifier(
            user_id, "email", "old@example.com", verified=True, credential_hash="hash"
        )

        mutations = mapper.decompose(user_id, [current], LegacyUserUpdate(email="new@example.com"))

        assert len(mutations) == 1
        replace = mutations[0]
        assert isinstance(replace, ReplaceIdentifier)
        assert replace.old_id == current.id
        assert replace.new.value == "new@example.com"
        assert replace.new.verified is False
        assert replace.new.credential_hash == "hash"
        assert replace.new.created_at == current.created_at

    @pytest.mark.asyncio
    async def test_clearing_email_deletes_identifier(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())
        current = make_identifier(user_id, "email", "a@example.com")

        mutations = mapper.decompose(user_id, [current], LegacyUserUpdate(email=None))

        assert mutations == [DeleteIdentifier(identifier_id=current.id)]

    @pytest.mark.asyncio
    async def test_omitted_email_leaves_identifiers_alone(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())
        current = make_identifier(user_id, "email", "a@example.com")

        mutations = mapper.decompose(user_id, [current], LegacyUserUpdate(name="Alice"))

        assert mutations == []

    @pytest.mark.asyncio
    async def test_email_verified_alone_updates_primary_email(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())
        current = make_identifier(user_id, "email", "a@example.com")

        mutations = mapper.decompose(user_id, [current], LegacyUserUpdate(email_verified=True))

        assert len(mutations) == 1
        assert isinstance(mutations[0], UpdateIdentifier)
        assert mutations[0].identifier.verified is True

    @pytest.mark.asyncio
    async def test_email_verified_without_email_identifier(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)

        with pytest.raises(IdentifierNotFound):
            mapper.decompose(UserId(uuid4()), [], LegacyUserUpdate(email_verified=True))

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)

        with pytest.raises(InvalidIdentifierFormat):
            mapper.decompose(UserId(uuid4()), [], LegacyUserUpdate(email="nope"))

    @pytest.mark.asyncio
    async def test_password_lands_on_replaced_email(self, unit_env):
        """Email change and password change merge into one mutation."""
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())
        current = make_identifier(user_id, "email", "old@example.com", credential_hash="old")

        mutations = mapper.decompose(
            user_id,
            [current],
            LegacyUserUpdate(email="new@example.com", password_hash="new"),
        )

        assert len(mutations) == 1
        assert isinstance(mutations[0], ReplaceIdentifier)
        assert mutations[0].new.credential_hash == "new"

    @pytest.mark.asyncio
    async def test_password_without_credential_identifier(self, unit_env):
        mapper = await unit_env.get(VirtualFieldMapper)
        user_id = UserId(uuid4())
        oauth = make_identifier(user_id, "oauth", "github|1", verified=True)

        with pytest.raises(IdentifierNotFound):
            mapper.decompose(user_id, [oauth], LegacyUserUpdate(password_hash="new"))


class TestApply:
    """Tests for VirtualFieldMapper.apply()."""

    @pytest.mark.asyncio
    async def test_replace_moves_value(self, unit_env):
        # Arrange
        mapper = await unit_env.get(VirtualFieldMapper)
        repository = await unit_env.get(IdentifierRepository)
        user_id = UserId(uuid4())
        current = await repository.create(
            make_identifier(user_id, "email", "old@example.com", verified=True)
        )
        mutations = mapper.decompose(
            user_id, [current], LegacyUserUpdate(email="new@example.com")
        )

        # Act
        await mapper.apply(user_id, mutations)

        # Assert
        assert await repository.find_by_value("email", "old@example.com") is None
        stored = await repository.find_by_value("email", "new@example.com")
        assert stored is not None
        assert stored.user_id == user_id

    @pytest.mark.asyncio
    async def test_conflict_rolls_back_every_mutation(self, unit_env):
        """A conflicting create undoes the earlier delete."""
        # Arrange
        mapper = await unit_env.get(VirtualFieldMapper)
        repository = await unit_env.get(IdentifierRepository)
        user_id, other_id = UserId(uuid4()), UserId(uuid4())
        mine = await repository.create(make_identifier(user_id, "username", "alice"))
        await repository.create(make_identifier(other_id, "email", "taken@example.com"))
        mutations = [
            DeleteIdentifier(identifier_id=mine.id),
            CreateIdentifier(
                identifier=make_identifier(user_id, "email", "taken@example.com")
            ),
        ]

        # Act / Assert
        with pytest.raises(IdentifierConflict):
            await mapper.apply(user_id, mutations)

        assert await repository.find_by_id(mine.id) is not None
        taken = await repository.find_by_value("email", "taken@example.com")
        assert taken is not None and taken.user_id == other_id

    @pytest.mark.asyncio
    async def test_taking_over_own_secondary_email(self, unit_env):
        """Replacing the primary email with one the user already owns."""
        mapper = await unit_env.get(VirtualFieldMapper)
        repository = await unit_env.get(IdentifierRepository)
        user_id = UserId(uuid4())
        primary = await repository.create(
            make_identifier(user_id, "email", "one@example.com", credential_hash="hash")
        )
        await repository.create(make_identifier(user_id, "email", "two@example.com", minutes=1))
        identifiers = await repository.find_all_by_user_id(user_id)
        mutations = mapper.decompose(
            user_id, identifiers, LegacyUserUpdate(email="two@example.com")
        )

        await mapper.apply(user_id, mutations)

        remaining = await repository.find_all_by_user_id(user_id)
        assert [i.value for i in remaining] == ["two@example.com"]
        assert remaining[0].credential_hash == "hash"
        assert await repository.find_by_id(primary.id) is None
