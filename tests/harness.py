"""Test harness for unit and integration tests.

Unit tests run against in-memory persistence with fixed settings, so no
services are needed.
"""

import pytest_asyncio

from authid.config import Settings
from authid.util.di import Component
from tests.conftest import make_settings
from tests.di import build_test_container


def create_env_fixture(
    unmock: set[Component] | None = None,
    settings: Settings | None = None,
):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking and settings
    - Yields request-scoped container for service access

    Args:
        unmock: Components to use real implementations for
        settings: Settings for the container (fast test defaults when omitted)

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Virtual mode, everything mocked
        unit_env = create_env_fixture()

        # Legacy mode
        legacy_env = create_env_fixture(settings=make_settings(IdentifierMode.LEGACY))

        @pytest.mark.asyncio
        async def test_sign_up(unit_env):
            use_case = await unit_env.get(SignUpWithIdentifierUseCase)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        # Build container with specified unmocking
        container = build_test_container(
            unmock=unmock or set(), settings=settings or make_settings()
        )

        # Open request-scoped context
        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
