"""Test harness for unit, integration and E2E tests.

Integration tests assume PostgreSQL is running and migrated
(``alembic upgrade head``). Settings are loaded from environment variables.
"""

import pytest_asyncio

from elonara.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_invite(unit_env):
            service = await unit_env.get(InvitationService)
            ...
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        container = build_test_container(unmock=unmock or set())

        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment


def create_container_fixture(unmock: set[Component] | None = None):
    """Like ``create_env_fixture`` but yields the APP container.

    For tests that need several request scopes (different callers, or an
    app served over HTTP) sharing one set of repositories.
    """

    @pytest_asyncio.fixture
    async def _test_container():
        container = build_test_container(unmock=unmock or set())
        yield container
        await container.close()

    return _test_container
