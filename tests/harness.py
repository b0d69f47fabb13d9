"""Test harness for unit, integration and E2E tests.

Integration and E2E environments assume PostgreSQL (and, for E2E, the auth
service) are already running. Settings are loaded from environment
variables (configure via .env or export).
"""

import pytest_asyncio

from famshare.util.di import Component
from tests.di import build_test_container


def create_env_fixture(unmock: set[Component] | None = None):
    """Factory for creating test environment fixtures.

    Creates a pytest fixture that:
    - Builds a test container with specified unmocking
    - Yields request-scoped container for service access
    - Closes the container afterwards (disposes the engine when unmocked)

    Args:
        unmock: Components to use real implementations for

    Returns:
        Pytest fixture function that yields AsyncContainer

    Usage:
        # Unit tests - everything mocked, no docker needed
        unit_env = create_env_fixture()

        # Integration tests - real persistence, assumes postgres running
        integration_env = create_env_fixture(unmock={"persistence"})

        @pytest.mark.asyncio
        async def test_bootstrap(unit_env):
            service = await unit_env.get(MembershipService)
            account = await service.bootstrap_default_account(user_id, "Dana")
            assert account.bootstrapped_for == user_id
    """

    @pytest_asyncio.fixture
    async def _test_environment():
        # Build container with specified unmocking
        container = build_test_container(unmock=unmock or set())

        # Open request-scoped context
        async with container() as request_container:
            yield request_container

        await container.close()

    return _test_environment
