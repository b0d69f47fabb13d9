"""Unit tests for RemoveMemberUseCase."""

import pytest

from famshare.adapter.identity import InMemoryIdentityProvider
from famshare.application.usecase.account import (
    RemoveMemberRequest,
    RemoveMemberUseCase,
)
from tests.helpers import make_user


@pytest.mark.asyncio
async def test_leaving_an_account_refreshes_roster(stack):
    # Arrange
    user = make_user()
    family = await stack.create_account(make_user(email="mom@example.com"), "Family")
    await stack.join(family, user)
    session = stack.open_session(InMemoryIdentityProvider(user))
    await session.resolver.resolve()

    # Act
    response = await RemoveMemberUseCase(session, stack.membership_service).execute(
        RemoveMemberRequest(account_id=family.id, user_id=user.id)
    )

    # Assert
    assert response.removed
    assert session.resolver.cached is None
    identity = await session.resolver.resolve()
    assert identity.roster.find(family.id) is None
