"""Unit tests for SwitchActiveAccountUseCase."""

from uuid import uuid4

import pytest

from famshare.adapter.identity import InMemoryIdentityProvider
from famshare.application.usecase.account import (
    SwitchActiveAccountRequest,
    SwitchActiveAccountUseCase,
)
from famshare.domain.error import NotAuthenticatedError, NotAuthorizedError
from tests.helpers import make_user


class TestSwitchActiveAccount:
    @pytest.mark.asyncio
    async def test_switch_to_shared_account(self, stack):
        # Arrange
        user = make_user()
        await stack.create_account(user, "Mine")
        family = await stack.create_account(make_user(email="mom@example.com"), "Family")
        await stack.join(family, user)
        session = stack.open_session(InMemoryIdentityProvider(user))
        before = await session.resolver.resolve()
        use_case = SwitchActiveAccountUseCase(session, stack.membership_service)

        # Act
        response = await use_case.execute(
            SwitchActiveAccountRequest(account_id=family.id)
        )

        # Assert
        assert before.active_account.name == "Mine"
        assert response.changed
        assert response.account.account_id == family.id
        assert session.resolver.cached.active_account.id == family.id
        assert await stack.profiles.get_preferred_account_id(user.id) == family.id

    @pytest.mark.asyncio
    async def test_switch_to_current_account_is_unchanged(self, stack):
        user = make_user()
        own = await stack.create_account(user)
        session = stack.open_session(InMemoryIdentityProvider(user))
        await session.resolver.resolve()

        response = await SwitchActiveAccountUseCase(
            session, stack.membership_service
        ).execute(SwitchActiveAccountRequest(account_id=own.id))

        assert not response.changed

    @pytest.mark.asyncio
    async def test_switch_to_foreign_account_is_rejected(self, stack):
        user = make_user()
        await stack.create_account(user)
        foreign = await stack.create_account(make_user(email="x@example.com"))
        session = stack.open_session(InMemoryIdentityProvider(user))

        with pytest.raises(NotAuthorizedError):
            await SwitchActiveAccountUseCase(session, stack.membership_service).execute(
                SwitchActiveAccountRequest(account_id=foreign.id)
            )

        assert await stack.profiles.get_preferred_account_id(user.id) != foreign.id

    @pytest.mark.asyncio
    async def test_anonymous_session_cannot_switch(self, stack):
        session = stack.open_session(InMemoryIdentityProvider())

        with pytest.raises(NotAuthenticatedError):
            await SwitchActiveAccountUseCase(session, stack.membership_service).execute(
                SwitchActiveAccountRequest(account_id=uuid4())
            )
