"""Unit tests for ResolveIdentityUseCase."""

import pytest

from famshare.adapter.identity import InMemoryIdentityProvider
from famshare.application.usecase.identity import (
    ResolveIdentityRequest,
    ResolveIdentityUseCase,
)
from famshare.domain.error import IdentityProviderUnavailableError
from famshare.domain.value import InvitationTarget
from tests.helpers import make_user


class TestResolveIdentity:
    @pytest.mark.asyncio
    async def test_anonymous_response(self, stack):
        session = stack.open_session(InMemoryIdentityProvider())

        response = await ResolveIdentityUseCase(session).execute(
            ResolveIdentityRequest()
        )

        assert not response.authenticated
        assert response.user is None

    @pytest.mark.asyncio
    async def test_signed_in_response_lists_accounts(self, stack):
        user = make_user()
        own = await stack.create_account(user, "Mine")
        family = await stack.create_account(make_user(email="mom@example.com"), "Family")
        await stack.join(family, user)
        session = stack.open_session(InMemoryIdentityProvider(user))

        response = await ResolveIdentityUseCase(session).execute(
            ResolveIdentityRequest()
        )

        assert response.authenticated
        assert response.user.display_name == "Dana"
        assert response.active_account.account_id == own.id
        assert [a.account_id for a in response.owned_accounts] == [own.id]
        assert [a.account_id for a in response.shared_accounts] == [family.id]
        assert not response.stale

    @pytest.mark.asyncio
    async def test_invitation_notice_is_reported_once(self, stack):
        # Arrange
        admin = make_user()
        family = await stack.create_account(admin)
        result = await stack.invitation_service.create_invitation(
            family.id, admin, InvitationTarget.parse("guest@example.com")
        )
        session = stack.open_session(
            InMemoryIdentityProvider(make_user(email="guest@example.com"))
        )
        use_case = ResolveIdentityUseCase(session)

        # Act
        first = await use_case.execute(ResolveIdentityRequest())
        second = await use_case.execute(ResolveIdentityRequest(force_refresh=True))

        # Assert
        assert first.bootstrap_suppressed
        assert first.active_account is None
        assert [n.invitation_id for n in first.new_notices] == [result.invitation.id]
        assert second.new_notices == []
        assert len(second.pending_invitations) == 1

    @pytest.mark.asyncio
    async def test_last_good_identity_is_marked_stale(self, stack):
        user = make_user()
        await stack.create_account(user)
        provider = InMemoryIdentityProvider(user)
        session = stack.open_session(provider)
        use_case = ResolveIdentityUseCase(session)
        await use_case.execute(ResolveIdentityRequest())
        stack.clock.advance(seconds=60)
        provider.error = IdentityProviderUnavailableError("down")

        response = await use_case.execute(ResolveIdentityRequest())

        assert response.authenticated
        assert response.stale
