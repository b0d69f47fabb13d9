"""Unit tests for RevokeInvitationUseCase."""

import pytest

from famshare.adapter.identity import InMemoryIdentityProvider
from famshare.application.usecase.invitation import (
    RevokeInvitationRequest,
    RevokeInvitationUseCase,
)
from famshare.domain.error import NotAuthorizedError
from famshare.domain.value import InvitationTarget
from tests.helpers import make_user


class TestRevokeInvitation:
    @pytest.mark.asyncio
    async def test_revoke_all_open_invitations(self, stack):
        # Arrange
        admin = make_user()
        account = await stack.create_account(admin)
        for email in ("a@example.com", "b@example.com"):
            await stack.invitation_service.create_invitation(
                account.id, admin, InvitationTarget.parse(email)
            )
        session = stack.open_session(InMemoryIdentityProvider(admin))

        # Act
        response = await RevokeInvitationUseCase(
            session, stack.invitation_service
        ).execute(RevokeInvitationRequest(account_id=account.id))

        # Assert
        assert response.revoked == 2
        identity = await session.resolver.resolve()
        assert identity.active_account.pending_share_target is None

    @pytest.mark.asyncio
    async def test_revoking_nothing_is_not_an_error(self, stack):
        admin = make_user()
        account = await stack.create_account(admin)
        session = stack.open_session(InMemoryIdentityProvider(admin))

        response = await RevokeInvitationUseCase(
            session, stack.invitation_service
        ).execute(RevokeInvitationRequest(account_id=account.id))

        assert response.revoked == 0

    @pytest.mark.asyncio
    async def test_only_admins_revoke(self, stack):
        admin = make_user()
        account = await stack.create_account(admin)
        member = make_user(email="member@example.com")
        await stack.join(account, member)
        session = stack.open_session(InMemoryIdentityProvider(member))

        with pytest.raises(NotAuthorizedError):
            await RevokeInvitationUseCase(session, stack.invitation_service).execute(
                RevokeInvitationRequest(account_id=account.id)
            )
