"""Unit tests for AcceptInvitationUseCase."""

from datetime import timedelta
from uuid import uuid4

import pytest

from famshare.adapter.identity import InMemoryIdentityProvider
from famshare.application.usecase.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationUseCase,
)
from famshare.domain.error import InvitationNotFoundError
from famshare.domain.model import Invitation
from famshare.domain.value import InvitationId, InvitationTarget
from tests.helpers import Stack, make_user

GUEST = "guest@example.com"


async def invite_guest(stack: Stack):
    admin = make_user()
    family = await stack.create_account(admin, "Family")
    result = await stack.invitation_service.create_invitation(
        family.id, admin, InvitationTarget.parse(GUEST)
    )
    return family, result.invitation


def accept_use_case(stack: Stack, session) -> AcceptInvitationUseCase:
    return AcceptInvitationUseCase(
        session, stack.invitation_service, stack.membership_service
    )


class TestAcceptInvitation:
    @pytest.mark.asyncio
    async def test_accepted_account_becomes_active(self, stack):
        # Arrange
        family, invitation = await invite_guest(stack)
        guest = make_user(email=GUEST)
        session = stack.open_session(InMemoryIdentityProvider(guest))
        before = await session.resolver.resolve()

        # Act
        response = await accept_use_case(stack, session).execute(
            AcceptInvitationRequest(invitation_id=invitation.id)
        )

        # Assert
        assert before.bootstrap_suppressed
        assert response.account.account_id == family.id
        identity = session.resolver.cached
        assert identity.active_account.id == family.id
        assert identity.pending_invitations == ()
        assert not identity.bootstrap_suppressed
        assert stack.accounts.count() == 1

    @pytest.mark.asyncio
    async def test_failed_accept_leaves_cached_identity(self, stack):
        guest = make_user(email=GUEST)
        await stack.create_account(guest)
        session = stack.open_session(InMemoryIdentityProvider(guest))
        before = await session.resolver.resolve()

        with pytest.raises(InvitationNotFoundError):
            await accept_use_case(stack, session).execute(
                AcceptInvitationRequest(invitation_id=uuid4())
            )

        assert session.resolver.cached is before


class TestAcceptAllPending:
    @pytest.mark.asyncio
    async def test_one_failure_does_not_stop_the_others(self, stack):
        # Arrange
        family, _ = await invite_guest(stack)
        guest = make_user(email=GUEST)
        own = await stack.create_account(guest, "Mine")
        self_invitation = Invitation(
            id=InvitationId(uuid4()),
            account_id=own.id,
            inviter_id=guest.id,
            target=InvitationTarget.parse(GUEST),
            created_at=stack.clock() - timedelta(minutes=1),
            expires_at=stack.clock() + timedelta(hours=47),
        )
        await stack.invitations.insert(self_invitation)
        session = stack.open_session(InMemoryIdentityProvider(guest))

        # Act
        response = await accept_use_case(stack, session).accept_all_pending()

        # Assert
        assert [a.account_id for a in response.accepted] == [family.id]
        assert [f.invitation_id for f in response.failed] == [self_invitation.id]
        assert "yourself" in response.failed[0].reason
        assert session.resolver.cached.active_account.id == family.id

    @pytest.mark.asyncio
    async def test_nothing_pending(self, stack):
        guest = make_user(email=GUEST)
        session = stack.open_session(InMemoryIdentityProvider(guest))

        response = await accept_use_case(stack, session).accept_all_pending()

        assert response.accepted == []
        assert response.failed == []
