"""Unit tests for CreateInvitationUseCase."""

import pytest

from famshare.adapter.identity import InMemoryIdentityProvider
from famshare.application.usecase.invitation import (
    CreateInvitationRequest,
    CreateInvitationUseCase,
)
from famshare.domain.error import NotAuthenticatedError, ValidationError
from famshare.domain.value import InvitationStatus
from tests.helpers import make_user


class TestCreateInvitation:
    @pytest.mark.asyncio
    async def test_invites_into_active_account(self, stack):
        # Arrange
        user = make_user()
        session = stack.open_session(InMemoryIdentityProvider(user))
        identity = await session.resolver.resolve()
        use_case = CreateInvitationUseCase(session, stack.invitation_service)

        # Act
        response = await use_case.execute(
            CreateInvitationRequest(target=" Guest@Example.com ")
        )

        # Assert
        assert response.created
        assert response.invitation.account_id == identity.active_account.id
        assert response.invitation.target == "guest@example.com"
        assert response.invitation.status == InvitationStatus.PENDING
        assert session.resolver.cached is None

        refreshed = await session.resolver.resolve()
        assert refreshed.active_account.pending_share_target == "guest@example.com"

    @pytest.mark.asyncio
    async def test_repeat_returns_existing_invitation(self, stack):
        user = make_user()
        account = await stack.create_account(user)
        session = stack.open_session(InMemoryIdentityProvider(user))
        use_case = CreateInvitationUseCase(session, stack.invitation_service)
        request = CreateInvitationRequest(target="050-123-4567", account_id=account.id)

        first = await use_case.execute(request)
        second = await use_case.execute(request)

        assert not second.created
        assert second.invitation.invitation_id == first.invitation.invitation_id

    @pytest.mark.asyncio
    async def test_dispatch_failure_is_reported_as_warning(self, stack):
        user = make_user()
        await stack.create_account(user)
        stack.dispatcher.fail = True
        session = stack.open_session(InMemoryIdentityProvider(user))

        response = await CreateInvitationUseCase(
            session, stack.invitation_service
        ).execute(CreateInvitationRequest(target="guest@example.com"))

        assert response.created
        assert response.dispatch_warning is not None

    @pytest.mark.asyncio
    async def test_malformed_target_is_a_validation_error(self, stack):
        user = make_user()
        await stack.create_account(user)
        session = stack.open_session(InMemoryIdentityProvider(user))

        with pytest.raises(ValidationError):
            await CreateInvitationUseCase(session, stack.invitation_service).execute(
                CreateInvitationRequest(target="guest@nowhere")
            )

    @pytest.mark.asyncio
    async def test_anonymous_session_cannot_invite(self, stack):
        session = stack.open_session(InMemoryIdentityProvider())

        with pytest.raises(NotAuthenticatedError):
            await CreateInvitationUseCase(session, stack.invitation_service).execute(
                CreateInvitationRequest(target="guest@example.com")
            )
