"""Unit tests for PendingInvitationMonitor."""

from unittest.mock import AsyncMock

import pytest

from famshare.application.session import PendingInvitationMonitor
from famshare.domain.value import InvitationTarget
from tests.helpers import Stack, make_user


@pytest.fixture
def monitor(stack: Stack) -> PendingInvitationMonitor:
    return PendingInvitationMonitor(
        stack.invitation_service,
        stack.session_settings,
        clock=stack.clock.monotonic,
        wall_clock=stack.clock,
    )


async def invite_guest(stack: Stack, email: str = "guest@example.com"):
    admin = make_user()
    account = await stack.create_account(admin)
    result = await stack.invitation_service.create_invitation(
        account.id, admin, InvitationTarget.parse(email)
    )
    return result.invitation


class TestCheck:
    @pytest.mark.asyncio
    async def test_store_is_queried_once_per_interval(self, stack, monitor):
        # Arrange
        guest = make_user(email="guest@example.com")
        spy = AsyncMock(wraps=stack.invitation_service.list_pending_for_user)
        stack.invitation_service.list_pending_for_user = spy

        # Act
        await monitor.check(guest)
        stack.clock.advance(seconds=29)
        await monitor.check(guest)

        # Assert
        assert spy.await_count == 1

        stack.clock.advance(seconds=1)
        await monitor.check(guest)
        assert spy.await_count == 2

    @pytest.mark.asyncio
    async def test_force_ignores_throttle(self, stack, monitor):
        guest = make_user(email="guest@example.com")
        await monitor.check(guest)
        invitation = await invite_guest(stack)

        assert await monitor.check(guest) == ()
        assert await monitor.check(guest, force=True) == (invitation,)

    @pytest.mark.asyncio
    async def test_pending_invitations_suppress_bootstrap(self, stack, monitor):
        guest = make_user(email="guest@example.com")
        await invite_guest(stack)

        assert not monitor.bootstrap_suppressed(guest.id)
        await monitor.check(guest)
        assert monitor.bootstrap_suppressed(guest.id)

        monitor.reset(guest.id)
        assert not monitor.bootstrap_suppressed(guest.id)

    @pytest.mark.asyncio
    async def test_empty_answer_does_not_suppress(self, stack, monitor):
        guest = make_user(email="guest@example.com")

        await monitor.check(guest)

        assert not monitor.bootstrap_suppressed(guest.id)


class TestNotices:
    @pytest.mark.asyncio
    async def test_each_invitation_is_surfaced_once(self, stack, monitor):
        first = await invite_guest(stack)
        second = await invite_guest(stack)

        assert monitor.take_new_notices((first,)) == [first]
        assert monitor.take_new_notices((first, second)) == [second]
        assert monitor.take_new_notices((first, second)) == []

    @pytest.mark.asyncio
    async def test_clear_forgets_surfaced_notices(self, stack, monitor):
        invitation = await invite_guest(stack)
        monitor.take_new_notices((invitation,))

        monitor.clear()

        assert monitor.take_new_notices((invitation,)) == [invitation]
