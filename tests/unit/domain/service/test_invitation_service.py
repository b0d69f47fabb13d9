"""Unit tests for InvitationService."""

import asyncio
from datetime import timedelta
from uuid import uuid4

import pytest

from famshare.adapter.notification import RecordingNotificationDispatcher
from famshare.config import InvitationSettings
from famshare.domain.error import (
    CannotShareWithSelfError,
    InvitationExpiredError,
    InvitationNotFoundError,
    InvitationTargetMismatchError,
    NotAuthorizedError,
    NotFoundError,
)
from famshare.domain.model import Invitation
from famshare.domain.service import InvitationService
from famshare.domain.value import (
    InvitationId,
    InvitationStatus,
    InvitationTarget,
    MemberRole,
)
from famshare.persistence.repository.inmemory import InMemoryInvitationRepository
from tests.helpers import InterleavingInvitationRepository, Stack, make_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()

GUEST = "guest@example.com"


class SlowDispatcher(RecordingNotificationDispatcher):
    async def send(self, *args, **kwargs):
        await asyncio.sleep(1)


class RevokedDuringAcceptRepository(InMemoryInvitationRepository):
    """Deletes the invitation just before it would be marked accepted."""

    async def mark_accepted(self, invitation_id, accepted_at):
        await self.delete_unaccepted(invitation_id)
        return await super().mark_accepted(invitation_id, accepted_at)


async def invite(stack: Stack, target: str = GUEST):
    admin = make_user()
    account = await stack.create_account(admin)
    result = await stack.invitation_service.create_invitation(
        account.id, admin, stack.invitation_service.parse_target(target)
    )
    return admin, account, result.invitation


class TestCreateInvitation:
    @pytest.mark.asyncio
    async def test_creates_pending_invitation_and_sends_it(self, stack):
        # Arrange
        admin = make_user()
        account = await stack.create_account(admin, name="Cohen Family")
        target = InvitationTarget.parse("Guest@Example.com")

        # Act
        result = await stack.invitation_service.create_invitation(
            account.id, admin, target
        )

        # Assert
        invitation = result.invitation
        assert result.created
        assert result.dispatch_warning is None
        assert invitation.target.value == GUEST
        assert invitation.status(stack.clock()) == InvitationStatus.PENDING
        assert invitation.expires_at - invitation.created_at == timedelta(hours=48)

        assert len(stack.dispatcher.sent) == 1
        sent = stack.dispatcher.sent[0]
        assert sent.invitation_id == invitation.id
        assert sent.account_name == "Cohen Family"
        assert sent.inviter_name == "Dana"

        stored = await stack.accounts.find_by_id(account.id)
        assert stored.pending_share_target == GUEST
        assert stored.pending_invitation_id == invitation.id

    @pytest.mark.asyncio
    async def test_repeated_create_returns_open_invitation(self, stack):
        admin, account, first = await invite(stack)

        again = await stack.invitation_service.create_invitation(
            account.id, admin, InvitationTarget.parse("GUEST@example.com")
        )

        assert not again.created
        assert again.invitation.id == first.id
        assert len(stack.dispatcher.sent) == 1
        assert len(await stack.invitations.list_for_account(account.id)) == 1

    @pytest.mark.asyncio
    async def test_overlapping_creates_store_and_send_one_invitation(self, clock):
        stack = Stack(clock=clock, invitations=InterleavingInvitationRepository())
        admin = make_user()
        account = await stack.create_account(admin)
        target = InvitationTarget.parse(GUEST)

        results = await asyncio.gather(
            stack.invitation_service.create_invitation(account.id, admin, target),
            stack.invitation_service.create_invitation(account.id, admin, target),
        )

        assert sorted(r.created for r in results) == [False, True]
        assert results[0].invitation.id == results[1].invitation.id
        assert len(await stack.invitations.list_for_account(account.id)) == 1
        assert len(stack.dispatcher.sent) == 1

    @pytest.mark.asyncio
    async def test_expired_invitation_is_replaced(self, stack):
        admin, account, first = await invite(stack)
        stack.clock.advance(hours=48)

        again = await stack.invitation_service.create_invitation(
            account.id, admin, InvitationTarget.parse(GUEST)
        )

        assert again.created
        assert again.invitation.id != first.id
        assert await stack.invitations.find_by_id(first.id) is None

    @pytest.mark.asyncio
    async def test_inviting_yourself_is_rejected(self, stack):
        admin = make_user(email="dana@example.com", phone="050-123-4567")
        account = await stack.create_account(admin)

        with pytest.raises(CannotShareWithSelfError):
            await stack.invitation_service.create_invitation(
                account.id, admin, InvitationTarget.parse("+972501234567")
            )

    @pytest.mark.asyncio
    async def test_members_cannot_invite(self, stack):
        admin = make_user()
        member = make_user(email="member@example.com")
        account = await stack.create_account(admin)
        await stack.join(account, member)

        with pytest.raises(NotAuthorizedError):
            await stack.invitation_service.create_invitation(
                account.id, member, InvitationTarget.parse(GUEST)
            )

    @pytest.mark.asyncio
    async def test_failed_dispatch_is_a_warning(self, stack):
        admin = make_user()
        account = await stack.create_account(admin)
        stack.dispatcher.fail = True

        result = await stack.invitation_service.create_invitation(
            account.id, admin, InvitationTarget.parse(GUEST)
        )

        assert result.created
        assert "could not be sent" in result.dispatch_warning
        assert await stack.invitations.find_by_id(result.invitation.id) is not None

    @pytest.mark.asyncio
    async def test_slow_dispatch_times_out_with_warning(self, clock):
        stack = Stack(
            clock=clock,
            dispatcher=SlowDispatcher(),
            invitation_settings=InvitationSettings(dispatch_timeout_seconds=0.01),
        )
        admin = make_user()
        account = await stack.create_account(admin)

        result = await stack.invitation_service.create_invitation(
            account.id, admin, InvitationTarget.parse(GUEST)
        )

        assert result.created
        assert "in time" in result.dispatch_warning

    @pytest.mark.asyncio
    async def test_parse_target_uses_configured_country_code(self, unit_env):
        service = await unit_env.get(InvitationService)

        assert service.parse_target("050-123-4567").value == "+972501234567"


class TestAcceptInvitation:
    @pytest.mark.asyncio
    async def test_accept_adds_member_and_consumes_invitation(self, stack):
        # Arrange
        _, account, invitation = await invite(stack)
        guest = make_user(email=GUEST, display_name="Guest")

        # Act
        joined = await stack.invitation_service.accept_invitation(invitation.id, guest)

        # Assert
        assert joined.id == account.id
        assert joined.pending_invitation_id is None
        membership = await stack.memberships.find(account.id, guest.id)
        assert membership.role == MemberRole.MEMBER
        stored = await stack.invitations.find_by_id(invitation.id)
        assert stored.accepted_at == stack.clock()

    @pytest.mark.asyncio
    async def test_second_accept_fails_and_keeps_one_membership(self, stack):
        _, account, invitation = await invite(stack)
        guest = make_user(email=GUEST)
        await stack.invitation_service.accept_invitation(invitation.id, guest)

        with pytest.raises(InvitationNotFoundError):
            await stack.invitation_service.accept_invitation(invitation.id, guest)

        members = await stack.memberships.list_for_account(account.id)
        assert [m.user_id for m in members].count(guest.id) == 1

    @pytest.mark.asyncio
    async def test_concurrent_accepts_join_once(self, clock):
        stack = Stack(clock=clock, invitations=InterleavingInvitationRepository())
        _, account, invitation = await invite(stack)
        guest = make_user(email=GUEST)

        joined = await asyncio.gather(
            stack.invitation_service.accept_invitation(invitation.id, guest),
            stack.invitation_service.accept_invitation(invitation.id, guest),
        )

        assert [a.id for a in joined] == [account.id, account.id]
        members = await stack.memberships.list_for_account(account.id)
        assert [m.user_id for m in members].count(guest.id) == 1
        assert len(members) == 2
        stored = await stack.invitations.find_by_id(invitation.id)
        assert stored.accepted_at == stack.clock()

    @pytest.mark.asyncio
    async def test_target_matching_ignores_case(self, stack):
        _, account, invitation = await invite(stack, "Guest@Example.com")
        guest = make_user(email="GUEST@EXAMPLE.COM")

        joined = await stack.invitation_service.accept_invitation(invitation.id, guest)

        assert joined.id == account.id

    @pytest.mark.asyncio
    async def test_phone_invitation_matches_local_number(self, stack):
        _, account, invitation = await invite(stack, "+972 50 123 4567")
        guest = make_user(email=None, phone="050-123-4567")

        joined = await stack.invitation_service.accept_invitation(invitation.id, guest)

        assert joined.id == account.id

    @pytest.mark.asyncio
    async def test_other_users_cannot_accept(self, stack):
        _, account, invitation = await invite(stack)
        stranger = make_user(email="stranger@example.com")

        with pytest.raises(InvitationTargetMismatchError) as excinfo:
            await stack.invitation_service.accept_invitation(invitation.id, stranger)

        assert str(account.id) not in str(excinfo.value)
        assert await stack.memberships.find(account.id, stranger.id) is None

    @pytest.mark.asyncio
    async def test_expired_invitation_cannot_be_accepted(self, stack):
        _, account, invitation = await invite(stack)
        stack.clock.advance(hours=48)
        guest = make_user(email=GUEST)

        with pytest.raises(InvitationExpiredError) as excinfo:
            await stack.invitation_service.accept_invitation(invitation.id, guest)

        assert isinstance(excinfo.value, NotFoundError)
        assert await stack.memberships.find(account.id, guest.id) is None

    @pytest.mark.asyncio
    async def test_unknown_invitation_is_not_found(self, stack):
        with pytest.raises(InvitationNotFoundError):
            await stack.invitation_service.accept_invitation(
                InvitationId(uuid4()), make_user(email=GUEST)
            )

    @pytest.mark.asyncio
    async def test_orphaned_invitation_is_removed_on_accept(self, stack):
        _, account, invitation = await invite(stack)
        stack.accounts.remove(account.id)

        with pytest.raises(InvitationNotFoundError):
            await stack.invitation_service.accept_invitation(
                invitation.id, make_user(email=GUEST)
            )

        assert await stack.invitations.find_by_id(invitation.id) is None
        assert await stack.invitation_service.reconcile_orphans() == 0

    @pytest.mark.asyncio
    async def test_admin_cannot_join_own_account(self, stack):
        admin = make_user(email=GUEST)
        account = await stack.create_account(admin)
        invitation = Invitation(
            id=InvitationId(uuid4()),
            account_id=account.id,
            inviter_id=admin.id,
            target=InvitationTarget.parse(GUEST),
            created_at=stack.clock(),
            expires_at=stack.clock() + timedelta(hours=48),
        )
        await stack.invitations.insert(invitation)

        with pytest.raises(CannotShareWithSelfError):
            await stack.invitation_service.accept_invitation(invitation.id, admin)

    @pytest.mark.asyncio
    async def test_revoke_racing_accept_undoes_membership(self, clock):
        stack = Stack(clock=clock, invitations=RevokedDuringAcceptRepository())
        _, account, invitation = await invite(stack)
        guest = make_user(email=GUEST)

        with pytest.raises(InvitationNotFoundError):
            await stack.invitation_service.accept_invitation(invitation.id, guest)

        assert await stack.memberships.find(account.id, guest.id) is None


class TestRevokeInvitation:
    @pytest.mark.asyncio
    async def test_revoke_deletes_invitation_and_clears_pointer(self, stack):
        admin, account, invitation = await invite(stack)

        revoked = await stack.invitation_service.revoke_invitation(
            account.id, admin.id, invitation.id
        )

        assert revoked == 1
        assert await stack.invitations.find_by_id(invitation.id) is None
        stored = await stack.accounts.find_by_id(account.id)
        assert stored.pending_share_target is None
        assert stored.pending_invitation_id is None

    @pytest.mark.asyncio
    async def test_revoke_without_invitations_is_a_noop(self, stack):
        admin = make_user()
        account = await stack.create_account(admin)

        assert await stack.invitation_service.revoke_invitation(account.id, admin.id) == 0

    @pytest.mark.asyncio
    async def test_revoke_all_leaves_accepted_invitations(self, stack):
        admin, account, accepted = await invite(stack)
        await stack.invitation_service.accept_invitation(
            accepted.id, make_user(email=GUEST)
        )
        await stack.invitation_service.create_invitation(
            account.id, admin, InvitationTarget.parse("second@example.com")
        )

        revoked = await stack.invitation_service.revoke_invitation(account.id, admin.id)

        assert revoked == 1
        remaining = await stack.invitations.list_for_account(account.id)
        assert [i.id for i in remaining] == [accepted.id]

    @pytest.mark.asyncio
    async def test_revoked_invitation_cannot_be_accepted(self, stack):
        admin, account, invitation = await invite(stack)
        await stack.invitation_service.revoke_invitation(
            account.id, admin.id, invitation.id
        )

        with pytest.raises(InvitationNotFoundError):
            await stack.invitation_service.accept_invitation(
                invitation.id, make_user(email=GUEST)
            )

    @pytest.mark.asyncio
    async def test_members_cannot_revoke(self, stack):
        _, account, invitation = await invite(stack)
        member = make_user(email="member@example.com")
        await stack.join(account, member)

        with pytest.raises(NotAuthorizedError):
            await stack.invitation_service.revoke_invitation(
                account.id, member.id, invitation.id
            )


class TestReconcileOrphans:
    @pytest.mark.asyncio
    async def test_only_orphans_are_removed_across_pages(self, stack):
        # Arrange
        _, gone_a, orphan_a = await invite(stack, "a@example.com")
        _, gone_b, orphan_b = await invite(stack, "b@example.com")
        _, _, live = await invite(stack, "c@example.com")
        stack.accounts.remove(gone_a.id)
        stack.accounts.remove(gone_b.id)

        # Act
        removed = await stack.invitation_service.reconcile_orphans(batch_size=1)

        # Assert
        assert removed == 2
        assert await stack.invitations.find_by_id(orphan_a.id) is None
        assert await stack.invitations.find_by_id(orphan_b.id) is None
        assert await stack.invitations.find_by_id(live.id) is not None

    @pytest.mark.asyncio
    async def test_second_sweep_finds_nothing(self, stack):
        _, account, _ = await invite(stack)
        stack.accounts.remove(account.id)

        assert await stack.invitation_service.reconcile_orphans() == 1
        assert await stack.invitation_service.reconcile_orphans() == 0


class TestListPending:
    @pytest.mark.asyncio
    async def test_lists_newest_first_and_heals_orphans(self, stack):
        # Arrange
        _, _, older = await invite(stack)
        stack.clock.advance(minutes=5)
        _, _, newer = await invite(stack)
        _, gone, orphan = await invite(stack)
        stack.accounts.remove(gone.id)

        # Act
        pending = await stack.invitation_service.list_pending_for_target(
            InvitationTarget.parse("GUEST@example.com")
        )

        # Assert
        assert [i.id for i in pending] == [newer.id, older.id]
        assert await stack.invitations.find_by_id(orphan.id) is None

    @pytest.mark.asyncio
    async def test_expired_invitations_are_left_out(self, stack):
        await invite(stack)
        stack.clock.advance(hours=49)

        assert await stack.invitation_service.list_pending_for_target(
            InvitationTarget.parse(GUEST)
        ) == []

    @pytest.mark.asyncio
    async def test_user_sees_invitations_to_email_and_phone(self, stack):
        _, _, by_email = await invite(stack)
        _, _, by_phone = await invite(stack, "0501234567")
        guest = make_user(email=GUEST, phone="+972501234567")

        pending = await stack.invitation_service.list_pending_for_user(guest)

        assert {i.id for i in pending} == {by_email.id, by_phone.id}

    @pytest.mark.asyncio
    async def test_admin_lists_account_invitations_with_status(self, stack):
        admin, account, invitation = await invite(stack)
        stack.clock.advance(hours=48)

        listed = await stack.invitation_service.list_for_account(account.id, admin.id)

        assert listed == [(invitation, InvitationStatus.EXPIRED)]
