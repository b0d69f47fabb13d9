"""Invitation lifecycle domain service."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional
from uuid import uuid4

import logfire

from famshare.config import InvitationSettings
from famshare.domain.error import (
    CannotShareWithSelfError,
    DispatchFailedError,
    InvitationExpiredError,
    InvitationNotFoundError,
    InvitationTargetMismatchError,
    NotAuthorizedError,
    NotFoundError,
)
from famshare.domain.model import Account, Invitation, Membership, User
from famshare.domain.model.common import DomainModel, utc_now
from famshare.domain.repository import (
    AccountRepository,
    InvitationRepository,
    MembershipRepository,
)
from famshare.domain.value import (
    AccountId,
    InvitationId,
    InvitationStatus,
    InvitationTarget,
    MemberRole,
    UserId,
)

from .base import Service
from .notification_dispatcher import NotificationDispatcher


class InvitationResult(DomainModel):
    """Outcome of creating an invitation."""

    invitation: Invitation
    created: bool
    dispatch_warning: Optional[str] = None


class InvitationService(Service):
    """Domain service for the invitation lifecycle.

    Never touches session caches; callers refresh their resolved identity
    after a successful mutation.
    """

    def __init__(
        self,
        invitation_repository: InvitationRepository,
        account_repository: AccountRepository,
        membership_repository: MembershipRepository,
        dispatcher: NotificationDispatcher,
        settings: InvitationSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize invitation service.

        Args:
            invitation_repository: Invitation repository
            account_repository: Account repository
            membership_repository: Membership repository
            dispatcher: Sends invitation messages
            settings: Invitation settings (expiry, batch sizes, timeouts)
            clock: Source of the current time
        """
        self.invitation_repository = invitation_repository
        self.account_repository = account_repository
        self.membership_repository = membership_repository
        self.dispatcher = dispatcher
        self.settings = settings
        self.clock = clock

    def parse_target(self, raw: str) -> InvitationTarget:
        """Normalize a raw email/phone using the configured country code.

        Raises:
            ValueError: If the value is neither an email nor a phone number
        """
        return InvitationTarget.parse(raw, self.settings.default_country_code)

    def identifiers_of(self, user: User) -> list[InvitationTarget]:
        return user.identifiers(self.settings.default_country_code)

    async def create_invitation(
        self,
        account_id: AccountId,
        inviter: User,
        target: InvitationTarget,
    ) -> InvitationResult:
        """Invite an email address or phone number to join an account.

        Repeated calls for the same account and target return the open
        invitation instead of creating (and re-sending) a new one.

        Args:
            account_id: Account to share
            inviter: Admin creating the invitation
            target: Normalized target

        Returns:
            The invitation, whether it was created now, and a warning if the
            message could not be sent

        Raises:
            NotAuthorizedError: If the inviter is not an admin of the account
            NotFoundError: If the account does not exist
            CannotShareWithSelfError: If the target is the inviter
        """
        with logfire.span(
            "invitation_service.create_invitation",
            account_id=str(account_id),
            inviter_id=str(inviter.id),
            target_kind=target.kind.value,
        ):
            membership = await self.membership_repository.find(account_id, inviter.id)
            if membership is None or not membership.is_admin:
                raise NotAuthorizedError("account", str(account_id), str(inviter.id))

            account = await self.account_repository.find_by_id(account_id)
            if account is None:
                raise NotFoundError("Account", str(account_id))

            if target in self.identifiers_of(inviter):
                raise CannotShareWithSelfError(str(account_id))

            now = self.clock()
            existing = await self.invitation_repository.find_pending_for_account_target(
                account_id, target, now
            )
            if existing is not None:
                logfire.info(
                    "Pending invitation already exists",
                    account_id=str(account_id),
                    invitation_id=str(existing.id),
                )
                return InvitationResult(invitation=existing, created=False)

            invitation = Invitation(
                id=InvitationId(uuid4()),
                account_id=account_id,
                inviter_id=inviter.id,
                target=target,
                created_at=now,
                expires_at=now + timedelta(hours=self.settings.ttl_hours),
            )
            stored = await self.invitation_repository.insert(invitation)
            if stored.id != invitation.id:
                logfire.info(
                    "Concurrent invitation already created",
                    account_id=str(account_id),
                    invitation_id=str(stored.id),
                )
                return InvitationResult(invitation=stored, created=False)

            await self.account_repository.set_pending_share(
                account_id, target.value, invitation.id
            )
            logfire.info(
                "Invitation created",
                account_id=str(account_id),
                invitation_id=str(invitation.id),
                expires_at=invitation.expires_at.isoformat(),
            )

            warning = await self._dispatch(invitation, account, inviter)

            stored = await self.invitation_repository.find_by_id(invitation.id)
            return InvitationResult(
                invitation=stored or invitation,
                created=True,
                dispatch_warning=warning,
            )

    async def _dispatch(
        self, invitation: Invitation, account: Account, inviter: User
    ) -> Optional[str]:
        """Send the invitation message; return a warning instead of raising."""
        try:
            await asyncio.wait_for(
                self.dispatcher.send(
                    invitation.target,
                    invitation.id,
                    account.name,
                    inviter.name_for_display,
                ),
                timeout=self.settings.dispatch_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logfire.warn(
                "Invitation dispatch timed out",
                invitation_id=str(invitation.id),
                timeout=self.settings.dispatch_timeout_seconds,
            )
            return "Invitation created, but the message could not be sent in time"
        except DispatchFailedError as e:
            logfire.warn(
                "Invitation dispatch failed",
                invitation_id=str(invitation.id),
                error=str(e),
            )
            return "Invitation created, but the message could not be sent"
        return None

    async def accept_invitation(
        self, invitation_id: InvitationId, accepting_user: User
    ) -> Account:
        """Join the invited account.

        The membership is written before the invitation is marked accepted,
        so a failure in between leaves the invitation pending and retryable.

        Args:
            invitation_id: Invitation to accept
            accepting_user: Signed-in user accepting it

        Returns:
            The joined account

        Raises:
            InvitationNotFoundError: If missing, already accepted, revoked or orphaned
            InvitationExpiredError: If past its expiry
            InvitationTargetMismatchError: If addressed to someone else
            CannotShareWithSelfError: If the user already administers the account
        """
        with logfire.span(
            "invitation_service.accept_invitation",
            invitation_id=str(invitation_id),
            user_id=str(accepting_user.id),
        ):
            invitation = await self.invitation_repository.find_by_id(invitation_id)
            if invitation is None:
                raise InvitationNotFoundError(str(invitation_id))

            now = self.clock()
            status = invitation.status(now)
            if status == InvitationStatus.ACCEPTED:
                raise InvitationNotFoundError(str(invitation_id))
            if status == InvitationStatus.EXPIRED:
                raise InvitationExpiredError(str(invitation_id))

            if not invitation.is_addressed_to(self.identifiers_of(accepting_user)):
                logfire.warn(
                    "Invitation target mismatch",
                    invitation_id=str(invitation_id),
                    user_id=str(accepting_user.id),
                )
                raise InvitationTargetMismatchError(str(invitation_id))

            account = await self.account_repository.find_by_id(invitation.account_id)
            if account is None:
                await self.invitation_repository.delete_unaccepted(invitation_id)
                logfire.warn(
                    "Orphaned invitation removed on accept",
                    invitation_id=str(invitation_id),
                    account_id=str(invitation.account_id),
                )
                raise InvitationNotFoundError(str(invitation_id))

            existing = await self.membership_repository.find(
                account.id, accepting_user.id
            )
            if existing is not None and existing.is_admin:
                raise CannotShareWithSelfError(str(account.id))

            _, joined = await self.membership_repository.add(
                Membership(
                    account_id=account.id,
                    user_id=accepting_user.id,
                    role=MemberRole.MEMBER,
                    joined_at=now,
                )
            )

            accepted = await self.invitation_repository.mark_accepted(invitation_id, now)
            if not accepted:
                current = await self.invitation_repository.find_by_id(invitation_id)
                if current is None or current.accepted_at is None:
                    # Revoked while we were joining
                    if joined:
                        await self.membership_repository.remove(
                            account.id, accepting_user.id
                        )
                    logfire.warn(
                        "Invitation revoked during accept",
                        invitation_id=str(invitation_id),
                    )
                    raise InvitationNotFoundError(str(invitation_id))
                logfire.info(
                    "Invitation accepted concurrently",
                    invitation_id=str(invitation_id),
                )

            await self.account_repository.clear_pending_share(account.id, invitation_id)
            logfire.info(
                "Invitation accepted",
                invitation_id=str(invitation_id),
                account_id=str(account.id),
                user_id=str(accepting_user.id),
                new_membership=joined,
            )

            return await self.account_repository.find_by_id(account.id) or account

    async def revoke_invitation(
        self,
        account_id: AccountId,
        requesting_admin_id: UserId,
        invitation_id: Optional[InvitationId] = None,
    ) -> int:
        """Withdraw open invitations of an account.

        Accepted or already deleted invitations are left alone, so racing an
        acceptance is harmless.

        Args:
            account_id: Account whose invitation(s) to revoke
            requesting_admin_id: Admin performing the revocation
            invitation_id: Single invitation to revoke, None for all open ones

        Returns:
            Number of invitations deleted

        Raises:
            NotAuthorizedError: If the requester is not an admin of the account
        """
        with logfire.span(
            "invitation_service.revoke_invitation",
            account_id=str(account_id),
            invitation_id=str(invitation_id) if invitation_id else None,
        ):
            membership = await self.membership_repository.find(
                account_id, requesting_admin_id
            )
            if membership is None or not membership.is_admin:
                raise NotAuthorizedError(
                    "account", str(account_id), str(requesting_admin_id)
                )

            if invitation_id is not None:
                candidates = [invitation_id]
            else:
                candidates = [
                    invitation.id
                    for invitation in await self.invitation_repository.list_for_account(
                        account_id
                    )
                    if invitation.accepted_at is None
                ]

            revoked = 0
            for candidate in candidates:
                if await self.invitation_repository.delete_unaccepted(
                    candidate, account_id
                ):
                    revoked += 1

            await self.account_repository.clear_pending_share(account_id, invitation_id)
            logfire.info(
                "Invitations revoked", account_id=str(account_id), revoked=revoked
            )
            return revoked

    async def reconcile_orphans(self, batch_size: Optional[int] = None) -> int:
        """Delete pending invitations whose account no longer exists.

        Rows are handled one page at a time with no lock held, so the sweep
        can be interrupted and simply run again.

        Args:
            batch_size: Page size, defaults to the configured batch size

        Returns:
            Number of invitations deleted
        """
        limit = batch_size or self.settings.reconcile_batch_size
        with logfire.span("invitation_service.reconcile_orphans", batch_size=limit):
            now = self.clock()
            removed = 0
            after: Optional[InvitationId] = None
            while True:
                page = await self.invitation_repository.list_pending_page(
                    now, after, limit
                )
                if not page:
                    break

                account_ids = list({invitation.account_id for invitation in page})
                existing = {
                    account.id
                    for account in await self.account_repository.find_by_ids(account_ids)
                }
                for invitation in page:
                    if invitation.status(now, invitation.account_id in existing) != (
                        InvitationStatus.ORPHANED
                    ):
                        continue
                    if await self.invitation_repository.delete_unaccepted(
                        invitation.id
                    ):
                        removed += 1

                after = page[-1].id
                if len(page) < limit:
                    break

            logfire.info("Orphan sweep finished", removed=removed)
            return removed

    async def list_pending_for_target(
        self, target: InvitationTarget
    ) -> list[Invitation]:
        """List open invitations addressed to a target.

        Orphans found on the way are deleted and left out.

        Args:
            target: Normalized target

        Returns:
            Pending invitations, newest first
        """
        with logfire.span(
            "invitation_service.list_pending_for_target",
            target_kind=target.kind.value,
        ):
            now = self.clock()
            invitations = await self.invitation_repository.list_pending_for_target(
                target, now
            )
            if not invitations:
                return []

            existing = {
                account.id
                for account in await self.account_repository.find_by_ids(
                    list({invitation.account_id for invitation in invitations})
                )
            }
            pending = []
            for invitation in invitations:
                status = invitation.status(now, invitation.account_id in existing)
                if status == InvitationStatus.ORPHANED:
                    await self.invitation_repository.delete_unaccepted(invitation.id)
                    logfire.info(
                        "Orphaned invitation removed",
                        invitation_id=str(invitation.id),
                    )
                elif status == InvitationStatus.PENDING:
                    pending.append(invitation)
            return pending

    async def list_pending_for_user(self, user: User) -> list[Invitation]:
        """List open invitations addressed to any of the user's identifiers."""
        seen: set[InvitationId] = set()
        pending = []
        for target in self.identifiers_of(user):
            for invitation in await self.list_pending_for_target(target):
                if invitation.id not in seen:
                    seen.add(invitation.id)
                    pending.append(invitation)
        return pending

    async def list_for_account(
        self, account_id: AccountId, requesting_admin_id: UserId
    ) -> list[tuple[Invitation, InvitationStatus]]:
        """List an account's invitations with their current status.

        Raises:
            NotAuthorizedError: If the requester is not an admin of the account
        """
        membership = await self.membership_repository.find(
            account_id, requesting_admin_id
        )
        if membership is None or not membership.is_admin:
            raise NotAuthorizedError(
                "account", str(account_id), str(requesting_admin_id)
            )

        now = self.clock()
        return [
            (invitation, invitation.status(now))
            for invitation in await self.invitation_repository.list_for_account(
                account_id
            )
        ]
