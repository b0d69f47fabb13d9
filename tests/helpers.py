"""Shared builders for tests."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import uuid4

from famshare.adapter.notification import RecordingNotificationDispatcher
from famshare.application.session import (
    ClientSession,
    PendingInvitationMonitor,
    SessionResolver,
)
from famshare.config import InvitationSettings, SessionSettings
from famshare.domain.model import Account, Invitation, Membership, User
from famshare.domain.service import (
    IdentityProvider,
    InvitationService,
    MembershipService,
)
from famshare.domain.value import (
    AccountId,
    InvitationId,
    InvitationTarget,
    MemberRole,
    UserId,
)
from famshare.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryInvitationRepository,
    InMemoryMembershipRepository,
    InMemoryProfileRepository,
)


def make_user(
    email: Optional[str] = "dana@example.com",
    phone: Optional[str] = None,
    display_name: str = "Dana",
) -> User:
    """Helper to build a signed-in user with a fresh id."""
    return User(
        id=UserId(uuid4()), email=email, phone=phone, display_name=display_name
    )


class FrozenClock:
    """Wall clock and monotonic clock that only move when told to."""

    def __init__(self, start: Optional[datetime] = None) -> None:
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
        self.seconds = 1000.0

    def __call__(self) -> datetime:
        return self.now

    def monotonic(self) -> float:
        return self.seconds

    def advance(self, **delta: float) -> None:
        step = timedelta(**delta)
        self.now += step
        self.seconds += step.total_seconds()


@dataclass
class Stack:
    """In-memory repositories and services sharing one clock."""

    clock: FrozenClock
    accounts: InMemoryAccountRepository = field(default_factory=InMemoryAccountRepository)
    memberships: InMemoryMembershipRepository = field(
        default_factory=InMemoryMembershipRepository
    )
    invitations: InMemoryInvitationRepository = field(
        default_factory=InMemoryInvitationRepository
    )
    profiles: InMemoryProfileRepository = field(default_factory=InMemoryProfileRepository)
    dispatcher: RecordingNotificationDispatcher = field(
        default_factory=RecordingNotificationDispatcher
    )
    invitation_settings: InvitationSettings = field(default_factory=InvitationSettings)
    session_settings: SessionSettings = field(default_factory=SessionSettings)

    def __post_init__(self) -> None:
        self.membership_service = MembershipService(
            account_repository=self.accounts,
            membership_repository=self.memberships,
            profile_repository=self.profiles,
        )
        self.invitation_service = InvitationService(
            invitation_repository=self.invitations,
            account_repository=self.accounts,
            membership_repository=self.memberships,
            dispatcher=self.dispatcher,
            settings=self.invitation_settings,
            clock=self.clock,
        )

    async def create_account(
        self,
        admin: User,
        name: str = "Family",
        joined_at: Optional[datetime] = None,
    ) -> Account:
        """Store an account administered by admin."""
        account = await self.accounts.save(
            Account(id=AccountId(uuid4()), name=name, created_at=self.clock())
        )
        await self.memberships.add(
            Membership(
                account_id=account.id,
                user_id=admin.id,
                role=MemberRole.ADMIN,
                joined_at=joined_at or self.clock(),
            )
        )
        return account

    async def join(
        self, account: Account, user: User, joined_at: Optional[datetime] = None
    ) -> None:
        await self.memberships.add(
            Membership(
                account_id=account.id,
                user_id=user.id,
                role=MemberRole.MEMBER,
                joined_at=joined_at or self.clock(),
            )
        )

    def open_session(
        self,
        identity_provider: IdentityProvider,
        settings: Optional[SessionSettings] = None,
    ) -> ClientSession:
        """Client session on this stack's services and clock, subscribed to events."""
        settings = settings or self.session_settings
        monitor = PendingInvitationMonitor(
            self.invitation_service,
            settings,
            clock=self.clock.monotonic,
            wall_clock=self.clock,
        )
        resolver = SessionResolver(
            identity_provider=identity_provider,
            membership_service=self.membership_service,
            invitation_monitor=monitor,
            settings=settings,
            clock=self.clock.monotonic,
            wall_clock=self.clock,
        )
        resolver.attach()
        return ClientSession(
            identity_provider=identity_provider, resolver=resolver, monitor=monitor
        )


class InterleavingMembershipRepository(InMemoryMembershipRepository):
    """Yields to the event loop on every read so concurrent callers interleave."""

    async def list_for_user(self, user_id: UserId) -> list[Membership]:
        await asyncio.sleep(0)
        return await super().list_for_user(user_id)


class InterleavingInvitationRepository(InMemoryInvitationRepository):
    """Yields to the event loop after every lookup, like a real round trip.

    Two concurrent callers both read before either of them writes.
    """

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        found = await super().find_by_id(invitation_id)
        await asyncio.sleep(0)
        return found

    async def find_pending_for_account_target(
        self, account_id: AccountId, target: InvitationTarget, now: datetime
    ) -> Optional[Invitation]:
        found = await super().find_pending_for_account_target(account_id, target, now)
        await asyncio.sleep(0)
        return found
