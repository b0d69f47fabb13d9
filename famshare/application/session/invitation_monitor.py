"""Throttled detection of invitations addressed to the signed-in user."""

import time
from collections.abc import Callable
from datetime import datetime

import logfire

from famshare.config import SessionSettings
from famshare.domain.model import Invitation, PendingInvitationNotice, User
from famshare.domain.model.common import utc_now
from famshare.domain.service import InvitationService
from famshare.domain.value import UserId

from .cache import EphemeralCache


class PendingInvitationMonitor:
    """Watches for pending invitations on behalf of one client session.

    The store is queried at most once per check interval; in between, the
    last answer is reused. While that answer lists at least one invitation,
    automatic account bootstrap is suppressed so the user can join the
    shared account instead of getting a throwaway personal one.

    All state is best-effort. If it is lost the next resolution simply asks
    the store again.
    """

    def __init__(
        self,
        invitation_service: InvitationService,
        settings: SessionSettings,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.invitation_service = invitation_service
        self.settings = settings
        self.wall_clock = wall_clock
        self._checks = EphemeralCache(
            default_ttl=settings.invitation_check_interval_seconds,
            max_entries=16,
            clock=clock,
        )
        self._notices = EphemeralCache(
            default_ttl=settings.notice_ttl_seconds,
            max_entries=settings.notice_max_entries,
            clock=clock,
        )

    async def check(self, user: User, force: bool = False) -> tuple[Invitation, ...]:
        """Return pending invitations for the user, querying at most once per interval.

        Args:
            user: Signed-in user
            force: Ignore the throttle

        Returns:
            Pending invitations addressed to the user's email or phone
        """
        key = self._check_key(user.id)
        cached = self._checks.get(key)
        if cached is not None and not force:
            return cached

        with logfire.span("invitation_monitor.check", user_id=str(user.id)):
            invitations = tuple(
                await self.invitation_service.list_pending_for_user(user)
            )
            self._checks.set(key, invitations)
            if invitations:
                logfire.info(
                    "Pending invitations found",
                    user_id=str(user.id),
                    count=len(invitations),
                )
            return invitations

    def bootstrap_suppressed(self, user_id: UserId) -> bool:
        """Whether the last check found invitations waiting for this user."""
        return bool(self._checks.get(self._check_key(user_id)))

    def take_new_notices(self, invitations: tuple[Invitation, ...]) -> list[Invitation]:
        """Invitations not yet surfaced in this session; records them as surfaced."""
        fresh = []
        for invitation in invitations:
            key = str(invitation.id)
            if key in self._notices:
                continue
            self._notices.set(
                key,
                PendingInvitationNotice(
                    invitation_id=invitation.id, notified_at=self.wall_clock()
                ),
            )
            fresh.append(invitation)
        return fresh

    def reset(self, user_id: UserId) -> None:
        """Forget the throttle and suppression state of a user."""
        self._checks.delete(self._check_key(user_id))

    def clear(self) -> None:
        """Forget everything, including surfaced notices (sign-out)."""
        self._checks.clear()
        self._notices.clear()

    @staticmethod
    def _check_key(user_id: UserId) -> str:
        return f"pending:{user_id}"
