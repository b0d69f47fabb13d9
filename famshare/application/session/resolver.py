"""Session resolver: who is signed in and which account is active."""

import asyncio
import time
from collections.abc import Callable
from datetime import datetime
from typing import Optional

import logfire

from famshare.config import SessionSettings
from famshare.domain.error import ResolutionTimeoutError, RetryableError
from famshare.domain.model import ResolvedIdentity, User
from famshare.domain.model.common import utc_now
from famshare.domain.service import IdentityProvider, MembershipService
from famshare.domain.value import SessionEvent

from .cache import EphemeralCache
from .invitation_monitor import PendingInvitationMonitor
from .single_flight import SingleFlight

IDENTITY_SCOPE = "identity"


class SessionResolver:
    """Resolves the signed-in user, their roster and active account.

    One instance per client session. Concurrent callers share a single
    running resolution; a finished resolution is served from cache for a
    few seconds. A resolution that was started before invalidate() never
    writes its result back.

    Failures leave the cache alone and the last good result stays
    available through snapshot.
    """

    def __init__(
        self,
        identity_provider: IdentityProvider,
        membership_service: MembershipService,
        invitation_monitor: PendingInvitationMonitor,
        settings: SessionSettings,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.identity_provider = identity_provider
        self.membership_service = membership_service
        self.invitation_monitor = invitation_monitor
        self.settings = settings
        self.wall_clock = wall_clock
        self._cache = EphemeralCache(
            default_ttl=settings.identity_ttl_seconds, max_entries=1, clock=clock
        )
        self._flight: SingleFlight[ResolvedIdentity] = SingleFlight()
        self._generation = 0
        self._last_good: Optional[ResolvedIdentity] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def snapshot(self) -> Optional[ResolvedIdentity]:
        """Last successful resolution, regardless of its age."""
        return self._last_good

    @property
    def cached(self) -> Optional[ResolvedIdentity]:
        """Identity currently served from cache, None once it expired."""
        return self._cache.get(IDENTITY_SCOPE)

    async def resolve(
        self, force_refresh: bool = False, timeout: Optional[float] = None
    ) -> ResolvedIdentity:
        """Resolve the current identity.

        Args:
            force_refresh: Skip the cache and wait for a fresh resolution that
                starts after any one currently running
            timeout: Seconds before the resolution is abandoned, defaults to
                the configured resolve timeout

        Returns:
            The resolved identity (anonymous when nobody is signed in)

        Raises:
            RetryableError: If the store or identity provider failed or the
                resolution timed out
        """
        if not force_refresh:
            cached = self._cache.get(IDENTITY_SCOPE)
            if cached is not None:
                return cached
        else:
            await self._flight.wait(IDENTITY_SCOPE)

        return await self._flight.do(IDENTITY_SCOPE, lambda: self._execute(timeout))

    async def resolve_or_stale(
        self, force_refresh: bool = False, timeout: Optional[float] = None
    ) -> tuple[ResolvedIdentity, bool]:
        """Resolve, falling back to the last good result on transient failure.

        Returns:
            The identity, and True when it is the last good result served
            in place of a failed resolution
        """
        try:
            identity = await self.resolve(force_refresh=force_refresh, timeout=timeout)
            return identity, False
        except RetryableError as e:
            if self._last_good is None or not self.settings.serve_stale_on_error:
                raise
            logfire.warn(
                "Serving stale identity",
                error=str(e),
                resolved_at=self._last_good.resolved_at.isoformat(),
            )
            return self._last_good, True

    def invalidate(self, clear_snapshot: bool = False) -> None:
        """Drop the cached identity so the next call resolves again.

        Args:
            clear_snapshot: Also forget the last good result (sign-out)
        """
        self._generation += 1
        self._cache.clear()
        if clear_snapshot:
            self._last_good = None

    async def handle_session_event(
        self, event: SessionEvent, user: Optional[User] = None
    ) -> None:
        """React to a session change reported by the identity provider."""
        logfire.info("Session event", session_event=event.value)
        if event == SessionEvent.SIGNED_OUT:
            self.invalidate(clear_snapshot=True)
            self.invitation_monitor.clear()
        else:
            self.invalidate()

    def attach(self) -> None:
        """Subscribe to the identity provider's session changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.identity_provider.on_session_change(
                self.handle_session_event
            )

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def _execute(self, timeout: Optional[float]) -> ResolvedIdentity:
        generation = self._generation
        limit = timeout if timeout is not None else self.settings.resolve_timeout_seconds

        with logfire.span("session_resolver.resolve", generation=generation):
            try:
                identity = await asyncio.wait_for(self._build(), timeout=limit)
            except asyncio.TimeoutError as e:
                logfire.warn("Identity resolution timed out", timeout=limit)
                raise ResolutionTimeoutError(
                    f"Identity resolution timed out after {limit}s"
                ) from e
            except RetryableError as e:
                logfire.warn(
                    "Identity resolution failed",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

            if generation != self._generation:
                logfire.info("Discarding resolution started before invalidation")
                return identity

            self._cache.set(IDENTITY_SCOPE, identity)
            self._last_good = identity
            return identity

    async def _build(self) -> ResolvedIdentity:
        user = await self.identity_provider.current_user()
        now = self.wall_clock()
        if user is None:
            return ResolvedIdentity(resolved_at=now)

        membership = self.membership_service
        roster = await membership.list_memberships(user.id)
        preference = await membership.get_preferred_account_id(user.id)
        selection = MembershipService.select_active_account(user.id, roster, preference)
        pending = await self.invitation_monitor.check(user)

        active = selection.account
        suppressed = False
        if active is None:
            if self.invitation_monitor.bootstrap_suppressed(user.id):
                suppressed = True
                logfire.info(
                    "Bootstrap suppressed, invitations pending",
                    user_id=str(user.id),
                    pending=len(pending),
                )
            else:
                active = await membership.bootstrap_default_account(
                    user.id, user.name_for_display
                )
                roster = await membership.list_memberships(user.id)
                await membership.set_preferred_account(user.id, active.id)
        elif selection.should_persist:
            await membership.set_preferred_account(user.id, active.id)

        return ResolvedIdentity(
            user=user,
            active_account=active,
            roster=roster,
            pending_invitations=pending,
            bootstrap_suppressed=suppressed,
            resolved_at=now,
        )
