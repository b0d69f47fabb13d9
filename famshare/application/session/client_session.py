"""Client sessions: one resolver, cache and notice ledger per signed-in client."""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

import logfire

from famshare.config import SessionSettings
from famshare.domain.error import NotAuthenticatedError
from famshare.domain.model import User
from famshare.domain.service import (
    AnonymousIdentityProvider,
    IdentityProvider,
    IdentityProviderFactory,
    InvitationService,
    MembershipService,
)

from .invitation_monitor import PendingInvitationMonitor
from .resolver import SessionResolver


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Access token from an Authorization header, None if absent or not Bearer."""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


@dataclass
class ClientSession:
    """Everything that belongs to one client session.

    Never shared between signed-in clients.
    """

    identity_provider: IdentityProvider
    resolver: SessionResolver
    monitor: PendingInvitationMonitor

    async def require_user(self) -> User:
        """Signed-in user of this session.

        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        identity = await self.resolver.resolve()
        if identity.user is None:
            raise NotAuthenticatedError()
        return identity.user

    def close(self) -> None:
        self.resolver.detach()


class SessionFactory:
    """Creates client sessions wired to the shared domain services."""

    def __init__(
        self,
        membership_service: MembershipService,
        invitation_service: InvitationService,
        settings: SessionSettings,
    ) -> None:
        self.membership_service = membership_service
        self.invitation_service = invitation_service
        self.settings = settings

    def create(self, identity_provider: IdentityProvider) -> ClientSession:
        """Build a session around an identity provider and subscribe it to session events."""
        monitor = PendingInvitationMonitor(self.invitation_service, self.settings)
        resolver = SessionResolver(
            identity_provider=identity_provider,
            membership_service=self.membership_service,
            invitation_monitor=monitor,
            settings=self.settings,
        )
        resolver.attach()
        return ClientSession(
            identity_provider=identity_provider, resolver=resolver, monitor=monitor
        )


class SessionRegistry:
    """Client sessions of a server process, keyed by access token.

    Bounded: the least recently used session is closed when the limit is
    reached. A refreshed token starts a new session; the old one ages out.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        identity_provider_factory: IdentityProviderFactory,
        max_sessions: int,
    ) -> None:
        self.session_factory = session_factory
        self.identity_provider_factory = identity_provider_factory
        self.max_sessions = max_sessions
        self._sessions: OrderedDict[str, ClientSession] = OrderedDict()
        self._anonymous: Optional[ClientSession] = None

    def get(self, access_token: Optional[str]) -> ClientSession:
        """Session for an access token, created on first use.

        Requests without a token share one anonymous session.
        """
        if not access_token:
            if self._anonymous is None:
                self._anonymous = self.session_factory.create(
                    AnonymousIdentityProvider()
                )
            return self._anonymous

        session = self._sessions.get(access_token)
        if session is not None:
            self._sessions.move_to_end(access_token)
            return session

        session = self.session_factory.create(
            self.identity_provider_factory.create(access_token)
        )
        self._sessions[access_token] = session
        while len(self._sessions) > self.max_sessions:
            _, evicted = self._sessions.popitem(last=False)
            evicted.close()
            logfire.info("Client session evicted", sessions=len(self._sessions))
        return session

    def drop(self, access_token: str) -> None:
        """Close and forget the session of an access token."""
        session = self._sessions.pop(access_token, None)
        if session is not None:
            session.close()

    def close_all(self) -> None:
        """Close every session (process shutdown)."""
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
        if self._anonymous is not None:
            self._anonymous.close()
            self._anonymous = None

    def __len__(self) -> int:
        return len(self._sessions)
