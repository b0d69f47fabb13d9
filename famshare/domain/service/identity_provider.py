"""Identity provider boundary.

Sign-in, token issuance and password handling live in an external service;
this core only asks it who is signed in and listens for session changes.
"""

from collections.abc import Awaitable, Callable
from typing import Optional

import logfire

from famshare.domain.model.user import User
from famshare.domain.value import SessionEvent

SessionListener = Callable[[SessionEvent, Optional[User]], Awaitable[None]]


class IdentityProvider:
    """Generic identity provider interface."""

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []

    async def current_user(self) -> Optional[User]:
        """Return the signed-in user.

        Returns:
            The user, or None when nobody is signed in

        Raises:
            IdentityProviderUnavailableError: If the provider cannot answer
        """
        raise NotImplementedError

    def on_session_change(self, listener: SessionListener) -> Callable[[], None]:
        """Subscribe to session changes.

        Args:
            listener: Coroutine called with the event and the user (if any)

        Returns:
            Callable that removes the subscription
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def notify(self, event: SessionEvent, user: Optional[User] = None) -> None:
        """Deliver a session change to all subscribers in subscription order."""
        with logfire.span(
            "identity_provider.notify",
            session_event=event.value,
            listeners=len(self._listeners),
        ):
            for listener in list(self._listeners):
                await listener(event, user)


class IdentityProviderFactory:
    """Builds an identity provider bound to one client's access token."""

    def create(self, access_token: str) -> IdentityProvider:
        """Create a provider for the session behind an access token.

        Args:
            access_token: Bearer token issued by the identity provider

        Returns:
            Provider answering for that session
        """
        raise NotImplementedError


class AnonymousIdentityProvider(IdentityProvider):
    """Provider for clients without an access token: nobody is signed in."""

    async def current_user(self) -> Optional[User]:
        return None
