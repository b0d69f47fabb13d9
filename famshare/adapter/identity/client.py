"""Identity provider client.

Asks the external auth service who owns an access token. Sign-in, token
refresh and sign-out happen between the client and that service; the API
only relays the resulting session events.
"""

from typing import Any, Optional
from uuid import UUID

import httpx
import logfire

from famshare.adapter.error import ProviderError
from famshare.config import IdentitySettings
from famshare.domain.error import IdentityProviderUnavailableError
from famshare.domain.model import User
from famshare.domain.service import IdentityProvider, IdentityProviderFactory
from famshare.domain.value import SessionEvent, UserId


def user_from_payload(data: dict[str, Any]) -> User:
    """Build a User from the auth service's user document.

    Raises:
        ProviderError: If the document has no usable id
    """
    try:
        user_id = UserId(UUID(str(data["id"])))
    except (KeyError, ValueError) as e:
        raise ProviderError(f"Malformed user document: {e}") from e

    metadata = data.get("user_metadata") or {}
    display_name = (
        metadata.get("display_name")
        or metadata.get("full_name")
        or metadata.get("name")
        or ""
    )
    return User(
        id=user_id,
        email=data.get("email") or None,
        phone=data.get("phone") or None,
        display_name=display_name,
    )


class HttpIdentityProvider(IdentityProvider):
    """Identity provider backed by the auth service's user endpoint."""

    def __init__(
        self,
        access_token: str,
        settings: IdentitySettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize provider for one access token.

        Args:
            access_token: Bearer token of the client session
            settings: Auth service location and timeouts
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        super().__init__()
        self.access_token = access_token
        self.settings = settings
        self.user_url = f"{settings.base_url.rstrip('/')}/auth/v1/user"
        self._transport = transport

    async def current_user(self) -> Optional[User]:
        """Fetch the user owning the access token.

        Returns:
            The user, or None if the token is not (or no longer) valid

        Raises:
            IdentityProviderUnavailableError: If the auth service failed
        """
        with logfire.span("identity_provider.current_user"):
            try:
                return await self._fetch_user()
            except ProviderError as e:
                raise IdentityProviderUnavailableError(str(e)) from e

    async def _fetch_user(self) -> Optional[User]:
        headers = {
            "apikey": self.settings.api_key,
            "Authorization": f"Bearer {self.access_token}",
        }
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    self.user_url,
                    headers=headers,
                    timeout=self.settings.timeout_seconds,
                )
        except httpx.HTTPError as e:
            logfire.error("Identity provider HTTP error", error=str(e))
            raise ProviderError(f"HTTP error fetching user: {e}") from e

        if response.status_code in (401, 403):
            logfire.info(
                "Access token rejected by identity provider",
                status_code=response.status_code,
            )
            return None

        if response.status_code != 200:
            logfire.error(
                "Identity provider request failed",
                status_code=response.status_code,
                error=response.text,
            )
            raise ProviderError(f"User request failed: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("User response is not JSON") from e
        return user_from_payload(data)


class HttpIdentityProviderFactory(IdentityProviderFactory):
    """Creates HttpIdentityProvider instances per access token."""

    def __init__(
        self,
        settings: IdentitySettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self._transport = transport

    def create(self, access_token: str) -> IdentityProvider:
        return HttpIdentityProvider(access_token, self.settings, self._transport)


class InMemoryIdentityProvider(IdentityProvider):
    """Identity provider for tests; sessions are switched by hand."""

    def __init__(self, user: Optional[User] = None) -> None:
        super().__init__()
        self.user = user
        self.calls = 0
        self.error: Optional[Exception] = None

    async def current_user(self) -> Optional[User]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.user

    async def sign_in(self, user: User) -> None:
        self.user = user
        await self.notify(SessionEvent.SIGNED_IN, user)

    async def sign_out(self) -> None:
        self.user = None
        await self.notify(SessionEvent.SIGNED_OUT)


class InMemoryIdentityDirectory(IdentityProviderFactory):
    """Maps access tokens to users for tests.

    Unknown tokens resolve to an anonymous session.
    """

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self.providers: dict[str, InMemoryIdentityProvider] = {}

    def register(self, access_token: str, user: User) -> None:
        self.users[access_token] = user
        provider = self.providers.get(access_token)
        if provider is not None:
            provider.user = user

    def create(self, access_token: str) -> IdentityProvider:
        provider = InMemoryIdentityProvider(self.users.get(access_token))
        self.providers[access_token] = provider
        return provider
