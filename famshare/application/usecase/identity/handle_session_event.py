"""Handle session event use case."""

from typing import Optional

import logfire
from pydantic import BaseModel

from famshare.application.session import SessionRegistry
from famshare.application.usecase.base import BaseUseCase
from famshare.domain.value import SessionEvent


class HandleSessionEventRequest(BaseModel):
    """A session change the client observed at the identity provider."""

    event: SessionEvent
    access_token: Optional[str] = None


class HandleSessionEventResponse(BaseModel):
    """Handle session event response."""

    event: SessionEvent
    session_closed: bool = False


class HandleSessionEventUseCase(BaseUseCase):
    """Relays login, token refresh, profile update and sign-out to the session.

    Subscribers (the resolver) invalidate their cache; a sign-out also
    closes and forgets the session.
    """

    def __init__(self, registry: SessionRegistry) -> None:
        self.registry = registry

    async def execute(
        self, request: HandleSessionEventRequest
    ) -> HandleSessionEventResponse:
        with logfire.span(
            "handle_session_event.execute", session_event=request.event.value
        ):
            session = self.registry.get(request.access_token)
            await session.identity_provider.notify(request.event)

            closed = False
            if request.event == SessionEvent.SIGNED_OUT and request.access_token:
                self.registry.drop(request.access_token)
                closed = True
            return HandleSessionEventResponse(event=request.event, session_closed=closed)
