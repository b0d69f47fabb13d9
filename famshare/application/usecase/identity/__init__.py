"""Identity use cases."""

from famshare.application.usecase.identity.handle_session_event import (
    HandleSessionEventRequest,
    HandleSessionEventResponse,
    HandleSessionEventUseCase,
)
from famshare.application.usecase.identity.resolve_identity import (
    ResolveIdentityRequest,
    ResolveIdentityResponse,
    ResolveIdentityUseCase,
)

__all__ = [
    "HandleSessionEventRequest",
    "HandleSessionEventResponse",
    "HandleSessionEventUseCase",
    "ResolveIdentityRequest",
    "ResolveIdentityResponse",
    "ResolveIdentityUseCase",
]
