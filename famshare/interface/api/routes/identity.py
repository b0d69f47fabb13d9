"""Identity and session routes."""

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header, Query
from pydantic import BaseModel

from famshare.application.session import extract_bearer_token
from famshare.application.usecase.identity import (
    HandleSessionEventRequest,
    HandleSessionEventResponse,
    HandleSessionEventUseCase,
    ResolveIdentityRequest,
    ResolveIdentityResponse,
    ResolveIdentityUseCase,
)
from famshare.domain.value import SessionEvent

router = APIRouter(tags=["identity"], route_class=DishkaRoute)


class SessionEventAPIRequest(BaseModel):
    """Session change observed by the client."""

    event: SessionEvent


@router.get("/identity", response_model=ResolveIdentityResponse)
async def resolve_identity(
    resolve_identity_use_case: FromDishka[ResolveIdentityUseCase],
    force_refresh: bool = Query(default=False),
) -> ResolveIdentityResponse:
    """Resolve the signed-in user, their accounts and the active account.

    Without a bearer token the response is anonymous rather than an error.

    Args:
        resolve_identity_use_case: Resolve identity use case from DI
        force_refresh: Bypass the short-lived identity cache

    Returns:
        The resolved identity; stale is true when the last good result was
        served because resolution failed
    """
    return await resolve_identity_use_case.execute(
        ResolveIdentityRequest(force_refresh=force_refresh)
    )


@router.post("/session/events", response_model=HandleSessionEventResponse)
async def handle_session_event(
    request: SessionEventAPIRequest,
    handle_session_event_use_case: FromDishka[HandleSessionEventUseCase],
    authorization: str | None = Header(default=None),
) -> HandleSessionEventResponse:
    """Forward a login, token refresh, profile update or sign-out.

    Example:
        POST /session/events
        {"event": "signed_out"}
    """
    return await handle_session_event_use_case.execute(
        HandleSessionEventRequest(
            event=request.event,
            access_token=extract_bearer_token(authorization),
        )
    )
