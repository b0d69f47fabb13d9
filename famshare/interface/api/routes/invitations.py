"""Invitation routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query, status

from famshare.application.usecase.invitation import (
    AcceptInvitationRequest,
    AcceptInvitationResponse,
    AcceptInvitationUseCase,
    AcceptPendingResponse,
    CreateInvitationRequest,
    CreateInvitationResponse,
    CreateInvitationUseCase,
    ListPendingInvitationsRequest,
    ListPendingInvitationsResponse,
    ListPendingInvitationsUseCase,
)

router = APIRouter(prefix="/invitations", tags=["invitations"], route_class=DishkaRoute)


@router.post(
    "", response_model=CreateInvitationResponse, status_code=status.HTTP_201_CREATED
)
async def create_invitation(
    request: CreateInvitationRequest,
    create_invitation_use_case: FromDishka[CreateInvitationUseCase],
) -> CreateInvitationResponse:
    """Invite an email address or phone number to the account.

    Repeating the call for the same target returns the open invitation with
    created=false. A message that could not be sent is reported in
    dispatch_warning; the invitation still exists.

    Args:
        request: Target and optional account (defaults to the active one)
        create_invitation_use_case: Create invitation use case from DI

    Returns:
        The invitation

    Example:
        POST /invitations
        {"target": "Dana@Example.com"}

        Response:
        {
            "invitation": {"target": "dana@example.com", "status": "pending", ...},
            "created": true,
            "dispatch_warning": null
        }
    """
    return await create_invitation_use_case.execute(request)


@router.get("/pending", response_model=ListPendingInvitationsResponse)
async def list_pending_invitations(
    list_pending_invitations_use_case: FromDishka[ListPendingInvitationsUseCase],
    target: str | None = Query(default=None, max_length=320),
) -> ListPendingInvitationsResponse:
    """List invitations waiting for the signed-in user.

    Args:
        list_pending_invitations_use_case: Use case from DI
        target: One of the user's own email/phone identifiers, all if omitted
    """
    return await list_pending_invitations_use_case.execute(
        ListPendingInvitationsRequest(target=target)
    )


@router.post("/accept-pending", response_model=AcceptPendingResponse)
async def accept_pending_invitations(
    accept_invitation_use_case: FromDishka[AcceptInvitationUseCase],
) -> AcceptPendingResponse:
    """Accept every invitation addressed to the signed-in user."""
    return await accept_invitation_use_case.accept_all_pending()


@router.post("/{invitation_id}/accept", response_model=AcceptInvitationResponse)
async def accept_invitation(
    invitation_id: UUID,
    accept_invitation_use_case: FromDishka[AcceptInvitationUseCase],
) -> AcceptInvitationResponse:
    """Join the account behind an invitation and make it active.

    Raises (as HTTP errors):
        404: Unknown, already accepted, revoked or orphaned invitation
        410: Expired invitation
        403: Invitation addressed to someone else
    """
    return await accept_invitation_use_case.execute(
        AcceptInvitationRequest(invitation_id=invitation_id)
    )
