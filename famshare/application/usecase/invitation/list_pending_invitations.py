"""List pending invitations use case."""

import logfire
from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.application.usecase.common import InvitationItem
from famshare.domain.error import NotAuthorizedError, ValidationError
from famshare.domain.service import InvitationService
from famshare.domain.value import InvitationStatus


class ListPendingInvitationsRequest(BaseModel):
    """List pending invitations request.

    target defaults to all of the signed-in user's email/phone identifiers.
    """

    target: str | None = None


class ListPendingInvitationsResponse(BaseModel):
    """List pending invitations response."""

    invitations: list[InvitationItem]


class ListPendingInvitationsUseCase(BaseUseCase):
    """Use case for listing invitations waiting for the signed-in user."""

    def __init__(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> None:
        """Initialize list pending invitations use case.

        Args:
            session: Current client session
            invitation_service: Invitation domain service
        """
        self.session = session
        self.invitation_service = invitation_service

    async def execute(
        self, request: ListPendingInvitationsRequest
    ) -> ListPendingInvitationsResponse:
        """List pending invitations.

        Only the user's own identifiers may be queried.

        Raises:
            NotAuthenticatedError: If nobody is signed in
            ValidationError: If the target is malformed
            NotAuthorizedError: If the target is not one of the user's identifiers
        """
        with logfire.span("list_pending_invitations.execute"):
            user = await self.session.require_user()

            if request.target is None:
                invitations = await self.invitation_service.list_pending_for_user(user)
            else:
                try:
                    target = self.invitation_service.parse_target(request.target)
                except ValueError as e:
                    raise ValidationError(str(e)) from e
                if target not in self.invitation_service.identifiers_of(user):
                    raise NotAuthorizedError("invitations", target.value, str(user.id))
                invitations = await self.invitation_service.list_pending_for_target(
                    target
                )

            return ListPendingInvitationsResponse(
                invitations=[
                    InvitationItem.from_invitation(i, InvitationStatus.PENDING)
                    for i in invitations
                ]
            )
