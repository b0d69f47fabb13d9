"""List sent invitations use case."""

from uuid import UUID

from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.application.usecase.common import InvitationItem
from famshare.domain.service import InvitationService
from famshare.domain.value import AccountId


class ListSentInvitationsRequest(BaseModel):
    """List sent invitations request."""

    account_id: UUID


class ListSentInvitationsResponse(BaseModel):
    """List sent invitations response."""

    invitations: list[InvitationItem]


class ListSentInvitationsUseCase(BaseUseCase):
    """Use case for an admin reviewing the invitations of an account."""

    def __init__(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> None:
        self.session = session
        self.invitation_service = invitation_service

    async def execute(
        self, request: ListSentInvitationsRequest
    ) -> ListSentInvitationsResponse:
        user = await self.session.require_user()
        invitations = await self.invitation_service.list_for_account(
            AccountId(request.account_id), user.id
        )
        return ListSentInvitationsResponse(
            invitations=[
                InvitationItem.from_invitation(invitation, status)
                for invitation, status in invitations
            ]
        )
