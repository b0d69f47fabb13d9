"""Revoke invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.domain.service import InvitationService
from famshare.domain.value import AccountId, InvitationId


class RevokeInvitationRequest(BaseModel):
    """Revoke invitation request.

    Without invitation_id every open invitation of the account is revoked.
    """

    account_id: UUID
    invitation_id: UUID | None = None


class RevokeInvitationResponse(BaseModel):
    """Revoke invitation response."""

    revoked: int


class RevokeInvitationUseCase(BaseUseCase):
    """Use case for withdrawing open invitations."""

    def __init__(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> None:
        self.session = session
        self.invitation_service = invitation_service

    async def execute(self, request: RevokeInvitationRequest) -> RevokeInvitationResponse:
        with logfire.span(
            "revoke_invitation.execute", account_id=str(request.account_id)
        ):
            user = await self.session.require_user()
            revoked = await self.invitation_service.revoke_invitation(
                AccountId(request.account_id),
                user.id,
                InvitationId(request.invitation_id) if request.invitation_id else None,
            )
            self.session.resolver.invalidate()
            return RevokeInvitationResponse(revoked=revoked)
