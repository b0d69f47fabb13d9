"""Create invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel, Field

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.application.usecase.common import InvitationItem
from famshare.domain.error import NotAuthenticatedError, ValidationError
from famshare.domain.service import InvitationService
from famshare.domain.value import AccountId, InvitationStatus


class CreateInvitationRequest(BaseModel):
    """Create invitation request.

    account_id defaults to the caller's active account.
    """

    target: str = Field(min_length=1, max_length=320)
    account_id: UUID | None = None


class CreateInvitationResponse(BaseModel):
    """Create invitation response."""

    invitation: InvitationItem
    created: bool
    dispatch_warning: str | None = None


class CreateInvitationUseCase(BaseUseCase):
    """Use case for inviting someone to share an account."""

    def __init__(
        self, session: ClientSession, invitation_service: InvitationService
    ) -> None:
        """Initialize create invitation use case.

        Args:
            session: Current client session
            invitation_service: Invitation domain service
        """
        self.session = session
        self.invitation_service = invitation_service

    async def execute(self, request: CreateInvitationRequest) -> CreateInvitationResponse:
        """Create (or return the already open) invitation.

        Args:
            request: Target email/phone and optional account

        Returns:
            The invitation and a delivery warning, if any

        Raises:
            NotAuthenticatedError: If nobody is signed in
            ValidationError: If the target is malformed or there is no account
            NotAuthorizedError: If the caller is not an admin of the account
        """
        with logfire.span("create_invitation.execute"):
            identity = await self.session.resolver.resolve()
            if identity.user is None:
                raise NotAuthenticatedError()
            user = identity.user

            if request.account_id is not None:
                account_id = AccountId(request.account_id)
            elif identity.active_account is not None:
                account_id = identity.active_account.id
            else:
                raise ValidationError("No active account to share")

            try:
                target = self.invitation_service.parse_target(request.target)
            except ValueError as e:
                raise ValidationError(str(e)) from e

            result = await self.invitation_service.create_invitation(
                account_id, user, target
            )
            if result.created:
                self.session.resolver.invalidate()

            return CreateInvitationResponse(
                invitation=InvitationItem.from_invitation(
                    result.invitation, InvitationStatus.PENDING
                ),
                created=result.created,
                dispatch_warning=result.dispatch_warning,
            )
