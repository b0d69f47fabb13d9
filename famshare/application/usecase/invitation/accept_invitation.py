"""Accept invitation use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.application.usecase.common import AccountItem
from famshare.domain.error import DomainError, RetryableError
from famshare.domain.model import Account, User
from famshare.domain.service import InvitationService, MembershipService
from famshare.domain.value import InvitationId


class AcceptInvitationRequest(BaseModel):
    """Accept invitation request."""

    invitation_id: UUID


class AcceptInvitationResponse(BaseModel):
    """Accept invitation response."""

    account: AccountItem


class FailedAcceptance(BaseModel):
    """Invitation that could not be accepted."""

    invitation_id: UUID
    reason: str


class AcceptPendingResponse(BaseModel):
    """Result of accepting every pending invitation of a user."""

    accepted: list[AccountItem]
    failed: list[FailedAcceptance]


class AcceptInvitationUseCase(BaseUseCase):
    """Use case for joining an account through an invitation.

    The session's cached identity is only touched once the invitation has
    been accepted; a failed acceptance leaves it exactly as it was.
    """

    def __init__(
        self,
        session: ClientSession,
        invitation_service: InvitationService,
        membership_service: MembershipService,
    ) -> None:
        """Initialize accept invitation use case.

        Args:
            session: Current client session
            invitation_service: Invitation domain service
            membership_service: Membership domain service
        """
        self.session = session
        self.invitation_service = invitation_service
        self.membership_service = membership_service

    async def execute(self, request: AcceptInvitationRequest) -> AcceptInvitationResponse:
        """Accept one invitation and make the joined account active.

        Args:
            request: Invitation to accept

        Returns:
            The joined account

        Raises:
            NotAuthenticatedError: If nobody is signed in
            InvitationNotFoundError: If missing, consumed, revoked or orphaned
            InvitationExpiredError: If expired
            InvitationTargetMismatchError: If addressed to someone else
            CannotShareWithSelfError: If the user already administers the account
        """
        invitation_id = InvitationId(request.invitation_id)
        with logfire.span("accept_invitation.execute", invitation_id=str(invitation_id)):
            user = await self.session.require_user()
            account = await self.invitation_service.accept_invitation(
                invitation_id, user
            )
            await self._activate(user, account)
            return AcceptInvitationResponse(account=AccountItem.from_account(account))

    async def accept_all_pending(self) -> AcceptPendingResponse:
        """Accept every open invitation addressed to the signed-in user.

        Used right after registration. One failing invitation does not stop
        the others.

        Returns:
            Joined accounts and the invitations that failed, with reasons

        Raises:
            NotAuthenticatedError: If nobody is signed in
        """
        with logfire.span("accept_invitation.accept_all_pending"):
            user = await self.session.require_user()
            invitations = await self.invitation_service.list_pending_for_user(user)

            accepted: list[Account] = []
            failed: list[FailedAcceptance] = []
            for invitation in invitations:
                try:
                    accepted.append(
                        await self.invitation_service.accept_invitation(
                            invitation.id, user
                        )
                    )
                except DomainError as e:
                    logfire.warn(
                        "Auto-accept failed",
                        invitation_id=str(invitation.id),
                        error=str(e),
                        error_type=type(e).__name__,
                    )
                    failed.append(
                        FailedAcceptance(invitation_id=invitation.id, reason=str(e))
                    )

            if accepted:
                await self._activate(user, accepted[0])

            logfire.info(
                "Pending invitations processed",
                user_id=str(user.id),
                accepted=len(accepted),
                failed=len(failed),
            )
            return AcceptPendingResponse(
                accepted=[AccountItem.from_account(a) for a in accepted],
                failed=failed,
            )

    async def _activate(self, user: User, account: Account) -> None:
        await self.membership_service.set_preferred_account(user.id, account.id)
        self.session.monitor.reset(user.id)
        self.session.resolver.invalidate()
        try:
            await self.session.resolver.resolve(force_refresh=True)
        except RetryableError as e:
            logfire.warn("Refresh after accept failed", error=str(e))
