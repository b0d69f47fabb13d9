"""Resolve identity use case."""

import logfire
from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.application.usecase.common import AccountItem, InvitationItem, UserItem
from famshare.domain.value import InvitationStatus


class ResolveIdentityRequest(BaseModel):
    """Resolve identity request."""

    force_refresh: bool = False


class ResolveIdentityResponse(BaseModel):
    """Resolved identity.

    user is None when nobody is signed in. new_notices lists the pending
    invitations this session has not been told about before.
    """

    authenticated: bool
    user: UserItem | None = None
    active_account: AccountItem | None = None
    owned_accounts: list[AccountItem] = []
    shared_accounts: list[AccountItem] = []
    pending_invitations: list[InvitationItem] = []
    new_notices: list[InvitationItem] = []
    bootstrap_suppressed: bool = False
    stale: bool = False


class ResolveIdentityUseCase(BaseUseCase):
    """Use case for resolving who is signed in and which account is active."""

    def __init__(self, session: ClientSession) -> None:
        """Initialize resolve identity use case.

        Args:
            session: Current client session
        """
        self.session = session

    async def execute(self, request: ResolveIdentityRequest) -> ResolveIdentityResponse:
        """Resolve the identity, serving the last good result on transient failure.

        Args:
            request: Whether to bypass the cache

        Returns:
            The resolved identity

        Raises:
            RetryableError: If resolution failed and nothing was resolved before
        """
        with logfire.span(
            "resolve_identity.execute", force_refresh=request.force_refresh
        ):
            identity, stale = await self.session.resolver.resolve_or_stale(
                force_refresh=request.force_refresh
            )

            if identity.user is None:
                return ResolveIdentityResponse(authenticated=False)

            pending = [
                InvitationItem.from_invitation(invitation, InvitationStatus.PENDING)
                for invitation in identity.pending_invitations
            ]
            notices = [
                InvitationItem.from_invitation(invitation, InvitationStatus.PENDING)
                for invitation in self.session.monitor.take_new_notices(
                    identity.pending_invitations
                )
            ]

            return ResolveIdentityResponse(
                authenticated=True,
                user=UserItem.from_user(identity.user),
                active_account=(
                    AccountItem.from_account(identity.active_account)
                    if identity.active_account
                    else None
                ),
                owned_accounts=[AccountItem.from_account(a) for a in identity.roster.owned],
                shared_accounts=[
                    AccountItem.from_account(a) for a in identity.roster.shared
                ],
                pending_invitations=pending,
                new_notices=notices,
                bootstrap_suppressed=identity.bootstrap_suppressed,
                stale=stale,
            )
