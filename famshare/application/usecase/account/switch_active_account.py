"""Switch active account use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.application.usecase.common import AccountItem
from famshare.domain.error import RetryableError
from famshare.domain.service import MembershipService
from famshare.domain.value import AccountId


class SwitchActiveAccountRequest(BaseModel):
    """Switch active account request."""

    account_id: UUID


class SwitchActiveAccountResponse(BaseModel):
    """Switch active account response."""

    account: AccountItem
    changed: bool


class SwitchActiveAccountUseCase(BaseUseCase):
    """Use case for making another of the user's accounts the active one."""

    def __init__(
        self, session: ClientSession, membership_service: MembershipService
    ) -> None:
        """Initialize switch active account use case.

        Args:
            session: Current client session
            membership_service: Membership domain service
        """
        self.session = session
        self.membership_service = membership_service

    async def execute(
        self, request: SwitchActiveAccountRequest
    ) -> SwitchActiveAccountResponse:
        """Switch the active account.

        Membership is checked against the store, not the cached roster.

        Args:
            request: Account to switch to

        Returns:
            The now active account and whether it differs from the previous one

        Raises:
            NotAuthenticatedError: If nobody is signed in
            NotAuthorizedError: If the user is not a member of the account
            NotFoundError: If the account does not exist
        """
        account_id = AccountId(request.account_id)
        with logfire.span("switch_active_account.execute", account_id=str(account_id)):
            user = await self.session.require_user()
            account, _ = await self.membership_service.require_membership(
                account_id, user.id
            )

            previous = self.session.resolver.cached
            changed = (
                previous is None
                or previous.active_account is None
                or previous.active_account.id != account_id
            )

            await self.membership_service.set_preferred_account(user.id, account_id)
            self.session.resolver.invalidate()
            try:
                identity = await self.session.resolver.resolve(force_refresh=True)
                if identity.active_account is not None:
                    account = identity.active_account
            except RetryableError as e:
                logfire.warn("Refresh after account switch failed", error=str(e))

            logfire.info(
                "Active account switched",
                user_id=str(user.id),
                account_id=str(account_id),
                changed=changed,
            )
            return SwitchActiveAccountResponse(
                account=AccountItem.from_account(account), changed=changed
            )
