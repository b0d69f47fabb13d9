"""Remove member use case."""

from uuid import UUID

import logfire
from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.domain.service import MembershipService
from famshare.domain.value import AccountId, UserId


class RemoveMemberRequest(BaseModel):
    """Remove member request."""

    account_id: UUID
    user_id: UUID


class RemoveMemberResponse(BaseModel):
    """Remove member response."""

    removed: bool


class RemoveMemberUseCase(BaseUseCase):
    """Use case for removing a user from an account (or leaving it)."""

    def __init__(
        self, session: ClientSession, membership_service: MembershipService
    ) -> None:
        self.session = session
        self.membership_service = membership_service

    async def execute(self, request: RemoveMemberRequest) -> RemoveMemberResponse:
        with logfire.span(
            "remove_member.execute",
            account_id=str(request.account_id),
            user_id=str(request.user_id),
        ):
            user = await self.session.require_user()
            removed = await self.membership_service.remove_member(
                AccountId(request.account_id), UserId(request.user_id), user.id
            )
            if removed:
                self.session.resolver.invalidate()
            return RemoveMemberResponse(removed=removed)
