"""List members use case."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel

from famshare.application.session import ClientSession
from famshare.application.usecase.base import BaseUseCase
from famshare.domain.service import MembershipService
from famshare.domain.value import AccountId, MemberRole


class ListMembersRequest(BaseModel):
    """List members request."""

    account_id: UUID


class MemberItem(BaseModel):
    """One member of an account."""

    user_id: UUID
    role: MemberRole
    joined_at: datetime
    is_you: bool


class ListMembersResponse(BaseModel):
    """List members response."""

    members: list[MemberItem]


class ListMembersUseCase(BaseUseCase):
    """Use case for showing who shares an account.

    Any member may see the list; admins use it to pick whom to remove.
    """

    def __init__(
        self, session: ClientSession, membership_service: MembershipService
    ) -> None:
        self.session = session
        self.membership_service = membership_service

    async def execute(self, request: ListMembersRequest) -> ListMembersResponse:
        user = await self.session.require_user()
        members = await self.membership_service.list_members(
            AccountId(request.account_id), user.id
        )
        return ListMembersResponse(
            members=[
                MemberItem(
                    user_id=m.user_id,
                    role=m.role,
                    joined_at=m.joined_at,
                    is_you=m.user_id == user.id,
                )
                for m in members
            ]
        )
