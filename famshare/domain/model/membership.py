"""Membership entity linking a user to an account."""

from datetime import datetime

from pydantic import Field

from famshare.domain.model.common import DomainModel, utc_now
from famshare.domain.value import AccountId, MemberRole, UserId


class Membership(DomainModel):
    """Role-carrying link between a user and an account.

    The (account_id, user_id) pair is unique.
    """

    account_id: AccountId
    user_id: UserId
    role: MemberRole
    joined_at: datetime = Field(default_factory=utc_now)

    @property
    def is_admin(self) -> bool:
        return self.role == MemberRole.ADMIN
