"""In-memory membership repository for testing."""

from typing import Optional

from famshare.domain.model import Membership
from famshare.domain.repository import MembershipRepository
from famshare.domain.value import AccountId, UserId


class InMemoryMembershipRepository(MembershipRepository):
    """In-memory implementation of MembershipRepository for testing."""

    def __init__(self) -> None:
        self._memberships: dict[tuple[AccountId, UserId], Membership] = {}

    async def list_for_user(self, user_id: UserId) -> list[Membership]:
        return [m for m in self._memberships.values() if m.user_id == user_id]

    async def list_for_account(self, account_id: AccountId) -> list[Membership]:
        return [m for m in self._memberships.values() if m.account_id == account_id]

    async def find(
        self, account_id: AccountId, user_id: UserId
    ) -> Optional[Membership]:
        return self._memberships.get((account_id, user_id))

    async def add(self, membership: Membership) -> tuple[Membership, bool]:
        """Insert unless the (account, user) pair exists."""
        key = (membership.account_id, membership.user_id)
        existing = self._memberships.get(key)
        if existing is not None:
            return existing, False
        self._memberships[key] = membership
        return membership, True

    async def remove(self, account_id: AccountId, user_id: UserId) -> bool:
        return self._memberships.pop((account_id, user_id), None) is not None
