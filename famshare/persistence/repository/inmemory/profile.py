"""In-memory profile repository for testing."""

from typing import Optional

from famshare.domain.repository import ProfileRepository
from famshare.domain.value import AccountId, UserId


class InMemoryProfileRepository(ProfileRepository):
    """In-memory implementation of ProfileRepository for testing."""

    def __init__(self) -> None:
        self._preferences: dict[UserId, Optional[AccountId]] = {}

    async def get_preferred_account_id(self, user_id: UserId) -> Optional[AccountId]:
        return self._preferences.get(user_id)

    async def set_preferred_account_id(
        self, user_id: UserId, account_id: Optional[AccountId]
    ) -> None:
        self._preferences[user_id] = account_id
