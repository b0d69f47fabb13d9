"""Profile repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from famshare.domain.value import AccountId, UserId


class ProfileRepository(ABC):
    """Repository for the per-user preferred account."""

    @abstractmethod
    async def get_preferred_account_id(self, user_id: UserId) -> AccountId | None:
        """Read the stored preferred account.

        Args:
            user_id: The user

        Returns:
            Preferred account id, None if the user never picked one
        """
        pass

    @abstractmethod
    async def set_preferred_account_id(
        self, user_id: UserId, account_id: Optional[AccountId]
    ) -> None:
        """Store the preferred account, creating the profile if needed.

        Args:
            user_id: The user
            account_id: Account to prefer, None to clear
        """
        pass
