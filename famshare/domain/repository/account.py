"""Account repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from famshare.domain.model.account import Account
from famshare.domain.value import AccountId, InvitationId, UserId


class AccountRepository(ABC):
    """Repository for Account entity.

    Accounts are never deleted through this interface.
    """

    @abstractmethod
    async def find_by_id(self, account_id: AccountId) -> Account | None:
        """Find an account by ID.

        Args:
            account_id: The account's unique identifier

        Returns:
            The account if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_ids(self, account_ids: list[AccountId]) -> list[Account]:
        """Find several accounts at once.

        Missing ids are silently skipped.

        Args:
            account_ids: Account identifiers

        Returns:
            Accounts that exist, in no particular order
        """
        pass

    @abstractmethod
    async def create_default_for_owner(
        self, account: Account, owner_id: UserId
    ) -> tuple[Account, bool]:
        """Insert the auto-created account for a user unless one exists.

        The store guarantees at most one row per owner_id, so concurrent
        callers all get the same account back.

        Args:
            account: Account to insert if the owner has none yet
            owner_id: User the account is created for

        Returns:
            Tuple of (stored account, whether this call created it)
        """
        pass

    @abstractmethod
    async def set_pending_share(
        self,
        account_id: AccountId,
        target: str,
        invitation_id: InvitationId,
    ) -> None:
        """Point the account at its latest open invitation.

        Args:
            account_id: Account being shared
            target: Normalized invitation target
            invitation_id: Open invitation
        """
        pass

    @abstractmethod
    async def clear_pending_share(
        self,
        account_id: AccountId,
        invitation_id: Optional[InvitationId] = None,
    ) -> None:
        """Clear the pending share pointer.

        Args:
            account_id: Account to update
            invitation_id: Only clear when the pointer references this
                invitation. None clears unconditionally.
        """
        pass
