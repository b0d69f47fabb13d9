"""Membership repository interface."""

from abc import ABC, abstractmethod

from famshare.domain.model.membership import Membership
from famshare.domain.value import AccountId, UserId


class MembershipRepository(ABC):
    """Repository for Membership entity.

    (account_id, user_id) is unique in the store.
    """

    @abstractmethod
    async def list_for_user(self, user_id: UserId) -> list[Membership]:
        """List all memberships of a user.

        Args:
            user_id: The user

        Returns:
            Memberships, in no particular order
        """
        pass

    @abstractmethod
    async def list_for_account(self, account_id: AccountId) -> list[Membership]:
        """List all members of an account.

        Args:
            account_id: The account

        Returns:
            Memberships, in no particular order
        """
        pass

    @abstractmethod
    async def find(self, account_id: AccountId, user_id: UserId) -> Membership | None:
        """Find one membership.

        Args:
            account_id: The account
            user_id: The user

        Returns:
            The membership if the user belongs to the account, None otherwise
        """
        pass

    @abstractmethod
    async def add(self, membership: Membership) -> tuple[Membership, bool]:
        """Insert a membership unless the pair already exists.

        Never raises on a duplicate pair; the existing row wins.

        Args:
            membership: Membership to insert

        Returns:
            Tuple of (stored membership, whether this call inserted it)
        """
        pass

    @abstractmethod
    async def remove(self, account_id: AccountId, user_id: UserId) -> bool:
        """Delete a membership.

        Args:
            account_id: The account
            user_id: The user

        Returns:
            True if a row was deleted
        """
        pass
