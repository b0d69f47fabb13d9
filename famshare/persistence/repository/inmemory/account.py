"""In-memory account repository for testing."""

from typing import Optional

from famshare.domain.model import Account
from famshare.domain.repository import AccountRepository
from famshare.domain.value import AccountId, InvitationId, UserId


class InMemoryAccountRepository(AccountRepository):
    """In-memory implementation of AccountRepository for testing."""

    def __init__(self) -> None:
        self._accounts: dict[AccountId, Account] = {}

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID."""
        return self._accounts.get(account_id)

    async def find_by_ids(self, account_ids: list[AccountId]) -> list[Account]:
        """Find accounts by IDs, skipping missing ones."""
        return [self._accounts[i] for i in account_ids if i in self._accounts]

    async def create_default_for_owner(
        self, account: Account, owner_id: UserId
    ) -> tuple[Account, bool]:
        """Insert unless an account was already bootstrapped for this owner."""
        for existing in self._accounts.values():
            if existing.bootstrapped_for == owner_id:
                return existing, False

        stored = account.model_copy(update={"bootstrapped_for": owner_id})
        self._accounts[stored.id] = stored
        return stored, True

    async def set_pending_share(
        self,
        account_id: AccountId,
        target: str,
        invitation_id: InvitationId,
    ) -> None:
        account = self._accounts.get(account_id)
        if account:
            self._accounts[account_id] = account.model_copy(
                update={
                    "pending_share_target": target,
                    "pending_invitation_id": invitation_id,
                }
            )

    async def clear_pending_share(
        self,
        account_id: AccountId,
        invitation_id: Optional[InvitationId] = None,
    ) -> None:
        account = self._accounts.get(account_id)
        if account is None:
            return
        if invitation_id is not None and account.pending_invitation_id != invitation_id:
            return
        self._accounts[account_id] = account.model_copy(
            update={"pending_share_target": None, "pending_invitation_id": None}
        )

    # Test helpers

    async def save(self, account: Account) -> Account:
        """Store an account directly."""
        self._accounts[account.id] = account
        return account

    def remove(self, account_id: AccountId) -> None:
        """Delete an account the way an external process would."""
        self._accounts.pop(account_id, None)

    def count(self) -> int:
        return len(self._accounts)
