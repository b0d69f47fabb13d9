"""Membership directory domain service."""

from typing import Optional
from uuid import uuid4

import logfire

from famshare.domain.error import (
    BusinessRuleViolationError,
    NotAuthorizedError,
    NotFoundError,
)
from famshare.domain.model import Account, AccountRoster, AccountSelection, Membership
from famshare.domain.repository import (
    AccountRepository,
    MembershipRepository,
    ProfileRepository,
)
from famshare.domain.value import AccountId, MemberRole, SelectionSource, UserId

from .base import Service


class MembershipService(Service):
    """Domain service answering "which accounts does this user belong to".

    Also owns the active account selection policy and the first-login
    bootstrap of a personal account.
    """

    def __init__(
        self,
        account_repository: AccountRepository,
        membership_repository: MembershipRepository,
        profile_repository: ProfileRepository,
    ) -> None:
        """Initialize membership service.

        Args:
            account_repository: Account repository
            membership_repository: Membership repository
            profile_repository: Profile repository
        """
        self.account_repository = account_repository
        self.membership_repository = membership_repository
        self.profile_repository = profile_repository

    async def list_memberships(self, user_id: UserId) -> AccountRoster:
        """List the accounts a user belongs to, split by role.

        Memberships whose account has disappeared are skipped.

        Args:
            user_id: The user

        Returns:
            Roster with owned (admin) and shared (member) accounts, each
            ordered by earliest join first

        Raises:
            StoreUnavailableError: If the store cannot be reached
        """
        with logfire.span("membership_service.list_memberships", user_id=str(user_id)):
            memberships = await self.membership_repository.list_for_user(user_id)
            if not memberships:
                return AccountRoster()

            accounts = await self.account_repository.find_by_ids(
                [m.account_id for m in memberships]
            )
            accounts_by_id = {account.id: account for account in accounts}

            ordered = sorted(memberships, key=lambda m: (m.joined_at, str(m.account_id)))
            owned = []
            shared = []
            for membership in ordered:
                account = accounts_by_id.get(membership.account_id)
                if account is None:
                    logfire.warn(
                        "Membership references missing account",
                        user_id=str(user_id),
                        account_id=str(membership.account_id),
                    )
                    continue
                if membership.is_admin:
                    owned.append(account)
                else:
                    shared.append(account)

            return AccountRoster(owned=tuple(owned), shared=tuple(shared))

    @staticmethod
    def select_active_account(
        user_id: UserId,
        roster: AccountRoster,
        stored_preference: Optional[AccountId] = None,
    ) -> AccountSelection:
        """Pick the active account.

        Priority: stored preference (if still a member), first owned account,
        first shared account. An empty selection means the caller has to
        bootstrap an account.

        Args:
            user_id: The user (for logging only)
            roster: The user's roster
            stored_preference: Previously chosen account, if any

        Returns:
            The selected account and which rule chose it
        """
        if stored_preference is not None:
            preferred = roster.find(stored_preference)
            if preferred is not None:
                return AccountSelection(
                    account=preferred, source=SelectionSource.PREFERENCE
                )
            logfire.info(
                "Stored account preference no longer valid",
                user_id=str(user_id),
                account_id=str(stored_preference),
            )

        if roster.owned:
            return AccountSelection(account=roster.owned[0], source=SelectionSource.OWNED)
        if roster.shared:
            return AccountSelection(
                account=roster.shared[0], source=SelectionSource.SHARED
            )
        return AccountSelection()

    async def bootstrap_default_account(
        self, user_id: UserId, display_name: str
    ) -> Account:
        """Create the personal account of a user who has none.

        Safe to call concurrently for the same user: the roster is re-read
        first, and the insert is conditional on the store's one-account-per-
        owner constraint, so every caller ends up with the same account.

        Args:
            user_id: The user
            display_name: Name used to label the account

        Returns:
            The user's account (newly created or already existing)
        """
        with logfire.span(
            "membership_service.bootstrap_default_account", user_id=str(user_id)
        ):
            roster = await self.list_memberships(user_id)
            if not roster.is_empty:
                logfire.info(
                    "Bootstrap skipped, user already has an account",
                    user_id=str(user_id),
                )
                return roster.all_accounts[0]

            candidate = Account(
                id=AccountId(uuid4()),
                name=f"{display_name}'s Account",
                bootstrapped_for=user_id,
            )
            account, created = await self.account_repository.create_default_for_owner(
                candidate, user_id
            )
            await self.membership_repository.add(
                Membership(account_id=account.id, user_id=user_id, role=MemberRole.ADMIN)
            )

            if created:
                logfire.info(
                    "Default account created",
                    user_id=str(user_id),
                    account_id=str(account.id),
                )
            else:
                logfire.info(
                    "Default account already existed",
                    user_id=str(user_id),
                    account_id=str(account.id),
                )
            return account

    async def get_preferred_account_id(self, user_id: UserId) -> AccountId | None:
        """Read the user's stored account preference."""
        return await self.profile_repository.get_preferred_account_id(user_id)

    async def set_preferred_account(
        self, user_id: UserId, account_id: Optional[AccountId]
    ) -> None:
        """Persist the user's account preference."""
        with logfire.span(
            "membership_service.set_preferred_account",
            user_id=str(user_id),
            account_id=str(account_id) if account_id else None,
        ):
            await self.profile_repository.set_preferred_account_id(user_id, account_id)

    async def require_membership(
        self, account_id: AccountId, user_id: UserId
    ) -> tuple[Account, Membership]:
        """Load an account the user must belong to.

        Raises:
            NotAuthorizedError: If the user is not a member
            NotFoundError: If the account does not exist
        """
        membership = await self.membership_repository.find(account_id, user_id)
        if membership is None:
            raise NotAuthorizedError("account", str(account_id), str(user_id))

        account = await self.account_repository.find_by_id(account_id)
        if account is None:
            raise NotFoundError("Account", str(account_id))
        return account, membership

    async def require_admin(
        self, account_id: AccountId, user_id: UserId
    ) -> tuple[Account, Membership]:
        """Load an account the user must administer.

        Raises:
            NotAuthorizedError: If the user is not an admin of the account
            NotFoundError: If the account does not exist
        """
        account, membership = await self.require_membership(account_id, user_id)
        if not membership.is_admin:
            raise NotAuthorizedError("account", str(account_id), str(user_id))
        return account, membership

    async def list_members(
        self, account_id: AccountId, requesting_user_id: UserId
    ) -> list[Membership]:
        """List an account's members, admins first then by join time.

        Raises:
            NotAuthorizedError: If the requester is not a member
            NotFoundError: If the account does not exist
        """
        with logfire.span(
            "membership_service.list_members",
            account_id=str(account_id),
            user_id=str(requesting_user_id),
        ):
            await self.require_membership(account_id, requesting_user_id)
            memberships = await self.membership_repository.list_for_account(account_id)
            return sorted(memberships, key=lambda m: (not m.is_admin, m.joined_at))

    async def remove_member(
        self,
        account_id: AccountId,
        user_id: UserId,
        requesting_user_id: UserId,
    ) -> bool:
        """Remove a user from an account.

        Admins may remove anyone; members may only remove themselves. The last
        admin of an account cannot be removed.

        Args:
            account_id: The account
            user_id: User to remove
            requesting_user_id: User performing the removal

        Returns:
            True if a membership was removed, False if there was none

        Raises:
            NotAuthorizedError: If the requester may not remove this user
            BusinessRuleViolationError: If the user is the last admin
        """
        with logfire.span(
            "membership_service.remove_member",
            account_id=str(account_id),
            user_id=str(user_id),
            requesting_user_id=str(requesting_user_id),
        ):
            if user_id != requesting_user_id:
                await self.require_admin(account_id, requesting_user_id)

            members = await self.membership_repository.list_for_account(account_id)
            target = next((m for m in members if m.user_id == user_id), None)
            if target is None:
                return False

            if target.is_admin and sum(1 for m in members if m.is_admin) == 1:
                logfire.warn(
                    "Refusing to remove last admin",
                    account_id=str(account_id),
                    user_id=str(user_id),
                )
                raise BusinessRuleViolationError(
                    f"Cannot remove the last admin of account {account_id}"
                )

            removed = await self.membership_repository.remove(account_id, user_id)
            if removed:
                preferred = await self.profile_repository.get_preferred_account_id(
                    user_id
                )
                if preferred == account_id:
                    await self.profile_repository.set_preferred_account_id(user_id, None)
                logfire.info(
                    "Member removed", account_id=str(account_id), user_id=str(user_id)
                )
            return removed
