"""Invitation repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from famshare.domain.model.invitation import Invitation
from famshare.domain.value import AccountId, InvitationId, InvitationTarget


class InvitationRepository(ABC):
    """Repository for Invitation entity.

    accepted_at only ever transitions from NULL to a timestamp, and every
    state-changing call is conditional on it still being NULL. That is what
    serializes concurrent accept and revoke across processes.
    """

    @abstractmethod
    async def find_by_id(self, invitation_id: InvitationId) -> Invitation | None:
        """Find an invitation by ID.

        Args:
            invitation_id: The invitation's unique identifier

        Returns:
            The invitation if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_pending_for_account_target(
        self, account_id: AccountId, target: InvitationTarget, now: datetime
    ) -> Invitation | None:
        """Find an unaccepted, unexpired invitation for an account and target.

        Args:
            account_id: Account the invitation is for
            target: Normalized target
            now: Reference time for expiry

        Returns:
            The most recent matching invitation, None if there is none
        """
        pass

    @abstractmethod
    async def list_pending_for_target(
        self, target: InvitationTarget, now: datetime
    ) -> list[Invitation]:
        """List unaccepted, unexpired invitations addressed to a target.

        Args:
            target: Normalized target
            now: Reference time for expiry

        Returns:
            Invitations, newest first
        """
        pass

    @abstractmethod
    async def list_for_account(self, account_id: AccountId) -> list[Invitation]:
        """List all invitations of an account regardless of status.

        Args:
            account_id: The account

        Returns:
            Invitations, newest first
        """
        pass

    @abstractmethod
    async def list_pending_page(
        self, now: datetime, after: Optional[InvitationId], limit: int
    ) -> list[Invitation]:
        """Page through unaccepted, unexpired invitations by id.

        Keyset pagination keeps the walk stable while rows are deleted.

        Args:
            now: Reference time for expiry
            after: Last id of the previous page, None for the first page
            limit: Maximum rows to return

        Returns:
            Invitations ordered by id
        """
        pass

    @abstractmethod
    async def insert(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation unless one is already open for its target.

        At most one unaccepted invitation exists per account and target.
        An expired, unaccepted predecessor (expired as of the new
        invitation's created_at) is deleted first so it can be replaced.

        Args:
            invitation: Invitation to store

        Returns:
            The stored invitation, or the open one that was already there
            (compare ids to tell them apart)
        """
        pass

    @abstractmethod
    async def mark_accepted(
        self, invitation_id: InvitationId, accepted_at: datetime
    ) -> bool:
        """Set accepted_at if it is still NULL.

        Args:
            invitation_id: Invitation to accept
            accepted_at: Acceptance time

        Returns:
            True if this call accepted the invitation
        """
        pass

    @abstractmethod
    async def delete_unaccepted(
        self,
        invitation_id: InvitationId,
        account_id: Optional[AccountId] = None,
    ) -> bool:
        """Delete an invitation if it has not been accepted.

        Args:
            invitation_id: Invitation to delete
            account_id: When given, only delete if it belongs to this account

        Returns:
            True if a row was deleted
        """
        pass
