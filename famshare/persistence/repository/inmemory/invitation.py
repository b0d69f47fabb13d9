"""In-memory invitation repository for testing."""

from datetime import datetime
from typing import Optional

from famshare.domain.model import Invitation
from famshare.domain.repository import InvitationRepository
from famshare.domain.value import AccountId, InvitationId, InvitationTarget


def _is_open(invitation: Invitation, now: datetime) -> bool:
    return invitation.accepted_at is None and invitation.expires_at > now


class InMemoryInvitationRepository(InvitationRepository):
    """In-memory implementation of InvitationRepository for testing."""

    def __init__(self) -> None:
        self._invitations: dict[InvitationId, Invitation] = {}

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID."""
        return self._invitations.get(invitation_id)

    async def find_pending_for_account_target(
        self, account_id: AccountId, target: InvitationTarget, now: datetime
    ) -> Optional[Invitation]:
        matches = [
            i
            for i in self._invitations.values()
            if i.account_id == account_id and i.target == target and _is_open(i, now)
        ]
        if not matches:
            return None
        return max(matches, key=lambda i: i.created_at)

    async def list_pending_for_target(
        self, target: InvitationTarget, now: datetime
    ) -> list[Invitation]:
        matches = [
            i
            for i in self._invitations.values()
            if i.target == target and _is_open(i, now)
        ]
        return sorted(matches, key=lambda i: i.created_at, reverse=True)

    async def list_for_account(self, account_id: AccountId) -> list[Invitation]:
        matches = [i for i in self._invitations.values() if i.account_id == account_id]
        return sorted(matches, key=lambda i: i.created_at, reverse=True)

    async def list_pending_page(
        self, now: datetime, after: Optional[InvitationId], limit: int
    ) -> list[Invitation]:
        matches = sorted(
            (
                i
                for i in self._invitations.values()
                if _is_open(i, now) and (after is None or i.id > after)
            ),
            key=lambda i: i.id,
        )
        return matches[:limit]

    async def insert(self, invitation: Invitation) -> Invitation:
        """Insert unless an unaccepted invitation already holds the target."""
        for existing in list(self._invitations.values()):
            if (
                existing.accepted_at is not None
                or existing.account_id != invitation.account_id
                or existing.target != invitation.target
            ):
                continue
            if existing.expires_at > invitation.created_at:
                return existing
            del self._invitations[existing.id]
        self._invitations[invitation.id] = invitation
        return invitation

    async def mark_accepted(
        self, invitation_id: InvitationId, accepted_at: datetime
    ) -> bool:
        """Set accepted_at only while it is still unset."""
        invitation = self._invitations.get(invitation_id)
        if invitation is None or invitation.accepted_at is not None:
            return False
        self._invitations[invitation_id] = invitation.model_copy(
            update={"accepted_at": accepted_at}
        )
        return True

    async def delete_unaccepted(
        self,
        invitation_id: InvitationId,
        account_id: Optional[AccountId] = None,
    ) -> bool:
        """Delete an invitation only while it is unaccepted."""
        invitation = self._invitations.get(invitation_id)
        if invitation is None or invitation.accepted_at is not None:
            return False
        if account_id is not None and invitation.account_id != account_id:
            return False
        del self._invitations[invitation_id]
        return True
