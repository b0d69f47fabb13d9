"""Invitation entity.

An invitation is a time-boxed offer for one email address or phone number
to join one account as a member.
"""

from datetime import datetime
from typing import Optional

from famshare.domain.model.common import DomainModel
from famshare.domain.value import (
    AccountId,
    InvitationId,
    InvitationStatus,
    InvitationTarget,
    UserId,
)


class Invitation(DomainModel):
    """Invitation entity.

    Status is never stored; it is derived from the timestamps by status():

    - accepted_at set              -> ACCEPTED
    - expires_at reached           -> EXPIRED
    - referenced account missing   -> ORPHANED
    - otherwise                    -> PENDING

    Revoked invitations are deleted from the store.
    """

    id: InvitationId
    account_id: AccountId
    inviter_id: UserId
    target: InvitationTarget
    created_at: datetime
    expires_at: datetime
    accepted_at: Optional[datetime] = None

    def status(self, now: datetime, account_exists: bool = True) -> InvitationStatus:
        """Compute the invitation status at a point in time.

        Args:
            now: Reference time (timezone-aware)
            account_exists: Whether the referenced account is still present

        Returns:
            Derived invitation status
        """
        if self.accepted_at is not None:
            return InvitationStatus.ACCEPTED
        if now >= self.expires_at:
            return InvitationStatus.EXPIRED
        if not account_exists:
            return InvitationStatus.ORPHANED
        return InvitationStatus.PENDING

    def is_addressed_to(self, targets: list[InvitationTarget]) -> bool:
        return self.target in targets
