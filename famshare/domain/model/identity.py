"""Read models assembled by identity resolution.

None of these are persisted.
"""

from datetime import datetime
from typing import Optional

from famshare.domain.model.account import Account
from famshare.domain.model.common import DomainModel
from famshare.domain.model.invitation import Invitation
from famshare.domain.model.user import User
from famshare.domain.value import AccountId, InvitationId, SelectionSource


class AccountRoster(DomainModel):
    """Accounts a user belongs to, partitioned by role.

    Both lists are ordered by earliest membership first.
    """

    owned: tuple[Account, ...] = ()
    shared: tuple[Account, ...] = ()

    @property
    def all_accounts(self) -> tuple[Account, ...]:
        return self.owned + self.shared

    @property
    def is_empty(self) -> bool:
        return not self.owned and not self.shared

    def find(self, account_id: AccountId) -> Optional[Account]:
        return next((a for a in self.all_accounts if a.id == account_id), None)


class AccountSelection(DomainModel):
    """Outcome of the active account selection policy."""

    account: Optional[Account] = None
    source: SelectionSource = SelectionSource.NONE

    @property
    def should_persist(self) -> bool:
        """Whether the choice came from a fallback and should become the preference."""
        return self.source in (SelectionSource.OWNED, SelectionSource.SHARED)


class ResolvedIdentity(DomainModel):
    """Result of one identity resolution.

    user is None when nobody is signed in, which is a normal state.
    """

    user: Optional[User] = None
    active_account: Optional[Account] = None
    roster: AccountRoster = AccountRoster()
    pending_invitations: tuple[Invitation, ...] = ()
    bootstrap_suppressed: bool = False
    resolved_at: datetime

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


class PendingInvitationNotice(DomainModel):
    """Record that an invitation notice was surfaced in this session."""

    invitation_id: InvitationId
    notified_at: datetime
