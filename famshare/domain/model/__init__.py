"""Domain model entities for famshare."""

from famshare.domain.model.account import Account
from famshare.domain.model.identity import (
    AccountRoster,
    AccountSelection,
    PendingInvitationNotice,
    ResolvedIdentity,
)
from famshare.domain.model.invitation import Invitation
from famshare.domain.model.membership import Membership
from famshare.domain.model.user import User

__all__ = [
    "Account",
    "AccountRoster",
    "AccountSelection",
    "Invitation",
    "Membership",
    "PendingInvitationNotice",
    "ResolvedIdentity",
    "User",
]
