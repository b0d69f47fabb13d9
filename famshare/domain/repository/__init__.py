"""Repository interfaces for famshare domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from famshare.domain.repository.account import AccountRepository
from famshare.domain.repository.invitation import InvitationRepository
from famshare.domain.repository.membership import MembershipRepository
from famshare.domain.repository.profile import ProfileRepository

__all__ = [
    "AccountRepository",
    "InvitationRepository",
    "MembershipRepository",
    "ProfileRepository",
]
