"""PostgreSQL repository implementations."""

from famshare.persistence.repository.account import PostgresAccountRepository
from famshare.persistence.repository.invitation import PostgresInvitationRepository
from famshare.persistence.repository.membership import PostgresMembershipRepository
from famshare.persistence.repository.profile import PostgresProfileRepository

__all__ = [
    "PostgresAccountRepository",
    "PostgresInvitationRepository",
    "PostgresMembershipRepository",
    "PostgresProfileRepository",
]
