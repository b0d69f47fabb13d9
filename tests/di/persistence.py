"""Mock persistence providers for testing."""

from dishka import Scope, provide

from famshare.domain.repository import (
    AccountRepository,
    InvitationRepository,
    MembershipRepository,
    ProfileRepository,
)
from famshare.persistence.repository.inmemory import (
    InMemoryAccountRepository,
    InMemoryInvitationRepository,
    InMemoryMembershipRepository,
    InMemoryProfileRepository,
)
from famshare.util.di.infrastructure.persistence import PersistenceProvider


class MockPersistenceProvider(PersistenceProvider):
    """Mock persistence provider using in-memory repositories.

    APP scope, like the real repositories; each test builds its own
    container, so each test gets fresh repositories. The concrete in-memory
    types are provided too, so tests can reach their helpers.
    """

    __is_mock__ = True

    scope = Scope.APP

    @provide
    def get_inmemory_account_repository(self) -> InMemoryAccountRepository:
        return InMemoryAccountRepository()

    @provide
    def get_account_repository(
        self, repository: InMemoryAccountRepository
    ) -> AccountRepository:
        """Provide in-memory account repository."""
        return repository

    @provide
    def get_inmemory_invitation_repository(self) -> InMemoryInvitationRepository:
        return InMemoryInvitationRepository()

    @provide
    def get_invitation_repository(
        self, repository: InMemoryInvitationRepository
    ) -> InvitationRepository:
        """Provide in-memory invitation repository."""
        return repository

    @provide
    def get_membership_repository(self) -> MembershipRepository:
        """Provide in-memory membership repository."""
        return InMemoryMembershipRepository()

    @provide
    def get_profile_repository(self) -> ProfileRepository:
        """Provide in-memory profile repository."""
        return InMemoryProfileRepository()
