"""Persistence infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide
import logfire
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from famshare.config import Settings
from famshare.domain.repository import (
    AccountRepository,
    InvitationRepository,
    MembershipRepository,
    ProfileRepository,
)
from famshare.persistence.database import create_engine, create_session_factory
from famshare.persistence.repository import (
    PostgresAccountRepository,
    PostgresInvitationRepository,
    PostgresMembershipRepository,
    PostgresProfileRepository,
)
from famshare.util.di.base import ProviderBase
from famshare.util.observability import instrument_sqlalchemy


class PersistenceProvider(ProviderBase):
    """Persistence component base."""

    __mock_component__ = "persistence"


class ProdPersistenceProvider(PersistenceProvider):
    """Production persistence provider using PostgreSQL.

    Repositories are APP-scoped and run every call in its own transaction,
    so there is no request-scoped session to commit.
    """

    __is_mock__ = False

    scope = Scope.APP

    @provide(scope=Scope.APP)
    async def get_engine(self, settings: Settings) -> AsyncIterator[AsyncEngine]:
        """Provide database engine, disposed when the container closes."""
        engine = create_engine(settings)
        # Instrument SQLAlchemy for observability
        instrument_sqlalchemy(engine)
        yield engine
        await engine.dispose()
        logfire.info("Database engine disposed")

    @provide(scope=Scope.APP)
    def get_session_factory(
        self, engine: AsyncEngine
    ) -> async_sessionmaker[AsyncSession]:
        """Provide session factory."""
        return create_session_factory(engine)

    @provide(scope=Scope.APP)
    def get_account_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AccountRepository:
        """Provide Account repository."""
        return PostgresAccountRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_membership_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> MembershipRepository:
        """Provide Membership repository."""
        return PostgresMembershipRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_invitation_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> InvitationRepository:
        """Provide Invitation repository."""
        return PostgresInvitationRepository(session_factory)

    @provide(scope=Scope.APP)
    def get_profile_repository(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> ProfileRepository:
        """Provide Profile repository."""
        return PostgresProfileRepository(session_factory)
