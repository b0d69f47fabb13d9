"""PostgreSQL implementation of Membership repository."""

from typing import Optional

from sqlalchemy import and_, delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from famshare.domain.model import Membership
from famshare.domain.repository import MembershipRepository
from famshare.domain.value import AccountId, UserId
from famshare.persistence.database import transaction
from famshare.persistence.mappers import membership_to_dict, row_to_membership
from famshare.persistence.tables import account_members_table


class PostgresMembershipRepository(MembershipRepository):
    """PostgreSQL implementation of MembershipRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def list_for_user(self, user_id: UserId) -> list[Membership]:
        """List all memberships of a user."""
        stmt = select(account_members_table).where(
            account_members_table.c.user_id == user_id
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_membership(dict(row)) for row in rows]

    async def list_for_account(self, account_id: AccountId) -> list[Membership]:
        """List all members of an account."""
        stmt = select(account_members_table).where(
            account_members_table.c.account_id == account_id
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_membership(dict(row)) for row in rows]

    async def find(
        self, account_id: AccountId, user_id: UserId
    ) -> Optional[Membership]:
        """Find one membership."""
        stmt = select(account_members_table).where(
            and_(
                account_members_table.c.account_id == account_id,
                account_members_table.c.user_id == user_id,
            )
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_membership(dict(row)) if row else None

    async def add(self, membership: Membership) -> tuple[Membership, bool]:
        """Insert a membership unless the (account, user) pair exists.

        Uses ON CONFLICT DO NOTHING against the unique constraint so a
        repeated or concurrent call never fails.
        """
        stmt = (
            pg_insert(account_members_table)
            .values(**membership_to_dict(membership))
            .on_conflict_do_nothing(constraint="uq_account_members_account_user")
            .returning(account_members_table)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            if row:
                return row_to_membership(dict(row)), True

            existing = await session.execute(
                select(account_members_table).where(
                    and_(
                        account_members_table.c.account_id == membership.account_id,
                        account_members_table.c.user_id == membership.user_id,
                    )
                )
            )
            row = existing.mappings().first()
        return (row_to_membership(dict(row)) if row else membership), False

    async def remove(self, account_id: AccountId, user_id: UserId) -> bool:
        """Delete a membership."""
        stmt = delete(account_members_table).where(
            and_(
                account_members_table.c.account_id == account_id,
                account_members_table.c.user_id == user_id,
            )
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
        return result.rowcount > 0
