"""PostgreSQL implementation of Account repository."""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from famshare.domain.model import Account
from famshare.domain.repository import AccountRepository
from famshare.domain.value import AccountId, InvitationId, UserId
from famshare.persistence.database import transaction
from famshare.persistence.mappers import account_to_dict, row_to_account
from famshare.persistence.tables import accounts_table


class PostgresAccountRepository(AccountRepository):
    """PostgreSQL implementation of AccountRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory; every call runs
                in its own short transaction
        """
        self.session_factory = session_factory

    async def find_by_id(self, account_id: AccountId) -> Optional[Account]:
        """Find an account by ID.

        Args:
            account_id: Account ID to look up

        Returns:
            Account if found, None otherwise
        """
        stmt = select(accounts_table).where(accounts_table.c.id == account_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_account(dict(row)) if row else None

    async def find_by_ids(self, account_ids: list[AccountId]) -> list[Account]:
        """Find accounts by IDs, skipping missing ones."""
        if not account_ids:
            return []
        stmt = select(accounts_table).where(accounts_table.c.id.in_(account_ids))
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_account(dict(row)) for row in rows]

    async def create_default_for_owner(
        self, account: Account, owner_id: UserId
    ) -> tuple[Account, bool]:
        """Insert the owner's default account unless one exists.

        Relies on the unique bootstrapped_for column: a concurrent insert for
        the same owner waits for the first to commit and then does nothing.
        """
        values = {**account_to_dict(account), "bootstrapped_for": owner_id}
        stmt = (
            pg_insert(accounts_table)
            .values(**values)
            .on_conflict_do_nothing(index_elements=["bootstrapped_for"])
            .returning(accounts_table)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
            if row:
                return row_to_account(dict(row)), True

            existing = await session.execute(
                select(accounts_table).where(
                    accounts_table.c.bootstrapped_for == owner_id
                )
            )
            row = existing.mappings().one()
        return row_to_account(dict(row)), False

    async def set_pending_share(
        self,
        account_id: AccountId,
        target: str,
        invitation_id: InvitationId,
    ) -> None:
        """Point the account at its latest open invitation."""
        stmt = (
            update(accounts_table)
            .where(accounts_table.c.id == account_id)
            .values(pending_share_target=target, pending_invitation_id=invitation_id)
        )
        async with transaction(self.session_factory) as session:
            await session.execute(stmt)

    async def clear_pending_share(
        self,
        account_id: AccountId,
        invitation_id: Optional[InvitationId] = None,
    ) -> None:
        """Clear the pending share pointer, optionally only if it matches."""
        stmt = update(accounts_table).where(accounts_table.c.id == account_id)
        if invitation_id is not None:
            stmt = stmt.where(accounts_table.c.pending_invitation_id == invitation_id)
        stmt = stmt.values(pending_share_target=None, pending_invitation_id=None)
        async with transaction(self.session_factory) as session:
            await session.execute(stmt)
