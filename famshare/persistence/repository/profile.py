"""PostgreSQL implementation of Profile repository."""

from typing import Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from famshare.domain.repository import ProfileRepository
from famshare.domain.value import AccountId, UserId
from famshare.persistence.database import transaction
from famshare.persistence.tables import profiles_table


class PostgresProfileRepository(ProfileRepository):
    """PostgreSQL implementation of ProfileRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get_preferred_account_id(self, user_id: UserId) -> Optional[AccountId]:
        """Read the stored preferred account."""
        stmt = select(profiles_table.c.preferred_account_id).where(
            profiles_table.c.user_id == user_id
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            value = result.scalar_one_or_none()
        if value is None:
            return None
        return AccountId(UUID(value) if isinstance(value, str) else value)

    async def set_preferred_account_id(
        self, user_id: UserId, account_id: Optional[AccountId]
    ) -> None:
        """Upsert the profile row with the new preference."""
        stmt = (
            pg_insert(profiles_table)
            .values(user_id=user_id, preferred_account_id=account_id)
            .on_conflict_do_update(
                index_elements=["user_id"],
                set_={"preferred_account_id": account_id, "updated_at": func.now()},
            )
        )
        async with transaction(self.session_factory) as session:
            await session.execute(stmt)
