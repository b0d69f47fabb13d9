"""PostgreSQL implementation of Invitation repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import and_, delete, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from famshare.domain.model import Invitation
from famshare.domain.repository import InvitationRepository
from famshare.domain.value import AccountId, InvitationId, InvitationTarget
from famshare.persistence.database import transaction
from famshare.persistence.mappers import invitation_to_dict, row_to_invitation
from famshare.persistence.tables import invitations_table


def _open_at(now: datetime):
    """Filter for invitations that are neither accepted nor expired."""
    return and_(
        invitations_table.c.accepted_at.is_(None),
        invitations_table.c.expires_at > now,
    )


def _addressed_to(target: InvitationTarget):
    return and_(
        invitations_table.c.target_kind == target.kind.value,
        invitations_table.c.target == target.value,
    )


class PostgresInvitationRepository(InvitationRepository):
    """PostgreSQL implementation of InvitationRepository."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        """Initialize repository with a session factory.

        Args:
            session_factory: SQLAlchemy async session factory
        """
        self.session_factory = session_factory

    async def find_by_id(self, invitation_id: InvitationId) -> Optional[Invitation]:
        """Find an invitation by ID.

        Args:
            invitation_id: Invitation ID to look up

        Returns:
            Invitation if found, None otherwise
        """
        stmt = select(invitations_table).where(invitations_table.c.id == invitation_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def find_pending_for_account_target(
        self, account_id: AccountId, target: InvitationTarget, now: datetime
    ) -> Optional[Invitation]:
        """Find the newest open invitation for an account and target."""
        stmt = (
            select(invitations_table)
            .where(
                and_(
                    invitations_table.c.account_id == account_id,
                    _addressed_to(target),
                    _open_at(now),
                )
            )
            .order_by(invitations_table.c.created_at.desc())
            .limit(1)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            row = result.mappings().first()
        return row_to_invitation(dict(row)) if row else None

    async def list_pending_for_target(
        self, target: InvitationTarget, now: datetime
    ) -> list[Invitation]:
        """List open invitations addressed to a target, newest first."""
        stmt = (
            select(invitations_table)
            .where(and_(_addressed_to(target), _open_at(now)))
            .order_by(invitations_table.c.created_at.desc())
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_invitation(dict(row)) for row in rows]

    async def list_for_account(self, account_id: AccountId) -> list[Invitation]:
        """List every invitation of an account, newest first."""
        stmt = (
            select(invitations_table)
            .where(invitations_table.c.account_id == account_id)
            .order_by(invitations_table.c.created_at.desc())
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_invitation(dict(row)) for row in rows]

    async def list_pending_page(
        self, now: datetime, after: Optional[InvitationId], limit: int
    ) -> list[Invitation]:
        """Keyset page of open invitations ordered by id."""
        stmt = select(invitations_table).where(_open_at(now))
        if after is not None:
            stmt = stmt.where(invitations_table.c.id > after)
        stmt = stmt.order_by(invitations_table.c.id).limit(limit)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
            rows = result.mappings().all()
        return [row_to_invitation(dict(row)) for row in rows]

    async def insert(self, invitation: Invitation) -> Invitation:
        """Insert a new invitation unless one is already open for its target.

        Relies on the partial unique index over unaccepted (account_id,
        target_kind, target): a concurrent insert for the same target waits
        for the first to commit and then does nothing.
        """
        same_target = and_(
            invitations_table.c.account_id == invitation.account_id,
            _addressed_to(invitation.target),
        )
        clear_expired = delete(invitations_table).where(
            and_(
                same_target,
                invitations_table.c.accepted_at.is_(None),
                invitations_table.c.expires_at <= invitation.created_at,
            )
        )
        stmt = (
            pg_insert(invitations_table)
            .values(**invitation_to_dict(invitation))
            .on_conflict_do_nothing(
                index_elements=["account_id", "target_kind", "target"],
                index_where=invitations_table.c.accepted_at.is_(None),
            )
            .returning(invitations_table)
        )
        async with transaction(self.session_factory) as session:
            await session.execute(clear_expired)
            result = await session.execute(stmt)
            row = result.mappings().first()
            if row:
                return row_to_invitation(dict(row))

            existing = await session.execute(
                select(invitations_table)
                .where(same_target)
                .order_by(invitations_table.c.created_at.desc())
                .limit(1)
            )
            row = existing.mappings().one()
        return row_to_invitation(dict(row))

    async def mark_accepted(
        self, invitation_id: InvitationId, accepted_at: datetime
    ) -> bool:
        """Set accepted_at only while it is still NULL."""
        stmt = (
            update(invitations_table)
            .where(
                and_(
                    invitations_table.c.id == invitation_id,
                    invitations_table.c.accepted_at.is_(None),
                )
            )
            .values(accepted_at=accepted_at)
        )
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
        return result.rowcount == 1

    async def delete_unaccepted(
        self,
        invitation_id: InvitationId,
        account_id: Optional[AccountId] = None,
    ) -> bool:
        """Delete an invitation only while it is unaccepted."""
        stmt = delete(invitations_table).where(
            and_(
                invitations_table.c.id == invitation_id,
                invitations_table.c.accepted_at.is_(None),
            )
        )
        if account_id is not None:
            stmt = stmt.where(invitations_table.c.account_id == account_id)
        async with transaction(self.session_factory) as session:
            result = await session.execute(stmt)
        return result.rowcount > 0
