"""unique_open_invitation

Allow at most one unaccepted invitation per account and target, so that
overlapping create requests cannot both insert and send a message.
Duplicates that already exist are collapsed to the newest one first.

Revision ID: 8e2d5b61c0f4
Revises: 3c41f0a9d2b7
Create Date: 2026-10-18 16:40:07.226351

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "8e2d5b61c0f4"
down_revision: Union[str, Sequence[str], None] = "3c41f0a9d2b7"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute(
        """
        DELETE FROM invitations older
        USING invitations newer
        WHERE older.accepted_at IS NULL
          AND newer.accepted_at IS NULL
          AND older.account_id = newer.account_id
          AND older.target_kind = newer.target_kind
          AND older.target = newer.target
          AND (older.created_at, older.id) < (newer.created_at, newer.id)
        """
    )
    op.create_index(
        "uq_invitations_account_target_open",
        "invitations",
        ["account_id", "target_kind", "target"],
        unique=True,
        postgresql_where=sa.text("accepted_at IS NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("uq_invitations_account_target_open", table_name="invitations")
