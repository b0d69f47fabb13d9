"""initial_schema

Create the shared budget account schema:
- Accounts (one per family, optionally auto-created for a user)
- Account members (admin/member role per user and account)
- Invitations (email or phone target, 48h expiry, no FK to accounts so
  orphans can be swept)
- Profiles (stored active account preference)

Revision ID: 3c41f0a9d2b7
Revises:
Create Date: 2026-10-18 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c41f0a9d2b7"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    # Enable required extensions
    op.execute('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"')

    # Create ENUM types (idempotent)
    op.execute("""
        DO $$ BEGIN
            CREATE TYPE billing_state AS ENUM ('trial', 'active', 'past_due', 'canceled');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE member_role AS ENUM ('admin', 'member');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    op.execute("""
        DO $$ BEGIN
            CREATE TYPE invitation_target_kind AS ENUM ('email', 'phone');
        EXCEPTION
            WHEN duplicate_object THEN null;
        END $$;
    """)

    # ========================================================================
    # ACCOUNTS table
    # ========================================================================
    op.create_table(
        "accounts",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column(
            "plan_slug",
            sa.String(length=50),
            server_default=sa.text("'free'"),
            nullable=False,
        ),
        sa.Column(
            "billing_state",
            postgresql.ENUM(name="billing_state", create_type=False),
            server_default=sa.text("'trial'"),
            nullable=False,
        ),
        sa.Column("bootstrapped_for", sa.UUID(), nullable=True),
        sa.Column("pending_share_target", sa.String(length=320), nullable=True),
        sa.Column("pending_invitation_id", sa.UUID(), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        # At most one auto-created account per user
        sa.UniqueConstraint("bootstrapped_for", name="uq_accounts_bootstrapped_for"),
    )

    # ========================================================================
    # ACCOUNT_MEMBERS table
    # ========================================================================
    op.create_table(
        "account_members",
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column(
            "role",
            postgresql.ENUM(name="member_role", create_type=False),
            nullable=False,
        ),
        sa.Column(
            "joined_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["account_id"], ["accounts.id"], ondelete="CASCADE"),
        sa.UniqueConstraint(
            "account_id", "user_id", name="uq_account_members_account_user"
        ),
    )
    op.create_index("idx_account_members_user_id", "account_members", ["user_id"])

    # ========================================================================
    # INVITATIONS table (no FK to accounts)
    # ========================================================================
    op.create_table(
        "invitations",
        sa.Column(
            "id",
            sa.UUID(),
            server_default=sa.text("uuid_generate_v4()"),
            nullable=False,
        ),
        sa.Column("account_id", sa.UUID(), nullable=False),
        sa.Column("inviter_id", sa.UUID(), nullable=False),
        sa.Column(
            "target_kind",
            postgresql.ENUM(name="invitation_target_kind", create_type=False),
            nullable=False,
        ),
        sa.Column("target", sa.String(length=320), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "idx_invitations_target_open",
        "invitations",
        ["target_kind", "target"],
        postgresql_where=sa.text("accepted_at IS NULL"),
    )
    op.create_index("idx_invitations_account_id", "invitations", ["account_id"])

    # ========================================================================
    # PROFILES table
    # ========================================================================
    op.create_table(
        "profiles",
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("preferred_account_id", sa.UUID(), nullable=True),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("NOW()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("user_id"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("profiles")
    op.drop_index("idx_invitations_account_id", table_name="invitations")
    op.drop_index("idx_invitations_target_open", table_name="invitations")
    op.drop_table("invitations")
    op.drop_index("idx_account_members_user_id", table_name="account_members")
    op.drop_table("account_members")
    op.drop_table("accounts")

    op.execute("DROP TYPE IF EXISTS invitation_target_kind")
    op.execute("DROP TYPE IF EXISTS member_role")
    op.execute("DROP TYPE IF EXISTS billing_state")
