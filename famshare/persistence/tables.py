"""SQLAlchemy table definitions for famshare.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Column,
    Enum,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("name", String(255), nullable=False),
    Column("plan_slug", String(50), nullable=False, server_default="free"),
    Column(
        "billing_state",
        Enum(
            "trial",
            "active",
            "past_due",
            "canceled",
            name="billing_state",
            create_type=False,
        ),
        nullable=False,
        server_default="trial",
    ),
    # Set only on auto-created accounts; unique so each user gets at most one
    Column("bootstrapped_for", UUID, nullable=True, unique=True),
    # Denormalized pointer to the latest open invitation
    Column("pending_share_target", String(320), nullable=True),
    Column("pending_invitation_id", UUID, nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# ACCOUNT MEMBERS TABLE
# ============================================================================
account_members_table = Table(
    "account_members",
    metadata,
    Column(
        "account_id",
        UUID,
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("user_id", UUID, nullable=False),
    Column(
        "role",
        Enum("admin", "member", name="member_role", create_type=False),
        nullable=False,
    ),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("account_id", "user_id", name="uq_account_members_account_user"),
)

Index("idx_account_members_user_id", account_members_table.c.user_id)

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
# No foreign key to accounts: an invitation can outlive its account and is
# then swept as an orphan.
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID, primary_key=True, server_default="uuid_generate_v4()"),
    Column("account_id", UUID, nullable=False),
    Column("inviter_id", UUID, nullable=False),
    Column(
        "target_kind",
        Enum("email", "phone", name="invitation_target_kind", create_type=False),
        nullable=False,
    ),
    Column("target", String(320), nullable=False),  # Normalized email or E.164 phone
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
)

Index(
    "idx_invitations_target_open",
    invitations_table.c.target_kind,
    invitations_table.c.target,
    postgresql_where=invitations_table.c.accepted_at.is_(None),
)
Index("idx_invitations_account_id", invitations_table.c.account_id)
# One open invitation per account and target
Index(
    "uq_invitations_account_target_open",
    invitations_table.c.account_id,
    invitations_table.c.target_kind,
    invitations_table.c.target,
    unique=True,
    postgresql_where=invitations_table.c.accepted_at.is_(None),
)

# ============================================================================
# PROFILES TABLE
# ============================================================================
profiles_table = Table(
    "profiles",
    metadata,
    Column("user_id", UUID, primary_key=True),
    Column("preferred_account_id", UUID, nullable=True),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)
