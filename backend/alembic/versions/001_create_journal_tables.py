"""Create users and journal_entries tables

Revision ID: 001
Revises: None
Create Date: 2026-10-18 00:00:00.000000+00:00

What:  Initial schema: accounts and their journal entries.
How:   Portable column types (sa.Uuid, DateTime(timezone=True)) so the same
       migration runs on PostgreSQL and on a local SQLite file.

Rollback: downgrade() drops both tables (destructive, all entries lost).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False, comment="Public display name, unique"),
        sa.Column("email", sa.String(255), nullable=False, comment="Login identifier, stored lowercase"),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "journal_entries",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=sa.text("''")),
        sa.Column("date", sa.Date(), nullable=False, comment="Calendar day the entry belongs to"),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        # Deleting an account removes its entries
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
    )

    # List and streak queries filter by owner and order by date
    op.create_index("idx_journal_entries_date", "journal_entries", ["date"])
    op.create_index("idx_journal_entries_owner_id", "journal_entries", ["owner_id"])


def downgrade() -> None:
    op.drop_index("idx_journal_entries_owner_id", table_name="journal_entries")
    op.drop_index("idx_journal_entries_date", table_name="journal_entries")
    op.drop_table("journal_entries")
    op.drop_table("users")
