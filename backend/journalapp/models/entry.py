"""
JournalApp Backend — JournalEntry SQLAlchemy Model
====================================================

What:  ORM model representing the `journal_entries` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Used by EntryService for CRUD, search and streak queries.

Table Design Rationale:
    - UUID primary key: Non-sequential, so entry ids cannot be enumerated
    - date: Calendar date chosen by the user (no time component); several
      entries may share a date and never merge
    - owner_id: Set once at creation; every query filters on it
    - created_at / updated_at: Maintained here, never supplied by clients

    Indexes on date and owner_id:
        The list endpoint is "my entries, newest date first" and the streak
        endpoint reads only (owner_id, date) pairs.
"""

import uuid
from datetime import date, datetime, timezone

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from journalapp.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JournalEntry(Base):
    """
    One journal entry owned by exactly one account.

    Lifecycle:
        1. Created by POST /api/journal (id assigned here, date defaults to today)
        2. Title, content and date may change through PUT; id and owner never do
        3. Deleted explicitly, or with the owning account (ON DELETE CASCADE)
    """

    __tablename__ = "journal_entries"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Opaque entry identifier, immutable after creation",
    )

    # Length is enforced by validation too; the column keeps the database honest
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Entry title, 1-255 characters",
    )

    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default="",
        server_default=text("''"),
        comment="Entry body, may be empty",
    )

    date: Mapped[date] = mapped_column(
        Date,
        nullable=False,
        default=date.today,
        comment="Calendar day the entry belongs to",
    )

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="Owning account, immutable after creation",
    )

    # ── Timestamps ────────────────────────────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    owner: Mapped["User"] = relationship("User", back_populates="entries")  # noqa: F821

    __table_args__ = (
        Index("idx_journal_entries_date", "date"),
        Index("idx_journal_entries_owner_id", "owner_id"),
    )

    def __repr__(self) -> str:
        return f"<JournalEntry(id={self.id}, date='{self.date}', owner_id={self.owner_id})>"
