"""
JournalApp Backend — Entry Service (Business Logic)
=====================================================

What:  CRUD, search and streak operations on journal entries.
Why:   Encapsulates ownership rules and validation independent of HTTP concerns.
How:   Every method receives the request's AsyncSession and the caller's id;
       every query is filtered by owner_id, so entries of other accounts are
       indistinguishable from missing ones.
Who:   Called by the journal route handlers.

Error Handling Strategy:
    ValidationError and NotFoundError propagate as-is. Anything else raised
    while talking to the database is logged and wrapped in DatabaseError so
    no SQL or schema details reach the client.

Design Decision:
    EntryService is stateless — it receives the db session for each call.
    The streak query reads only the date column; the calculation itself is
    the shared core.streak function that the client also uses.
"""

import logging
from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from journalapp.core.streak import summarize_streak
from journalapp.core.validation import validate_entry
from journalapp.exceptions import DatabaseError, JournalAppError, NotFoundError, ValidationError
from journalapp.models.entry import JournalEntry
from journalapp.models.user import User  # noqa: F401  (registers the owner mapper)
from journalapp.schemas.entry import (
    EntryCreate,
    EntryResponse,
    EntryUpdate,
    StreakResponse,
)

logger = logging.getLogger(__name__)


def _raise_if_invalid(candidate: dict) -> None:
    result = validate_entry(candidate)
    if not result.valid:
        first_field, first_reason = next(iter(result.violations.items()))
        raise ValidationError(
            message=first_reason,
            field=first_field,
            violations=result.violations,
        )


class EntryService:
    """
    Business logic layer for journal entries.

    Responsibilities:
        - list_entries(): caller's entries, newest date first
        - get_entry(): single entry with not-found handling
        - create_entry() / update_entry() / delete_entry()
        - search_entries(): title/content substring match
        - get_streak(): authoritative streak figures
    """

    async def _load_owned(self, db: AsyncSession, owner_id: UUID, entry_id: UUID) -> JournalEntry:
        result = await db.execute(
            select(JournalEntry).where(
                JournalEntry.id == entry_id,
                JournalEntry.owner_id == owner_id,
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError(resource="entry", resource_id=str(entry_id))
        return entry

    async def list_entries(self, db: AsyncSession, owner_id: UUID) -> List[EntryResponse]:
        """
        All entries of the caller, ordered by date descending.

        Entries sharing a date are ordered newest-created first so the list
        is stable between calls.
        """
        try:
            result = await db.execute(
                select(JournalEntry)
                .where(JournalEntry.owner_id == owner_id)
                .order_by(desc(JournalEntry.date), desc(JournalEntry.created_at))
            )
            return [EntryResponse.model_validate(e) for e in result.scalars().all()]
        except Exception as e:
            logger.error("Database error listing entries for %s: %s", owner_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve journal entries. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_entry(self, db: AsyncSession, owner_id: UUID, entry_id: UUID) -> EntryResponse:
        """
        Raises:
            NotFoundError: unknown id, or the entry belongs to someone else
        """
        try:
            entry = await self._load_owned(db, owner_id, entry_id)
            return EntryResponse.model_validate(entry)
        except JournalAppError:
            raise
        except Exception as e:
            logger.error("Database error fetching entry %s: %s", entry_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the entry. Please try again.",
                context={"entry_id": str(entry_id)},
            )

    async def create_entry(
        self,
        db: AsyncSession,
        owner_id: UUID,
        payload: EntryCreate,
        today: Optional[date] = None,
    ) -> EntryResponse:
        """
        Create an entry for the caller.

        Args:
            payload: title (required), content (may be empty), date (optional)
            today: Default date when the payload has none; the server's
                current day unless a caller injects one

        Raises:
            ValidationError: blank or missing title
        """
        entry_date = payload.date or today or date.today()
        _raise_if_invalid({"title": payload.title, "content": payload.content, "date": entry_date})

        try:
            entry = JournalEntry(
                title=payload.title.strip(),
                content=payload.content,
                date=entry_date,
                owner_id=owner_id,
            )
            db.add(entry)
            # Flush assigns the id and timestamps without committing
            await db.flush()
            await db.refresh(entry)
            logger.info("Entry %s created for %s (date=%s)", entry.id, owner_id, entry.date)
            return EntryResponse.model_validate(entry)
        except Exception as e:
            logger.error("Database error creating entry for %s: %s", owner_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not save the entry. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def update_entry(
        self,
        db: AsyncSession,
        owner_id: UUID,
        entry_id: UUID,
        payload: EntryUpdate,
    ) -> EntryResponse:
        """
        Partial update: only fields present in the payload change.

        The merged result is validated as a whole, so a provided blank title
        is rejected while an omitted title keeps the stored one.

        Raises:
            NotFoundError: unknown id, or the entry belongs to someone else
            ValidationError: merged entry violates a field rule
        """
        try:
            entry = await self._load_owned(db, owner_id, entry_id)

            merged = {
                "title": entry.title if payload.title is None else payload.title,
                "content": entry.content if payload.content is None else payload.content,
                "date": entry.date if payload.date is None else payload.date,
            }
            _raise_if_invalid(merged)

            entry.title = merged["title"].strip()
            entry.content = merged["content"]
            entry.date = merged["date"]
            await db.flush()
            await db.refresh(entry)
            logger.info("Entry %s updated (fields=%s)", entry.id, sorted(payload.model_fields_set))
            return EntryResponse.model_validate(entry)
        except JournalAppError:
            raise
        except Exception as e:
            logger.error("Database error updating entry %s: %s", entry_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not update the entry. Please try again.",
                context={"entry_id": str(entry_id)},
            )

    async def delete_entry(self, db: AsyncSession, owner_id: UUID, entry_id: UUID) -> None:
        """
        Raises:
            NotFoundError: unknown id, or the entry belongs to someone else
        """
        try:
            entry = await self._load_owned(db, owner_id, entry_id)
            await db.delete(entry)
            await db.flush()
            logger.info("Entry %s deleted", entry_id)
        except JournalAppError:
            raise
        except Exception as e:
            logger.error("Database error deleting entry %s: %s", entry_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the entry. Please try again.",
                context={"entry_id": str(entry_id)},
            )

    async def search_entries(
        self,
        db: AsyncSession,
        owner_id: UUID,
        query: str,
        limit: int = 100,
    ) -> List[EntryResponse]:
        """
        Case-insensitive substring search over title and content.

        Raises:
            ValidationError: empty query
        """
        term = (query or "").strip()
        if not term:
            raise ValidationError(message="Search query is required", field="query")

        try:
            result = await db.execute(
                select(JournalEntry)
                .where(
                    JournalEntry.owner_id == owner_id,
                    or_(
                        JournalEntry.title.icontains(term, autoescape=True),
                        JournalEntry.content.icontains(term, autoescape=True),
                    ),
                )
                .order_by(desc(JournalEntry.date), desc(JournalEntry.created_at))
                .limit(limit)
            )
            return [EntryResponse.model_validate(e) for e in result.scalars().all()]
        except Exception as e:
            logger.error("Database error searching entries: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not search journal entries. Please try again.",
                context={"error_type": type(e).__name__},
            )

    async def get_streak(
        self,
        db: AsyncSession,
        owner_id: UUID,
        today: Optional[date] = None,
    ) -> StreakResponse:
        """
        Authoritative streak for the caller.

        Query plan:
            SELECT date FROM journal_entries WHERE owner_id = :id
            → idx_journal_entries_owner_id; only one column is read
        """
        try:
            result = await db.execute(
                select(JournalEntry.date).where(JournalEntry.owner_id == owner_id)
            )
            dates = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error reading entry dates for %s: %s", owner_id, str(e))
            raise DatabaseError(
                message="Could not compute the streak. Please try again.",
                context={"error_type": type(e).__name__},
            )

        summary = summarize_streak(dates, today or date.today())
        return StreakResponse(
            current_streak=summary.current_streak,
            longest_streak=summary.longest_streak,
            last_entry_date=summary.last_entry_date,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
# Why singleton: EntryService is stateless; no per-instance state needed
entry_service = EntryService()
