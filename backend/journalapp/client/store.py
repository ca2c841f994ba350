"""
JournalApp Client — Journal Store
===================================

What:  The signed-in user's entry list and streak, as the home screen shows them.
Why:   Screens share one collection; after every change the list order and
       the streak counter must be current without a full reload.
How:   Each operation goes through JournalApiClient, then patches the local
       list. The streak comes from the server; if that call fails for any
       reason except an expired session, it is recomputed locally with the
       same compute_streak the server uses.
"""

import logging
from datetime import date
from typing import Callable, List, Optional
from uuid import UUID

from journalapp.client.api import EntryId, JournalApiClient
from journalapp.core.streak import summarize_streak
from journalapp.core.validation import validate_entry
from journalapp.exceptions import AuthError, JournalAppError, ValidationError
from journalapp.schemas.entry import EntryResponse, StreakResponse

logger = logging.getLogger(__name__)

ZERO_STREAK = StreakResponse(current_streak=0, longest_streak=0, last_entry_date=None)


def _sort_key(entry: EntryResponse):
    return (entry.date, entry.created_at)


class JournalStore:
    """
    Attributes:
        entries:  Loaded entries, newest date first.
        streak:   Last known streak figures.
        error:    Message of the last failed load, for display.
    """

    def __init__(self, api: JournalApiClient, today: Callable[[], date] = date.today):
        self.api = api
        self.entries: List[EntryResponse] = []
        self.streak: StreakResponse = ZERO_STREAK
        self.error: Optional[str] = None
        self._today = today

    def _sort(self) -> None:
        self.entries.sort(key=_sort_key, reverse=True)

    def _find_index(self, entry_id: EntryId) -> Optional[int]:
        wanted = UUID(str(entry_id))
        for index, entry in enumerate(self.entries):
            if entry.id == wanted:
                return index
        return None

    @staticmethod
    def _check_title(title: str, entry_date: date) -> None:
        result = validate_entry({"title": title, "date": entry_date})
        if "title" in result.violations:
            raise ValidationError(result.violations["title"], field="title")

    # ══════════════════════════════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════════════════════════════

    async def load(self) -> List[EntryResponse]:
        self.error = None
        try:
            self.entries = await self.api.get_entries()
        except JournalAppError as e:
            self.error = e.message
            self.entries = []
            raise
        self._sort()
        await self.refresh_streak()
        return self.entries

    async def refresh_streak(self) -> StreakResponse:
        """
        Fetch the authoritative streak, falling back to a local computation.

        AuthError is not a connectivity problem; it propagates so the user
        is sent back to login.
        """
        try:
            self.streak = await self.api.get_streak()
        except AuthError:
            raise
        except JournalAppError as e:
            logger.warning("Streak unavailable from server (%s); computing locally", e.message)
            self.streak = self.local_streak()
        return self.streak

    def local_streak(self) -> StreakResponse:
        if not self.entries:
            return ZERO_STREAK
        summary = summarize_streak([entry.date for entry in self.entries], self._today())
        return StreakResponse(
            current_streak=summary.current_streak,
            longest_streak=summary.longest_streak,
            last_entry_date=summary.last_entry_date,
        )

    # ══════════════════════════════════════════════════════════════════════
    # Mutations
    # ══════════════════════════════════════════════════════════════════════

    async def add(
        self, title: str, content: str = "", entry_date: Optional[date] = None
    ) -> EntryResponse:
        """Create an entry. A blank title is rejected before any network call."""
        self._check_title(title, entry_date or self._today())
        entry = await self.api.create_entry(title, content, entry_date)
        self.entries.append(entry)
        self._sort()
        await self.refresh_streak()
        return entry

    async def update(
        self,
        entry_id: EntryId,
        title: Optional[str] = None,
        content: Optional[str] = None,
        entry_date: Optional[date] = None,
    ) -> EntryResponse:
        if title is not None:
            self._check_title(title, entry_date or self._today())
        entry = await self.api.update_entry(
            entry_id, title=title, content=content, entry_date=entry_date
        )
        index = self._find_index(entry_id)
        if index is None:
            self.entries.append(entry)
        else:
            self.entries[index] = entry
        self._sort()
        if entry_date is not None:
            await self.refresh_streak()
        return entry

    async def remove(self, entry_id: EntryId) -> None:
        await self.api.delete_entry(entry_id)
        index = self._find_index(entry_id)
        if index is not None:
            del self.entries[index]
        await self.refresh_streak()

    async def search(self, query: str) -> List[EntryResponse]:
        """Server-side search; a blank query just returns the loaded list."""
        if not query.strip():
            return list(self.entries)
        return await self.api.search_entries(query.strip())
