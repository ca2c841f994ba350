"""
JournalApp Client — Entry Editor
==================================

What:  One journal entry being written or edited.
Why:   Ties the two autosaving fields, the entry date and the explicit
       "Save" button together, and decides what happens to unsaved text
       when the user navigates away.
How:   Two FieldReconcilers (title, content) share the LocalStorage and the
       scheduler; full saves and deletes go straight through the API client.

Flows:
    open()   drafts left from an earlier session win over server values
    save()   settle field saves → validate → create/update all fields
             → clear drafts → adopt the server id for new entries
    leave()  persist dirty text; "Draft saved, continue later" when anything
             non-empty was kept, otherwise drop the drafts silently
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Optional

from journalapp.client.api import JournalApiClient
from journalapp.client.config import ClientSettings
from journalapp.client.reconciler import FieldReconciler, FieldState, SaveIndicator
from journalapp.client.scheduling import Scheduler
from journalapp.client.storage import NEW_ENTRY_KEY, DraftKey, LocalStorage
from journalapp.core.validation import is_autosave_ready, parse_calendar_date, validate_entry
from journalapp.exceptions import AuthError, ValidationError
from journalapp.schemas.entry import EntryResponse

logger = logging.getLogger(__name__)

DRAFT_SAVED_NOTICE = "Draft saved, continue later"
DATE_FIELD = "date"


@dataclass(frozen=True)
class LeaveResult:
    draft_saved: bool
    notice: Optional[str] = None


class EntryEditor:
    """
    Editor state for a new entry (entry=None) or an existing one.

    Usage:
        editor = EntryEditor(api, storage, scheduler, entry=entry)
        await editor.open()
        editor.edit_content("Slept well, long walk after lunch.")
        saved = await editor.save()
    """

    def __init__(
        self,
        api: JournalApiClient,
        storage: LocalStorage,
        scheduler: Scheduler,
        settings: Optional[ClientSettings] = None,
        entry: Optional[EntryResponse] = None,
        entry_id: Optional[str] = None,
        today: Callable[[], date] = date.today,
    ):
        self.api = api
        self.storage = storage
        self.settings = settings or api.settings
        self.entry = entry
        self.entry_id: Optional[str] = str(entry.id) if entry is not None else entry_id
        self.date: date = entry.date if entry is not None else today()
        self.has_draft = False
        self.editing = False
        self._date_confirmed = self.date

        self.title = self._reconciler("title", scheduler)
        self.content = self._reconciler("content", scheduler)

    def _reconciler(self, field: str, scheduler: Scheduler) -> FieldReconciler:
        async def save_field(value: str) -> None:
            await self.api.update_entry(self.entry_id, **{field: value})

        def ready(value: str) -> bool:
            # New entries are only created by an explicit save
            return self.entry_id is not None and is_autosave_ready(
                field, value, self.settings.min_content_length
            )

        return FieldReconciler(
            field,
            self.entry_key,
            self.storage,
            save_field,
            scheduler,
            confirmed=getattr(self.entry, field) if self.entry is not None else "",
            is_ready=ready,
            on_auth_error=self._session_expired,
            autosave_delay=self.settings.autosave_delay,
            max_retries=self.settings.max_save_retries,
            saved_display_seconds=self.settings.saved_display_seconds,
            save_timeout=self.settings.request_timeout,
        )

    # ── Views ─────────────────────────────────────────────────────────────

    @property
    def entry_key(self) -> str:
        return self.entry_id or NEW_ENTRY_KEY

    @property
    def is_new(self) -> bool:
        return self.entry_id is None

    @property
    def dirty(self) -> bool:
        return self.title.dirty or self.content.dirty or self.date != self._date_confirmed

    @property
    def indicators(self) -> Dict[str, SaveIndicator]:
        return {"title": self.title.indicator, "content": self.content.indicator}

    # ══════════════════════════════════════════════════════════════════════
    # Opening
    # ══════════════════════════════════════════════════════════════════════

    async def open(self) -> None:
        """
        Load the entry (when only an id is known) and restore local drafts.

        A stored draft that differs from the server value wins; the text
        the user typed last is never silently replaced.
        """
        if self.entry is None and self.entry_id is not None:
            try:
                self.entry = await self.api.get_entry(self.entry_id)
            except AuthError as e:
                self._session_expired(e)
                raise
            self.date = self._date_confirmed = self.entry.date
            self.title.mark_clean(self.entry.title)
            self.content.mark_clean(self.entry.content)

        drafts = self.storage.drafts_for(self.entry_key)
        for reconciler in (self.title, self.content):
            draft = drafts.get(reconciler.field)
            if draft is not None and draft != reconciler.confirmed:
                reconciler.value = draft
                reconciler.state = FieldState.DIRTY
                self.has_draft = True

        stored_date = parse_calendar_date(drafts.get(DATE_FIELD))
        if stored_date is not None and stored_date != self._date_confirmed:
            self.date = stored_date
            self.has_draft = True

        self.editing = True
        if self.has_draft:
            logger.info("Restored local draft for entry %s", self.entry_key)

    # ══════════════════════════════════════════════════════════════════════
    # Editing
    # ══════════════════════════════════════════════════════════════════════

    def edit_title(self, value: str) -> None:
        self.title.edit(value)

    def edit_content(self, value: str) -> None:
        self.content.edit(value)

    def set_date(self, value: date) -> None:
        self.date = value
        self.storage.set_draft(DraftKey(self.entry_key, DATE_FIELD), value.isoformat())

    # ══════════════════════════════════════════════════════════════════════
    # Full Save / Delete
    # ══════════════════════════════════════════════════════════════════════

    async def save(self) -> EntryResponse:
        """
        Explicit save of all fields.

        Raises:
            ValidationError: before any network call when the title is blank
                (or content is shorter than the configured minimum).
            AuthError: the session expired; it has already been invalidated.
            NetworkError / NotFoundError: the save did not happen; drafts
                are kept.
        """
        await self.title.settle()
        await self.content.settle()

        candidate = {"title": self.title.value, "content": self.content.value, "date": self.date}
        result = validate_entry(candidate, self.settings.min_content_length)
        if not result.valid:
            raise ValidationError(next(iter(result.violations.values())), violations=result.violations)

        try:
            if self.entry_id is None:
                entry = await self.api.create_entry(
                    self.title.value, self.content.value, self.date
                )
            else:
                entry = await self.api.update_entry(
                    self.entry_id,
                    title=self.title.value,
                    content=self.content.value,
                    entry_date=self.date,
                )
        except AuthError as e:
            self._session_expired(e)
            raise

        self.storage.clear_drafts(self.entry_key)
        self._adopt(entry)
        logger.info("Entry %s saved", self.entry_id)
        return entry

    async def delete(self) -> None:
        self.title.detach()
        self.content.detach()
        if self.entry_id is not None:
            try:
                await self.api.delete_entry(self.entry_id)
            except AuthError as e:
                self._session_expired(e)
                raise
        self.storage.clear_drafts(self.entry_key)
        self.editing = False
        self.has_draft = False

    def _adopt(self, entry: EntryResponse) -> None:
        self.entry = entry
        self.entry_id = str(entry.id)
        for reconciler in (self.title, self.content):
            reconciler.entry_key = self.entry_key
        # The server may have trimmed the title; its copy is authoritative
        self.title.mark_clean(entry.title)
        self.content.mark_clean(entry.content)
        self.date = self._date_confirmed = entry.date
        self.storage.clear_drafts(self.entry_key)
        self.has_draft = False
        self.editing = False

    # ══════════════════════════════════════════════════════════════════════
    # Leaving
    # ══════════════════════════════════════════════════════════════════════

    def leave(self) -> LeaveResult:
        """
        Navigate away: stop timers and keep whatever is not on the server.

        Runs synchronously so it can be called from an unmount hook.
        """
        self.title.detach()
        self.content.detach()
        self.editing = False

        dirty_text = [r for r in (self.title, self.content) if r.dirty]
        if not any(r.value.strip() for r in dirty_text):
            # A changed date alone is not worth a draft
            self.storage.clear_drafts(self.entry_key)
            return LeaveResult(draft_saved=False)

        for reconciler in dirty_text:
            self.storage.set_draft(reconciler.key, reconciler.value)
        if self.date != self._date_confirmed:
            self.storage.set_draft(DraftKey(self.entry_key, DATE_FIELD), self.date.isoformat())
        logger.info("Draft of entry %s kept for later", self.entry_key)
        return LeaveResult(draft_saved=True, notice=DRAFT_SAVED_NOTICE)

    def discard(self) -> None:
        """Throw local changes away and return to the server's values."""
        self.storage.clear_drafts(self.entry_key)
        self.title.mark_clean(self.title.confirmed)
        self.content.mark_clean(self.content.confirmed)
        self.date = self._date_confirmed
        self.has_draft = False

    # ── Session ───────────────────────────────────────────────────────────

    def _session_expired(self, error: AuthError) -> None:
        logger.info("Session expired while editing entry %s", self.entry_key)
        self.api.session.invalidate()
