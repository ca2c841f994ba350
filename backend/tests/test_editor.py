"""
JournalApp — Entry Editor Tests
=================================

What:  Tests for EntryEditor: open, autosave wiring, full save, leave.
How:   A mocked JournalApiClient (AsyncMock) and a real LocalStorage; the
       ManualScheduler drives autosave timers.

What we test:
    ✅ Full save with a blank title is rejected before any network call
    ✅ Full save clears drafts and adopts the server id
    ✅ New entries are never autosaved; existing ones are, per field
    ✅ A differing local draft wins when the editor opens
    ✅ Leaving keeps non-empty drafts with a notice, drops empty ones
    ✅ AuthError invalidates the session
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from journalapp.client.config import ClientSettings
from journalapp.client.editor import DRAFT_SAVED_NOTICE, EntryEditor
from journalapp.client.reconciler import FieldState
from journalapp.client.scheduling import ManualScheduler
from journalapp.client.storage import DraftKey
from journalapp.exceptions import AuthError, ValidationError

TODAY = date(2024, 3, 15)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def api():
    client = MagicMock()
    client.settings = ClientSettings(autosave_delay=2.0)
    client.session = MagicMock()
    client.create_entry = AsyncMock()
    client.update_entry = AsyncMock()
    client.delete_entry = AsyncMock()
    client.get_entry = AsyncMock()
    return client


def new_editor(api, storage, scheduler, entry=None):
    return EntryEditor(api, storage, scheduler, entry=entry, today=lambda: TODAY)


class TestFullSave:

    @pytest.mark.asyncio
    async def test_blank_title_rejected_before_network(self, api, storage, scheduler):
        editor = new_editor(api, storage, scheduler)
        await editor.open()
        editor.edit_content("Something happened today.")

        with pytest.raises(ValidationError) as exc_info:
            await editor.save()

        assert "title" in exc_info.value.violations
        api.create_entry.assert_not_awaited()
        api.update_entry.assert_not_awaited()
        assert storage.get_draft(DraftKey("new", "content")) == "Something happened today."

    @pytest.mark.asyncio
    async def test_save_new_entry_clears_drafts_and_adopts_id(
        self, api, storage, scheduler, make_entry
    ):
        created = make_entry(title="Walk", content="Long walk.", entry_date=TODAY)
        api.create_entry.return_value = created
        editor = new_editor(api, storage, scheduler)
        await editor.open()

        editor.edit_title("Walk")
        editor.edit_content("Long walk.")
        assert storage.drafts_for("new") == {"title": "Walk", "content": "Long walk."}

        saved = await editor.save()

        api.create_entry.assert_awaited_once_with("Walk", "Long walk.", TODAY)
        assert saved is created
        assert storage.drafts_for("new") == {}
        assert storage.drafts_for(str(created.id)) == {}
        assert editor.entry_id == str(created.id)
        assert editor.title.state is FieldState.CLEAN
        assert editor.content.state is FieldState.CLEAN
        assert not editor.editing

        # Debounce timers were cancelled by the full save
        await scheduler.advance(10)
        api.update_entry.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_save_existing_entry_sends_all_fields(self, api, storage, scheduler, make_entry):
        entry = make_entry(title="Walk", content="", entry_date=TODAY)
        api.update_entry.return_value = make_entry(
            title="Walk", content="Rain.", entry_date=date(2024, 3, 14), entry_id=entry.id
        )
        editor = new_editor(api, storage, scheduler, entry=entry)
        await editor.open()

        editor.edit_content("Rain.")
        editor.set_date(date(2024, 3, 14))
        await editor.save()

        api.update_entry.assert_awaited_once_with(
            str(entry.id), title="Walk", content="Rain.", entry_date=date(2024, 3, 14)
        )
        assert storage.drafts_for(str(entry.id)) == {}

    @pytest.mark.asyncio
    async def test_auth_error_invalidates_session(self, api, storage, scheduler, make_entry):
        api.update_entry.side_effect = AuthError()
        editor = new_editor(api, storage, scheduler, entry=make_entry())
        await editor.open()
        editor.edit_content("text")

        with pytest.raises(AuthError):
            await editor.save()

        api.session.invalidate.assert_called()
        assert editor.content.value == "text"


class TestAutosave:

    @pytest.mark.asyncio
    async def test_new_entry_is_not_autosaved(self, api, storage, scheduler):
        editor = new_editor(api, storage, scheduler)
        await editor.open()

        editor.edit_title("Walk")
        await scheduler.advance(5)

        api.update_entry.assert_not_awaited()
        api.create_entry.assert_not_awaited()
        assert editor.title.state is FieldState.DIRTY

    @pytest.mark.asyncio
    async def test_existing_entry_saves_one_field(self, api, storage, scheduler, make_entry):
        entry = make_entry(title="Walk", content="")
        editor = new_editor(api, storage, scheduler, entry=entry)
        await editor.open()

        editor.edit_content("Rain all day.")
        await scheduler.advance(2.0)

        api.update_entry.assert_awaited_once_with(str(entry.id), content="Rain all day.")
        assert editor.content.state is FieldState.SAVED

    @pytest.mark.asyncio
    async def test_blank_title_is_not_autosaved(self, api, storage, scheduler, make_entry):
        editor = new_editor(api, storage, scheduler, entry=make_entry(title="Walk"))
        await editor.open()

        editor.edit_title("")
        await scheduler.advance(2.0)

        api.update_entry.assert_not_awaited()
        assert storage.get_draft(DraftKey(editor.entry_id, "title")) == ""


class TestOpenAndLeave:

    @pytest.mark.asyncio
    async def test_differing_draft_wins_on_open(self, api, storage, scheduler, make_entry):
        entry = make_entry(title="Walk", content="Server text")
        storage.set_draft(DraftKey(str(entry.id), "content"), "Unsaved text")
        storage.set_draft(DraftKey(str(entry.id), "title"), "Walk")

        editor = new_editor(api, storage, scheduler, entry=entry)
        await editor.open()

        assert editor.has_draft
        assert editor.content.value == "Unsaved text"
        assert editor.content.state is FieldState.DIRTY
        assert editor.title.state is FieldState.CLEAN

    @pytest.mark.asyncio
    async def test_open_by_id_fetches_entry(self, api, storage, scheduler, make_entry):
        entry = make_entry(title="Walk")
        api.get_entry.return_value = entry

        editor = EntryEditor(api, storage, scheduler, entry_id=str(entry.id))
        await editor.open()

        api.get_entry.assert_awaited_once_with(str(entry.id))
        assert editor.title.value == "Walk"
        assert not editor.has_draft

    @pytest.mark.asyncio
    async def test_leave_with_text_keeps_draft_and_notifies(self, api, storage, scheduler):
        editor = new_editor(api, storage, scheduler)
        await editor.open()
        editor.edit_title("Half a thought")

        result = editor.leave()

        assert result.draft_saved
        assert result.notice == DRAFT_SAVED_NOTICE
        assert storage.get_draft(DraftKey("new", "title")) == "Half a thought"

        await scheduler.advance(10)
        api.update_entry.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_leave_without_text_discards_silently(self, api, storage, scheduler):
        editor = new_editor(api, storage, scheduler)
        await editor.open()
        editor.edit_title("x")
        editor.edit_title("")

        result = editor.leave()

        assert not result.draft_saved
        assert result.notice is None
        assert storage.drafts_for("new") == {}

    @pytest.mark.asyncio
    async def test_leave_with_only_a_date_change_keeps_nothing(
        self, api, storage, scheduler, make_entry
    ):
        entry = make_entry(title="Walk", entry_date=TODAY)
        editor = new_editor(api, storage, scheduler, entry=entry)
        await editor.open()
        editor.set_date(date(2024, 3, 1))

        result = editor.leave()

        assert not result.draft_saved
        assert storage.drafts_for(str(entry.id)) == {}

    @pytest.mark.asyncio
    async def test_leave_keeps_changed_date_alongside_text(
        self, api, storage, scheduler, make_entry
    ):
        entry = make_entry(title="Walk", content="", entry_date=TODAY)
        editor = new_editor(api, storage, scheduler, entry=entry)
        await editor.open()
        editor.set_date(date(2024, 3, 1))
        editor.edit_content("Rain.")

        result = editor.leave()

        assert result.draft_saved
        assert storage.drafts_for(str(entry.id)) == {"content": "Rain.", "date": "2024-03-01"}

    @pytest.mark.asyncio
    async def test_discard_reverts_to_server_values(self, api, storage, scheduler, make_entry):
        entry = make_entry(title="Walk", content="Server text")
        editor = new_editor(api, storage, scheduler, entry=entry)
        await editor.open()
        editor.edit_content("Scrap this")

        editor.discard()

        assert editor.content.value == "Server text"
        assert not editor.dirty
        assert storage.drafts_for(str(entry.id)) == {}

    @pytest.mark.asyncio
    async def test_delete_removes_entry_and_drafts(self, api, storage, scheduler, make_entry):
        entry = make_entry()
        editor = new_editor(api, storage, scheduler, entry=entry)
        await editor.open()
        editor.edit_content("pending")

        await editor.delete()

        api.delete_entry.assert_awaited_once_with(str(entry.id))
        assert storage.drafts_for(str(entry.id)) == {}
        await scheduler.advance(10)
        api.update_entry.assert_not_awaited()
