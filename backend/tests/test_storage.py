"""
JournalApp — Local Storage and Session Tests
==============================================

What:  Tests for LocalStorage (drafts, credential) and ClientSession.
Why:   Drafts are the last line of defence against lost text; they must be
       readable immediately and after the app restarts.

What we test:
    ✅ set / get / remove of single drafts
    ✅ Per-entry listing and clearing
    ✅ Data survives closing and reopening the file
    ✅ Session restores, clears and invalidates the stored credential
"""

from journalapp.client.session import ClientSession
from journalapp.client.storage import DraftKey, LocalStorage


class TestDrafts:

    def test_read_after_write(self, storage):
        key = DraftKey("new", "title")
        assert storage.get_draft(key) is None

        storage.set_draft(key, "Morning")
        assert storage.get_draft(key) == "Morning"

        storage.set_draft(key, "Morning pages")
        assert storage.get_draft(key) == "Morning pages"

    def test_fields_do_not_overwrite_each_other(self, storage):
        storage.set_draft(DraftKey("e1", "title"), "Title")
        storage.set_draft(DraftKey("e1", "content"), "Body")
        storage.set_draft(DraftKey("e2", "title"), "Other")

        assert storage.drafts_for("e1") == {"title": "Title", "content": "Body"}
        storage.remove_draft(DraftKey("e1", "title"))
        assert storage.drafts_for("e1") == {"content": "Body"}

    def test_clear_drafts_only_touches_one_entry(self, storage):
        storage.set_draft(DraftKey("e1", "title"), "Title")
        storage.set_draft(DraftKey("e2", "title"), "Other")

        assert storage.clear_drafts("e1") == 1
        assert storage.drafts_for("e1") == {}
        assert storage.get_draft(DraftKey("e2", "title")) == "Other"

    def test_survives_reopen(self, tmp_path):
        path = tmp_path / "device.db"
        first = LocalStorage(path)
        first.set_draft(DraftKey("new", "content"), "Half a thought")
        first.close()

        reopened = LocalStorage(path)
        try:
            assert reopened.get_draft(DraftKey("new", "content")) == "Half a thought"
        finally:
            reopened.close()


class TestCredentialAndSession:

    def test_credential_round_trip(self, storage):
        assert storage.load_credential() is None
        storage.save_credential("tok", {"username": "ada"})
        assert storage.load_credential() == ("tok", {"username": "ada"})
        storage.clear_credential()
        assert storage.load_credential() is None

    def test_session_restored_from_storage(self, storage):
        ClientSession(storage).authenticate("tok", {"username": "ada"})

        restored = ClientSession(storage)

        assert restored.is_authenticated
        assert restored.token == "tok"
        assert restored.user["username"] == "ada"

    def test_invalidate_notifies_listeners_once(self, client_session, storage):
        expired = []
        client_session.on_expired(lambda: expired.append(True))
        client_session.authenticate("tok")

        client_session.invalidate()
        client_session.invalidate()

        assert expired == [True]
        assert not client_session.is_authenticated
        assert storage.load_credential() is None

    def test_clear_does_not_notify(self, client_session):
        expired = []
        client_session.on_expired(lambda: expired.append(True))
        client_session.authenticate("tok")

        client_session.clear()

        assert expired == []
        assert not client_session.is_authenticated
