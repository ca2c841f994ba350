# Client package init
"""
JournalApp — Client Layer
==========================

What:  Everything the mobile app needs besides rendering: the HTTP client,
       the session, durable local drafts and the autosave machinery.
Why:   Typing in the editor must never lose text, even when the network is
       flaky or the app is killed mid-sentence.

Module Inventory:
    - config.py:      ClientSettings (JOURNAL_CLIENT_* environment variables)
    - storage.py:     LocalStorage, SQLite-backed drafts and credential
    - session.py:     ClientSession, the signed-in account
    - api.py:         JournalApiClient, REST calls mapped onto app exceptions
    - scheduling.py:  Scheduler protocol, asyncio and manual clocks
    - reconciler.py:  FieldReconciler, per-field debounce/save/retry machine
    - editor.py:      EntryEditor, one entry being written
    - store.py:       JournalStore, the entry list and streak

Dependency Graph:
    EntryEditor ──→ FieldReconciler ──→ JournalApiClient ──→ ClientSession
        │                 │                                     │
        └──────────→ LocalStorage ←─────────────────────────────┘
"""

from journalapp.client.api import JournalApiClient
from journalapp.client.config import ClientSettings
from journalapp.client.editor import EntryEditor, LeaveResult
from journalapp.client.reconciler import FieldReconciler, FieldState, SaveIndicator
from journalapp.client.scheduling import AsyncioScheduler, ManualScheduler, Scheduler
from journalapp.client.session import ClientSession
from journalapp.client.storage import DraftKey, LocalStorage
from journalapp.client.store import JournalStore

__all__ = [
    "AsyncioScheduler",
    "ClientSession",
    "ClientSettings",
    "DraftKey",
    "EntryEditor",
    "FieldReconciler",
    "FieldState",
    "JournalApiClient",
    "JournalStore",
    "LeaveResult",
    "LocalStorage",
    "ManualScheduler",
    "SaveIndicator",
    "Scheduler",
]
