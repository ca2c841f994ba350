"""
JournalApp Client — Durable Local Storage
===========================================

What:  Drafts and the cached credential, persisted on the device.
Why:   A draft write must survive the app being killed right after a
       keystroke. Writes are synchronous and committed before returning.
How:   A small SQLite file accessed through a synchronous SQLAlchemy engine.
       The tables use their own DeclarativeBase so they never end up in the
       server's metadata or migrations.

Schema:
    local_drafts       (entry_key, field) → value, updated_at
    local_credentials  single row: token + cached account JSON

Draft keys:
    entry_key is the entry id, or "new" for an entry that has not been
    created on the server yet.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, NamedTuple, Optional, Tuple, Union

from sqlalchemy import DateTime, String, Text, create_engine, delete, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

logger = logging.getLogger(__name__)

NEW_ENTRY_KEY = "new"
_CREDENTIAL_SLOT = "default"


class DraftKey(NamedTuple):
    """Identifies one field of one entry in the draft store."""

    entry_key: str
    field: str


class LocalBase(DeclarativeBase):
    pass


class DraftRow(LocalBase):
    __tablename__ = "local_drafts"

    entry_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    field: Mapped[str] = mapped_column(String(32), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class CredentialRow(LocalBase):
    __tablename__ = "local_credentials"

    slot: Mapped[str] = mapped_column(String(32), primary_key=True)
    token: Mapped[str] = mapped_column(Text, nullable=False)
    user_json: Mapped[str] = mapped_column(Text, nullable=False, default="{}")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LocalStorage:
    """
    Synchronous key/value store for drafts plus one credential slot.

    Usage:
        storage = LocalStorage("journal_client.db")
        storage.set_draft(DraftKey("new", "title"), "Morning pag")
        storage.get_draft(DraftKey("new", "title"))   # "Morning pag"
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.engine = create_engine(f"sqlite:///{self.path}")
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)
        LocalBase.metadata.create_all(self.engine)
        logger.debug("Local storage opened at %s", self.path)

    # ── Drafts ────────────────────────────────────────────────────────────

    def set_draft(self, key: DraftKey, value: str) -> None:
        with self._sessions.begin() as session:
            row = session.get(DraftRow, (key.entry_key, key.field))
            if row is None:
                session.add(
                    DraftRow(entry_key=key.entry_key, field=key.field, value=value, updated_at=_utcnow())
                )
            else:
                row.value = value
                row.updated_at = _utcnow()

    def get_draft(self, key: DraftKey) -> Optional[str]:
        with self._sessions() as session:
            row = session.get(DraftRow, (key.entry_key, key.field))
            return row.value if row is not None else None

    def remove_draft(self, key: DraftKey) -> None:
        with self._sessions.begin() as session:
            session.execute(
                delete(DraftRow).where(
                    DraftRow.entry_key == key.entry_key, DraftRow.field == key.field
                )
            )

    def drafts_for(self, entry_key: str) -> Dict[str, str]:
        """All stored drafts of one entry, keyed by field name."""
        with self._sessions() as session:
            rows = session.scalars(select(DraftRow).where(DraftRow.entry_key == entry_key))
            return {row.field: row.value for row in rows}

    def clear_drafts(self, entry_key: str) -> int:
        with self._sessions.begin() as session:
            result = session.execute(delete(DraftRow).where(DraftRow.entry_key == entry_key))
            removed = result.rowcount or 0
        if removed:
            logger.debug("Cleared %d draft(s) of entry %s", removed, entry_key)
        return removed

    # ── Credential ────────────────────────────────────────────────────────

    def save_credential(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        payload = json.dumps(user or {})
        with self._sessions.begin() as session:
            row = session.get(CredentialRow, _CREDENTIAL_SLOT)
            if row is None:
                session.add(CredentialRow(slot=_CREDENTIAL_SLOT, token=token, user_json=payload))
            else:
                row.token = token
                row.user_json = payload

    def load_credential(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        """Returns (token, user) or None when nobody is signed in."""
        with self._sessions() as session:
            row = session.get(CredentialRow, _CREDENTIAL_SLOT)
            if row is None:
                return None
            return row.token, json.loads(row.user_json or "{}")

    def clear_credential(self) -> None:
        with self._sessions.begin() as session:
            session.execute(delete(CredentialRow).where(CredentialRow.slot == _CREDENTIAL_SLOT))

    def close(self) -> None:
        self.engine.dispose()
