"""
JournalApp Client — Session
=============================

What:  The signed-in account and its bearer token.
Why:   A single explicit object instead of a module-level token variable:
       the API client reads it, an AuthError clears it, and tests can build
       as many independent sessions as they like.
How:   Restores the credential from LocalStorage on construction and writes
       it back on every change.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from journalapp.client.storage import LocalStorage

logger = logging.getLogger(__name__)


class ClientSession:
    """
    Attributes:
        token:  Bearer token, or None when signed out.
        user:   Cached account fields ({id, username, email}).
    """

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.token: Optional[str] = None
        self.user: Dict[str, Any] = {}
        self._expired_listeners: List[Callable[[], None]] = []

        stored = storage.load_credential()
        if stored is not None:
            self.token, self.user = stored
            logger.info("Restored session for %s", self.user.get("username", "unknown user"))

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def authenticate(self, token: str, user: Optional[Dict[str, Any]] = None) -> None:
        self.token = token
        self.user = dict(user or {})
        self.storage.save_credential(token, self.user)

    def on_expired(self, listener: Callable[[], None]) -> None:
        """Register a callback run when the server rejects the credential."""
        self._expired_listeners.append(listener)

    def clear(self) -> None:
        """Sign out locally (explicit logout)."""
        self.token = None
        self.user = {}
        self.storage.clear_credential()

    def invalidate(self) -> None:
        """Forget a credential the server rejected; the user has to log in again."""
        was_authenticated = self.is_authenticated
        self.clear()
        if was_authenticated:
            logger.info("Session invalidated")
            for listener in list(self._expired_listeners):
                listener()

    def close(self) -> None:
        self.storage.close()
