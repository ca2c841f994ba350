"""
JournalApp Client — Field Autosave Reconciler
===============================================

What:  Keeps one editable field (title or content) in sync with the server
       while the user types.
Why:   Keystrokes must never be lost: not to a flaky network, not to the app
       being closed, not to a save racing the next keystroke.
How:   Every keystroke is written to the local draft store synchronously,
       then a debounce timer decides when the value is sent. Failures are
       classified by exception type and either retried with backoff,
       surfaced, or ignored.

State Machine:
    CLEAN ──edit──→ DIRTY ──arm timer──→ PENDING_SAVE ──timer──→ SAVING
                                                                  │
        ┌───────────────────────── success ───────────────────────┤
        ▼                                                         │
      SAVED ──1.5s──→ CLEAN                          NetworkError │
                                                                  ▼
                      retry timer (1s, 2s, 4s) ←──────────── SAVE_FAILED(n)
                                                  n == 3: stop, retry_now()

    - Edit while SAVING: the field stays DIRTY; when the save settles a
      fresh debounce starts with the latest value.
    - Value not ready (blank title, short content, entry not created yet):
      skipped silently, back to DIRTY.
    - ValidationError from the server: suppressed, back to DIRTY.
    - Any exception outside the JournalAppError family (a garbled response
      body, a bug in the save callable): logged, then retried like a
      NetworkError so SAVING always ends.
    - NotFoundError: SAVE_FAILED, not retried.
    - AuthError: SAVE_FAILED, not retried, handed to the session-expired hook.

Timers:
    One slot per field. Arming any timer (debounce, retry, "Saved" display)
    cancels whatever was in the slot.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from journalapp.client.scheduling import Scheduler, TimerHandle
from journalapp.client.storage import DraftKey, LocalStorage
from journalapp.exceptions import (
    AuthError,
    JournalAppError,
    NetworkError,
    NotFoundError,
    RateLimitExceededError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SaveFunction = Callable[[str], Awaitable[Any]]

TRANSIENT_ERRORS = (NetworkError, RateLimitExceededError)


class FieldState(str, Enum):
    CLEAN = "clean"
    DIRTY = "dirty"
    PENDING_SAVE = "pending_save"
    SAVING = "saving"
    SAVE_FAILED = "save_failed"
    SAVED = "saved"


class SaveIndicator(str, Enum):
    """What the small indicator next to the field shows."""

    NEUTRAL = "neutral"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class FieldReconciler:
    """
    Autosave state machine for one field of one entry.

    Args:
        field:      "title" or "content".
        entry_key:  Entry id, or "new" before the entry exists on the server.
        storage:    Durable draft store.
        save:       Coroutine function sending one value for this field.
        scheduler:  Clock for debounce, retry and indicator timers.
        confirmed:  Value the server is known to hold.
        is_ready:   Predicate deciding whether a value is worth sending.
        on_auth_error: Called with the AuthError when the server rejects
                    the credential during autosave.

    Usage:
        title = FieldReconciler("title", entry_id, storage, save_title, scheduler)
        title.edit("Morning pages")     # draft stored, debounce armed
    """

    def __init__(
        self,
        field: str,
        entry_key: str,
        storage: LocalStorage,
        save: SaveFunction,
        scheduler: Scheduler,
        *,
        confirmed: str = "",
        is_ready: Optional[Callable[[str], bool]] = None,
        on_auth_error: Optional[Callable[[AuthError], None]] = None,
        autosave_delay: float = 2.0,
        max_retries: int = 3,
        saved_display_seconds: float = 1.5,
        save_timeout: float = 30.0,
    ):
        self.field = field
        self.entry_key = entry_key
        self.value = confirmed
        self.confirmed = confirmed
        self.state = FieldState.CLEAN
        self.retries = 0
        self.last_error: Optional[JournalAppError] = None

        self.autosave_delay = autosave_delay
        self.max_retries = max_retries
        self.saved_display_seconds = saved_display_seconds
        self.save_timeout = save_timeout

        self._storage = storage
        self._save = save
        self._scheduler = scheduler
        self._is_ready = is_ready or (lambda value: True)
        self._on_auth_error = on_auth_error

        self._timer: Optional[TimerHandle] = None
        self._saving = False
        self._idle = asyncio.Event()
        self._idle.set()
        self._detached = False

    # ── Read-only views ───────────────────────────────────────────────────

    @property
    def key(self) -> DraftKey:
        return DraftKey(self.entry_key, self.field)

    @property
    def dirty(self) -> bool:
        return self.value != self.confirmed

    @property
    def saving(self) -> bool:
        return self._saving

    @property
    def timer_pending(self) -> bool:
        return self._timer is not None

    @property
    def manual_retry_available(self) -> bool:
        """Automatic retries are exhausted and the failure was transient."""
        return (
            self.state is FieldState.SAVE_FAILED
            and self._timer is None
            and isinstance(self.last_error, TRANSIENT_ERRORS)
        )

    @property
    def indicator(self) -> SaveIndicator:
        if self.state is FieldState.SAVING:
            return SaveIndicator.SAVING
        if self.state is FieldState.SAVED:
            return SaveIndicator.SAVED
        if self.state is FieldState.SAVE_FAILED:
            return SaveIndicator.ERROR
        return SaveIndicator.NEUTRAL

    # ── Input ─────────────────────────────────────────────────────────────

    def edit(self, value: str) -> None:
        """A keystroke: persist the draft, then (re)start the debounce."""
        self.value = value
        self._storage.set_draft(self.key, value)
        self._cancel_timer()
        self.last_error = None
        self.state = FieldState.DIRTY

        if self._saving or self._detached:
            # The in-flight save restarts the cycle when it settles
            return

        self.retries = 0
        self._arm_debounce()

    async def retry_now(self) -> None:
        """Manual retry: reset the backoff counter and save immediately."""
        if self._saving or self._detached:
            return
        self._cancel_timer()
        self.retries = 0
        await self._save_current()

    # ── Lifecycle ─────────────────────────────────────────────────────────

    async def settle(self) -> None:
        """Cancel pending timers and wait for an in-flight save to finish."""
        self._cancel_timer()
        while self._saving:
            await self._idle.wait()
        self._cancel_timer()

    def mark_clean(self, value: str) -> None:
        """The server now holds `value` (full save, discard, reload)."""
        self._cancel_timer()
        self.value = value
        self.confirmed = value
        self.retries = 0
        self.last_error = None
        self.state = FieldState.CLEAN

    def detach(self) -> None:
        """Stop all timers; an in-flight save may finish but is ignored."""
        self._detached = True
        self._cancel_timer()

    # ══════════════════════════════════════════════════════════════════════
    # Internals
    # ══════════════════════════════════════════════════════════════════════

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _arm(self, delay: float, callback: Callable[[], Awaitable[None]]) -> None:
        self._cancel_timer()
        self._timer = self._scheduler.call_later(delay, callback)

    def _arm_debounce(self) -> None:
        self._arm(self.autosave_delay, self._on_timer)
        self.state = FieldState.PENDING_SAVE

    async def _on_timer(self) -> None:
        self._timer = None
        await self._save_current()

    async def _on_saved_elapsed(self) -> None:
        self._timer = None
        if self.state is FieldState.SAVED:
            self.state = FieldState.CLEAN

    async def _save_current(self) -> None:
        if self._detached:
            return

        value = self.value
        if value == self.confirmed:
            self.state = FieldState.CLEAN
            return
        if not self._is_ready(value):
            logger.debug("Autosave of %s skipped: value not ready", self.field)
            self.state = FieldState.DIRTY
            return

        self.state = FieldState.SAVING
        self._saving = True
        self._idle.clear()
        try:
            error = await self._attempt(value)
            if self._detached:
                if error is not None:
                    logger.info("Ignored %s save failure after detach: %s", self.field, error.message)
            else:
                self._apply_outcome(value, error)
        finally:
            self._saving = False
            self._idle.set()

    async def _attempt(self, value: str) -> Optional[JournalAppError]:
        try:
            await asyncio.wait_for(self._save(value), timeout=self.save_timeout)
        except asyncio.TimeoutError:
            return NetworkError(
                "Saving took too long",
                context={"field": self.field, "timeout": self.save_timeout},
            )
        except JournalAppError as e:
            return e
        except Exception as e:
            logger.exception("Unexpected failure saving %s", self.field)
            return NetworkError(
                "Saving failed unexpectedly",
                context={"field": self.field, "reason": type(e).__name__},
            )
        return None

    def _apply_outcome(self, value: str, error: Optional[JournalAppError]) -> None:
        edited_meanwhile = self.value != value

        if error is None:
            self.confirmed = value
            self.retries = 0
            self.last_error = None
            if edited_meanwhile:
                self._arm_debounce()
            else:
                self.state = FieldState.SAVED
                self._arm(self.saved_display_seconds, self._on_saved_elapsed)
            return

        self.last_error = error

        if isinstance(error, ValidationError):
            # The user is still typing; a manual save reports it properly
            logger.debug("Server rejected %s during autosave: %s", self.field, error.message)
            self.state = FieldState.DIRTY
            if edited_meanwhile:
                self._arm_debounce()
            return

        if isinstance(error, TRANSIENT_ERRORS):
            if edited_meanwhile:
                self.retries = 0
                self._arm_debounce()
                return
            self.state = FieldState.SAVE_FAILED
            if self.retries < self.max_retries:
                delay = 2 ** self.retries
                self.retries += 1
                logger.warning(
                    "Saving %s failed (%s); retry %d/%d in %ds",
                    self.field, error.message, self.retries, self.max_retries, delay,
                )
                self._arm(delay, self._on_timer)
            else:
                logger.warning("Saving %s failed; automatic retries exhausted", self.field)
            return

        self.state = FieldState.SAVE_FAILED
        if isinstance(error, AuthError):
            logger.info("Autosave of %s rejected: session expired", self.field)
            if self._on_auth_error is not None:
                self._on_auth_error(error)
        elif isinstance(error, NotFoundError):
            logger.warning("Autosave of %s failed: entry no longer exists", self.field)
        else:
            logger.error("Autosave of %s failed: %s", self.field, error.message)
