"""
JournalApp Client — Configuration
===================================

What:  Tunables of the client layer, loaded from JOURNAL_CLIENT_* variables.
Why:   Debounce and retry timings differ between a phone on LTE, a CI run
       and a developer's laptop; none of them should need a code change.
How:   Same Pydantic Settings pattern as the server configuration, with its
       own prefix so both can live in one .env file.
"""

from pydantic import Field
from pydantic_settings import BaseSettings


class ClientSettings(BaseSettings):
    """Client-side settings. Every field has a default suitable for the app."""

    # ── Service ───────────────────────────────────────────────────────────
    api_base_url: str = Field(default="http://localhost:3000")

    # What: Upper bound for any single HTTP call, in seconds
    # A save that hangs longer counts as a network failure
    request_timeout: float = Field(default=30.0, gt=0, le=300)

    # What: Read-only calls (GET) are retried on network failures
    read_retry_attempts: int = Field(default=3, ge=1, le=10)
    read_retry_initial_wait: float = Field(default=0.5, ge=0)
    read_retry_max_wait: float = Field(default=4.0, ge=0)

    # ── Autosave ──────────────────────────────────────────────────────────
    # What: Quiet period after the last keystroke before a field is saved
    autosave_delay: float = Field(default=2.0, ge=0)

    # What: Automatic retries after a failed save (delays 1s, 2s, 4s)
    max_save_retries: int = Field(default=3, ge=0, le=10)

    # What: How long the "Saved" indicator stays visible
    saved_display_seconds: float = Field(default=1.5, ge=0)

    # What: Minimum content length for a save; 0 allows empty content
    min_content_length: int = Field(default=0, ge=0)

    # ── Local Storage ─────────────────────────────────────────────────────
    # What: SQLite file holding drafts and the cached credential
    local_store_path: str = Field(default="journal_client.db")

    model_config = {
        "env_prefix": "JOURNAL_CLIENT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }
