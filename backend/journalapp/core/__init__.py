# Core package init
"""
JournalApp — Shared Core
=========================

What:  Pure functions shared by the server and the client.
Why:   The streak used to be computed twice (server and app) and the two
       copies drifted apart. One implementation, imported by both sides,
       keeps them consistent.

Module Inventory:
    - streak.py:      compute_streak(), summarize_streak()
    - validation.py:  validate_entry(), is_autosave_ready(), parse_calendar_date()
"""

from journalapp.core.streak import StreakSummary, compute_streak, summarize_streak
from journalapp.core.validation import (
    EntryValidation,
    is_autosave_ready,
    parse_calendar_date,
    validate_entry,
)

__all__ = [
    "EntryValidation",
    "StreakSummary",
    "compute_streak",
    "is_autosave_ready",
    "parse_calendar_date",
    "summarize_streak",
    "validate_entry",
]
