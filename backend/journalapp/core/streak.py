"""
JournalApp — Streak Calculation
=================================

What:  Counts consecutive calendar days with at least one journal entry.
Why:   Shown on the home screen as motivation. The server answer is
       authoritative; the client recomputes locally only when the server
       streak cannot be fetched. Both call this module.
How:   Pure function of the entry dates and a caller-supplied `today`.
       Reading the clock is the caller's job, which keeps tests deterministic.

Algorithm:
    1. No dates → 0
    2. Deduplicate (many entries on one day count once), sort newest first
    3. gap = today - newest
       gap > 1  → streak broken, 0
       gap <= 1 → the streak is alive (last entry today or yesterday)
    4. Walk adjacent pairs; each one-day step adds 1, the first larger
       step ends the walk

    Example (D = today): [D, D-1, D-2, D-4] → 3

Longest streak:
    Reported equal to the current streak. There is no historical maximum
    tracking; clients already display it this way.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from journalapp.core.validation import parse_calendar_date


@dataclass(frozen=True)
class StreakSummary:
    current_streak: int
    longest_streak: int
    last_entry_date: Optional[date]


def _distinct_days_desc(dates: Iterable) -> List[date]:
    days = set()
    for value in dates:
        day = parse_calendar_date(value)
        if day is None:
            raise ValueError(f"Not a calendar date: {value!r}")
        days.add(day)
    return sorted(days, reverse=True)


def compute_streak(dates: Iterable, today: date) -> int:
    """
    Current streak for a collection of entry dates.

    Args:
        dates: date, datetime or ISO date strings; duplicates allowed.
        today: The reference day. Time of day never matters.

    Returns:
        Number of consecutive days ending today or yesterday, else 0.

    Raises:
        ValueError: if a value cannot be read as a calendar date.
    """
    days = _distinct_days_desc(dates)
    if not days:
        return 0

    # A future-dated newest entry yields a negative gap and still counts as active
    if (today - days[0]).days > 1:
        return 0

    streak = 1
    for newer, older in zip(days, days[1:]):
        if (newer - older).days != 1:
            break
        streak += 1
    return streak


def summarize_streak(dates: Iterable, today: date) -> StreakSummary:
    """Streak figures in the shape the API returns."""
    days = _distinct_days_desc(dates)
    current = compute_streak(days, today)
    return StreakSummary(
        current_streak=current,
        longest_streak=current,
        last_entry_date=days[0] if days else None,
    )
