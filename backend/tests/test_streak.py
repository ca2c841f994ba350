"""
JournalApp — Streak Calculation Tests
=======================================

What:  Tests for compute_streak() and summarize_streak().
Why:   The same function backs the server endpoint and the client fallback;
       a regression here shows a wrong number on every home screen.
How:   Pure function tests with an injected `today`.

What we test:
    ✅ Empty input, single entries today/yesterday, broken streaks
    ✅ Duplicate dates neither inflate nor break the count
    ✅ Gap inside the chain stops the walk
    ✅ Mixed input types (date, datetime, ISO string)
    ✅ longest_streak mirrors current_streak
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from journalapp.core.streak import compute_streak, summarize_streak

TODAY = date(2024, 3, 15)


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


class TestComputeStreak:
    """Tests for the current streak count."""

    def test_no_entries_is_zero(self):
        assert compute_streak([], TODAY) == 0

    def test_single_entry_today(self):
        assert compute_streak([TODAY], TODAY) == 1

    def test_single_entry_yesterday_keeps_streak_alive(self):
        assert compute_streak([days_ago(1)], TODAY) == 1

    def test_three_consecutive_days(self):
        assert compute_streak([TODAY, days_ago(1), days_ago(2)], TODAY) == 3

    def test_gap_breaks_chain(self):
        assert compute_streak([TODAY, days_ago(2)], TODAY) == 1

    def test_duplicates_count_once(self):
        assert compute_streak([TODAY, TODAY], TODAY) == 1
        assert compute_streak([TODAY, TODAY, days_ago(1), days_ago(1)], TODAY) == 2

    def test_chain_stops_at_first_gap(self):
        dates = [TODAY, days_ago(1), days_ago(2), days_ago(4)]
        assert compute_streak(dates, TODAY) == 3

    @pytest.mark.parametrize("newest_gap", [2, 3, 10, 400])
    def test_stale_newest_entry_is_zero(self, newest_gap):
        dates = [days_ago(newest_gap + i) for i in range(5)]
        assert compute_streak(dates, TODAY) == 0

    def test_order_of_input_does_not_matter(self):
        dates = [days_ago(2), TODAY, days_ago(1)]
        assert compute_streak(dates, TODAY) == 3

    def test_recomputing_gives_same_result(self):
        dates = [TODAY, days_ago(1), days_ago(3)]
        assert compute_streak(dates, TODAY) == compute_streak(dates, TODAY) == 2

    def test_accepts_strings_and_datetimes(self):
        dates = [
            "2024-03-15",
            datetime(2024, 3, 14, 23, 59, tzinfo=timezone.utc),
            "2024-03-13T08:00:00.000Z",
        ]
        assert compute_streak(dates, TODAY) == 3

    def test_future_entry_counts_as_active(self):
        assert compute_streak([days_ago(-1), TODAY], TODAY) == 2

    def test_invalid_date_raises(self):
        with pytest.raises(ValueError):
            compute_streak(["not a date"], TODAY)


class TestSummarizeStreak:
    """Tests for the API-shaped summary."""

    def test_empty_summary(self):
        summary = summarize_streak([], TODAY)
        assert summary.current_streak == 0
        assert summary.longest_streak == 0
        assert summary.last_entry_date is None

    def test_longest_equals_current(self):
        # A longer historical run is not tracked
        dates = [TODAY, days_ago(1)] + [days_ago(10 + i) for i in range(7)]
        summary = summarize_streak(dates, TODAY)
        assert summary.current_streak == 2
        assert summary.longest_streak == 2
        assert summary.last_entry_date == TODAY

    def test_broken_streak_still_reports_last_date(self):
        summary = summarize_streak([days_ago(5)], TODAY)
        assert summary.current_streak == 0
        assert summary.last_entry_date == days_ago(5)
