"""
JournalApp — Entry Validation Tests
=====================================

What:  Tests for validate_entry(), is_autosave_ready() and parse_calendar_date().

What we test:
    ✅ Blank, missing and over-long titles
    ✅ Missing and malformed dates
    ✅ Optional minimum content length
    ✅ Autosave readiness never treats "not done typing" as an error
"""

from datetime import date, datetime

import pytest

from journalapp.core.validation import (
    DATE_INVALID,
    DATE_REQUIRED,
    TITLE_MAX_LENGTH,
    TITLE_REQUIRED,
    TITLE_TOO_LONG,
    is_autosave_ready,
    parse_calendar_date,
    validate_entry,
)


class TestValidateEntry:

    def test_valid_entry(self):
        result = validate_entry({"title": "Walk", "content": "", "date": "2024-03-15"})
        assert result.valid
        assert result.violations == {}

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_blank_title_rejected(self, title):
        result = validate_entry({"title": title, "date": date(2024, 3, 15)})
        assert not result.valid
        assert result.violations["title"] == TITLE_REQUIRED

    def test_title_length_boundary(self):
        ok = validate_entry({"title": "x" * TITLE_MAX_LENGTH, "date": date(2024, 3, 15)})
        too_long = validate_entry({"title": "x" * (TITLE_MAX_LENGTH + 1), "date": date(2024, 3, 15)})
        assert ok.valid
        assert too_long.violations["title"] == TITLE_TOO_LONG

    def test_missing_date(self):
        result = validate_entry({"title": "Walk"})
        assert result.violations == {"date": DATE_REQUIRED}

    def test_malformed_date(self):
        result = validate_entry({"title": "Walk", "date": "15/03/2024"})
        assert result.violations == {"date": DATE_INVALID}

    def test_all_violations_reported_together(self):
        result = validate_entry({"title": "", "date": "garbage"})
        assert set(result.violations) == {"title", "date"}

    def test_minimum_content_length(self):
        candidate = {"title": "Walk", "content": "short", "date": "2024-03-15"}
        assert validate_entry(candidate).valid
        result = validate_entry(candidate, min_content_length=10)
        assert "content" in result.violations


class TestAutosaveReadiness:

    def test_blank_title_not_ready(self):
        assert not is_autosave_ready("title", "  ")
        assert is_autosave_ready("title", "Walk")

    def test_content_respects_minimum(self):
        assert is_autosave_ready("content", "")
        assert not is_autosave_ready("content", "abc", min_content_length=5)
        assert is_autosave_ready("content", "abcdef", min_content_length=5)


class TestParseCalendarDate:

    def test_variants(self):
        assert parse_calendar_date(date(2024, 3, 15)) == date(2024, 3, 15)
        assert parse_calendar_date(datetime(2024, 3, 15, 22, 0)) == date(2024, 3, 15)
        assert parse_calendar_date("2024-03-15T10:00:00Z") == date(2024, 3, 15)
        assert parse_calendar_date("") is None
        assert parse_calendar_date("tomorrow") is None
        assert parse_calendar_date(42) is None
