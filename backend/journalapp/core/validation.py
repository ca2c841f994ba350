"""
JournalApp — Entry Validation
===============================

What:  Field rules for journal entries, shared by server, editor and store.
Why:   The same rules decide whether a manual save is allowed (hard error)
       and whether an autosave is worth sending (silently skipped).
How:   validate_entry() returns every violation at once so the editor can
       show field-level messages; it never raises.

Rules:
    title    required, 1–255 characters after trimming whitespace
    date     required, a date/datetime or an ISO "YYYY-MM-DD" string
    content  no hard rule; callers may require a minimum length
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

TITLE_MAX_LENGTH = 255

TITLE_REQUIRED = "Title is required"
TITLE_TOO_LONG = f"Title must be at most {TITLE_MAX_LENGTH} characters"
DATE_REQUIRED = "Date is required"
DATE_INVALID = "Date must be a calendar date (YYYY-MM-DD)"


@dataclass(frozen=True)
class EntryValidation:
    """Outcome of validate_entry(): `violations` maps field → reason."""

    violations: Dict[str, str] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.violations


def parse_calendar_date(value: Any) -> Optional[date]:
    """
    Coerce a value into a calendar date, or None if it is not one.

    datetime values lose their time of day; strings must be ISO dates
    (a full ISO timestamp is accepted and truncated to its date).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None


def _title_violation(title: Any) -> Optional[str]:
    if title is None or not isinstance(title, str) or not title.strip():
        return TITLE_REQUIRED
    if len(title.strip()) > TITLE_MAX_LENGTH:
        return TITLE_TOO_LONG
    return None


def _content_violation(content: Any, min_content_length: int) -> Optional[str]:
    if min_content_length <= 0:
        return None
    text = content if isinstance(content, str) else ""
    if len(text.strip()) < min_content_length:
        return f"Content must be at least {min_content_length} characters"
    return None


def validate_entry(candidate: Mapping[str, Any], min_content_length: int = 0) -> EntryValidation:
    """
    Validate a candidate entry (any mapping with title/content/date keys).

    Args:
        candidate: The values about to be saved.
        min_content_length: Caller-specified minimum content length; 0 means
            empty content is allowed.

    Returns:
        EntryValidation with one reason per violated field.
    """
    violations: Dict[str, str] = {}

    title_problem = _title_violation(candidate.get("title"))
    if title_problem:
        violations["title"] = title_problem

    raw_date = candidate.get("date")
    if raw_date is None or (isinstance(raw_date, str) and not raw_date.strip()):
        violations["date"] = DATE_REQUIRED
    elif parse_calendar_date(raw_date) is None:
        violations["date"] = DATE_INVALID

    content_problem = _content_violation(candidate.get("content"), min_content_length)
    if content_problem:
        violations["content"] = content_problem

    return EntryValidation(violations=violations)


def is_autosave_ready(field_name: str, value: Any, min_content_length: int = 0) -> bool:
    """
    Whether a single field value is worth sending during autosave.

    Values that would fail a manual save are not errors here — the user is
    simply not done typing yet.
    """
    if field_name == "title":
        return _title_violation(value) is None
    if field_name == "content":
        return _content_violation(value, min_content_length) is None
    return True
