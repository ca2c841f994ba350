"""
JournalApp — Journal Entry Request/Response Schemas
=====================================================

What:  Pydantic models defining the journal API contract.
Why:   Strict input validation, automatic serialization, and OpenAPI doc generation.
Who:   Used by route handlers on the server and parsed by the client API layer,
       so both sides share one definition of an entry.

Design Decision:
    Title length and date format are checked by Pydantic at the edge (422),
    while "title must not be blank" is a business rule checked by
    core.validation and reported as 400 with field-level violations, the
    same way the editor reports it before a manual save.
"""

import uuid
from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class EntryCreate(BaseModel):
    """
    Body of POST /api/journal.

    `date` defaults to the server's current day when omitted; `content` may
    be empty.
    """
    title: str = Field(default="", max_length=255, description="Entry title (1-255 characters)")
    content: str = Field(default="", description="Entry body, may be empty")
    date: Optional[date_type] = Field(default=None, description="Calendar day (YYYY-MM-DD); defaults to today")


class EntryUpdate(BaseModel):
    """
    Body of PUT /api/journal/{id}.

    Partial update: fields left out (or null) keep their stored value. The
    editor's per-field autosave sends one field; a full save sends all three.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None)
    date: Optional[date_type] = Field(default=None)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class EntryResponse(BaseModel):
    """Full representation of a journal entry."""
    id: uuid.UUID = Field(description="Entry identifier assigned by the server")
    title: str
    content: str
    date: date_type
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StreakResponse(BaseModel):
    """
    Streak figures for the current user.

    longest_streak equals current_streak; no historical maximum is kept.
    """
    current_streak: int = Field(ge=0)
    longest_streak: int = Field(ge=0)
    last_entry_date: Optional[date_type] = None


class MessageResponse(BaseModel):
    message: str
