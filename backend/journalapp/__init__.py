"""
JournalApp — Package Initializer
================================

What: Marks the `journalapp` directory as a Python package.
Why:  Enables module imports like `from journalapp.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The package holds both halves of the journaling system:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ownership, validation, streaks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    ┌─────────────────────────────────────┐
    │   core/    streak + validation      │  ← Pure, shared by server and client
    ├─────────────────────────────────────┤
    │   client/  API client, drafts,      │  ← Logic of the mobile client
    │            editor state machine     │     (no UI)
    └─────────────────────────────────────┘

    The core package has no I/O at all. The server computes the authoritative
    streak with it; the client uses the same function as its fallback when
    the server streak cannot be fetched.
"""

__version__ = "1.0.0"
