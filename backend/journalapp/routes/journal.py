"""
JournalApp Backend — Journal Route Handlers
=============================================

What:  CRUD, search and streak endpoints under /api/journal.
Why:   The mobile client's entry list, entry editor and streak counter all
       talk to these routes.
How:   Every handler depends on get_current_user (bearer token) and
       delegates to EntryService with the caller's id.

Route order matters: /search and /streak are declared before /{entry_id}
so they are not captured as ids.

Caching Strategy:
    Entries are private and editable — responses carry `Cache-Control: no-store`.
"""

import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from journalapp.auth import get_current_user
from journalapp.database import get_db_session
from journalapp.models.user import User
from journalapp.schemas.common import ErrorResponse
from journalapp.schemas.entry import (
    EntryCreate,
    EntryResponse,
    EntryUpdate,
    MessageResponse,
    StreakResponse,
)
from journalapp.services.entry_service import entry_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/journal", tags=["Journal"])

AUTH_ERRORS = {401: {"description": "Missing or expired token", "model": ErrorResponse}}
NOT_FOUND = {404: {"description": "Entry not found", "model": ErrorResponse}}
BAD_INPUT = {400: {"description": "Invalid entry data", "model": ErrorResponse}}


@router.get(
    "",
    response_model=List[EntryResponse],
    responses={**AUTH_ERRORS},
    summary="List the caller's journal entries (newest date first)",
)
async def list_entries(
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[EntryResponse]:
    entries = await entry_service.list_entries(db, owner_id=user.id)
    response.headers["X-Total-Count"] = str(len(entries))
    response.headers["Cache-Control"] = "no-store"
    return entries


@router.get(
    "/search",
    response_model=List[EntryResponse],
    responses={**AUTH_ERRORS, **BAD_INPUT},
    summary="Search entries by title or content",
)
async def search_entries(
    request: Request,
    query: str = Query(default="", description="Text to look for in title or content"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[EntryResponse]:
    return await entry_service.search_entries(
        db,
        owner_id=user.id,
        query=query,
        limit=request.app.state.settings.search_result_limit,
    )


@router.get(
    "/streak",
    response_model=StreakResponse,
    responses={**AUTH_ERRORS},
    summary="Current journaling streak",
    description=(
        "Number of consecutive days, ending today or yesterday, with at least one entry. "
        "longest_streak is reported equal to current_streak."
    ),
)
async def get_streak(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> StreakResponse:
    return await entry_service.get_streak(db, owner_id=user.id)


@router.get(
    "/{entry_id}",
    response_model=EntryResponse,
    responses={**AUTH_ERRORS, **NOT_FOUND},
    summary="Get a single entry",
)
async def get_entry(
    entry_id: UUID,
    response: Response,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    response.headers["Cache-Control"] = "no-store"
    return await entry_service.get_entry(db, owner_id=user.id, entry_id=entry_id)


@router.post(
    "",
    status_code=201,
    response_model=EntryResponse,
    responses={**AUTH_ERRORS, **BAD_INPUT},
    summary="Create an entry",
    description="Title is required (1-255 characters). Content may be empty. Date defaults to today.",
)
async def create_entry(
    payload: EntryCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.create_entry(db, owner_id=user.id, payload=payload)


@router.put(
    "/{entry_id}",
    response_model=EntryResponse,
    responses={**AUTH_ERRORS, **BAD_INPUT, **NOT_FOUND},
    summary="Update an entry",
    description="Partial update: omitted fields keep their stored values.",
)
async def update_entry(
    entry_id: UUID,
    payload: EntryUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> EntryResponse:
    return await entry_service.update_entry(db, owner_id=user.id, entry_id=entry_id, payload=payload)


@router.delete(
    "/{entry_id}",
    response_model=MessageResponse,
    responses={**AUTH_ERRORS, **NOT_FOUND},
    summary="Delete an entry",
)
async def delete_entry(
    entry_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await entry_service.delete_entry(db, owner_id=user.id, entry_id=entry_id)
    return MessageResponse(message="Entry removed")
