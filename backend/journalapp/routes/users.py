"""
JournalApp Backend — Account Route Handlers
=============================================

What:  POST /api/users/register, POST /api/users/login, GET /api/users/profile.
Who:   Called by the client's login and registration flow.
"""

import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from journalapp.auth import get_current_user
from journalapp.database import get_db_session
from journalapp.models.user import User
from journalapp.schemas.common import ErrorResponse
from journalapp.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserProfile
from journalapp.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post(
    "/register",
    status_code=201,
    response_model=AuthResponse,
    responses={400: {"description": "User already exists", "model": ErrorResponse}},
    summary="Register a new account",
)
async def register(
    payload: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.register(db, payload, request.app.state.settings)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid email or password", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await user_service.login(db, payload, request.app.state.settings)


@router.get(
    "/profile",
    response_model=UserProfile,
    responses={401: {"description": "Missing or expired token", "model": ErrorResponse}},
    summary="The authenticated account",
)
async def profile(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    return await user_service.get_profile(db, user.id)
