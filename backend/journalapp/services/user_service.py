"""
JournalApp Backend — User Service
===================================

What:  Account registration, login and profile lookup.
How:   Passwords are hashed with passlib before they touch the database;
       successful registration and login both return a signed bearer token.
Who:   Called by the /api/users route handlers.
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from journalapp.auth import create_access_token, hash_password, verify_password
from journalapp.config import Settings
from journalapp.exceptions import AuthError, DatabaseError, JournalAppError, NotFoundError, ValidationError
from journalapp.models.entry import JournalEntry  # noqa: F401  (registers the entries mapper)
from journalapp.models.user import User
from journalapp.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserProfile

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic layer for accounts.

    Responsibilities:
        - register(): unique username/email, hashed password, token
        - login(): password check, last-login timestamp, token
        - get_profile(): the caller's own account
    """

    async def register(self, db: AsyncSession, payload: RegisterRequest, settings: Settings) -> AuthResponse:
        """
        Raises:
            ValidationError: username or email already taken
        """
        email = payload.email.lower()
        try:
            result = await db.execute(
                select(User).where(or_(User.email == email, User.username == payload.username))
            )
            if result.scalars().first() is not None:
                raise ValidationError(message="User already exists")

            user = User(
                username=payload.username,
                email=email,
                password_hash=hash_password(payload.password),
            )
            db.add(user)
            await db.flush()
            logger.info("Registered user %s", user.id)
        except JournalAppError:
            raise
        except Exception as e:
            logger.error("Database error registering user: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        return AuthResponse(
            id=user.id,
            username=user.username,
            email=user.email,
            token=create_access_token(user.id, settings),
        )

    async def login(self, db: AsyncSession, payload: LoginRequest, settings: Settings) -> AuthResponse:
        """
        Raises:
            AuthError: unknown email or wrong password (same message for both)
        """
        try:
            result = await db.execute(select(User).where(User.email == payload.email.lower()))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        if user is None or not verify_password(payload.password, user.password_hash):
            raise AuthError(message="Invalid email or password")

        user.last_login_at = datetime.now(timezone.utc)
        await db.flush()
        logger.info("User %s logged in", user.id)

        return AuthResponse(
            id=user.id,
            username=user.username,
            email=user.email,
            token=create_access_token(user.id, settings),
        )

    async def get_profile(self, db: AsyncSession, user_id: UUID) -> UserProfile:
        result = await db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return UserProfile.model_validate(user)


user_service = UserService()
