"""
JournalApp Backend — Authentication Helpers
=============================================

What:  Password hashing, bearer token issuance/verification, and the
       `get_current_user` FastAPI dependency.
Why:   Every journal route is scoped to the caller; this module is the one
       place that turns an Authorization header into a User.
How:   passlib's CryptContext hashes passwords; python-jose signs HS256 JWTs
       whose `sub` claim is the user id. Any problem with the credential
       raises AuthError, which the global handler renders as 401.

Token Format:
    {"sub": "<user uuid>", "exp": <unix time>}
    Lifetime: settings.jwt_expire_days (default 30)
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journalapp.config import Settings
from journalapp.database import get_db_session
from journalapp.exceptions import AuthError
from journalapp.models.user import User

logger = logging.getLogger(__name__)

# pbkdf2_sha256 is implemented by passlib itself, no native backend required
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# auto_error=False: a missing header must become our AuthError, not FastAPI's 403
bearer_scheme = HTTPBearer(auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    user_id: uuid.UUID,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Sign a bearer token for `user_id`."""
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(days=settings.jwt_expire_days))
    claims = {"sub": str(user_id), "exp": expire}
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> uuid.UUID:
    """
    Verify a bearer token and return its subject.

    Raises:
        AuthError: bad signature, expired, or no usable `sub` claim.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthError(context={"reason": type(e).__name__})

    subject = payload.get("sub")
    if not subject:
        raise AuthError(context={"reason": "missing_subject"})
    try:
        return uuid.UUID(subject)
    except ValueError:
        raise AuthError(context={"reason": "malformed_subject"})


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> User:
    """
    FastAPI dependency resolving the authenticated account.

    Raises:
        AuthError: header missing, token invalid/expired, or the account no
            longer exists.
    """
    if credentials is None or not credentials.credentials:
        raise AuthError(message="Not authorized, no token")

    settings: Settings = request.app.state.settings
    user_id = decode_access_token(credentials.credentials, settings)

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        logger.warning("Token subject %s no longer exists", user_id)
        raise AuthError(context={"reason": "unknown_user"})
    return user
