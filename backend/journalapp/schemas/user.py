"""
JournalApp — Account Request/Response Schemas
===============================================

What:  Pydantic models for registration, login and the profile endpoint.
Security: Responses never include the password hash.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class AuthResponse(BaseModel):
    """
    Returned by register and login.

    The client stores `token` in its session and sends it as
    `Authorization: Bearer <token>` on every journal call.
    """
    id: uuid.UUID
    username: str
    email: EmailStr
    token: str


class UserProfile(BaseModel):
    id: uuid.UUID
    username: str
    email: EmailStr
    created_at: datetime
    last_login_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
