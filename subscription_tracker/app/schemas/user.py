"""
Pydantic models for users and the auth endpoints.

Users are identified by email.  There is no password: logging in with
an unknown email creates the account, so the login payload is only an
email and an optional display name.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from .base import CamelModel


DEFAULT_USER_NAME = "User"


class UserRead(CamelModel):
    """Schema for reading a user from the API."""

    id: str
    email: str = Field(..., examples=["user@example.com"])
    name: Optional[str] = Field(None, examples=["Jane Doe"])
    created_at: datetime


class LoginRequest(CamelModel):
    email: str = Field(..., max_length=320, pattern=r"^[^@\s]+@[^@\s]+$", examples=["user@example.com"])
    name: Optional[str] = Field(None, max_length=200, examples=["Jane Doe"])

    @field_validator("email", mode="before")
    @classmethod
    def _normalise_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class AuthResponse(CamelModel):
    user: UserRead
    authenticated: bool = True


class LogoutResponse(CamelModel):
    message: str = "Logged out successfully"
    authenticated: bool = False
