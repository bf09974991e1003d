"""
Session models - Authenticated identity and screen routing.
"""
from pydantic import BaseModel, Field
from typing import Optional
from enum import Enum


class SessionState(str, Enum):
    """Authentication state of the client."""
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class Screen(str, Enum):
    """Top-level screens the session routes between."""
    LOGIN = "login"
    REGISTER = "register"
    DASHBOARD = "dashboard"


class User(BaseModel):
    """The logged-in traveler. Email is unknown after a token restore."""
    email: Optional[str] = None


class TokenResponse(BaseModel):
    """Response of POST /token."""
    access_token: str
    token_type: str = "bearer"


class Session(BaseModel):
    """An authenticated session: bearer token plus user."""
    token: str = Field(..., min_length=1, description="Opaque bearer token")
    user: User = Field(default_factory=User)
    restored: bool = Field(
        default=False,
        description="True when rebuilt from stored credentials without a login"
    )
