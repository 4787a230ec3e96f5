"""
Copydesk Backend — Auth Request/Response Schemas
==================================================

What:  Pydantic models for the login and verify endpoints.
How:   Request fields are optional at the schema level so that a missing
       username/password surfaces as our own 400 ValidationError rather than
       FastAPI's 422. Responses use camelCase aliases (`displayName`) because
       the plugin consumes them directly.
"""

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Body of POST /api/figma/auth."""
    username: Optional[str] = Field(default=None, description="Local account username")
    password: Optional[str] = Field(default=None, description="Plaintext password")


class UserInfo(BaseModel):
    """
    Public identity of an authenticated user.

    Returned by both login and verify; never includes the password hash.
    """
    id: int = Field(description="User ID")
    username: str = Field(description="Login name")
    display_name: Optional[str] = Field(
        default=None,
        alias="displayName",
        description="Name shown in the plugin UI",
    )
    role: Optional[str] = Field(default=None, description="Account role")

    model_config = {"populate_by_name": True, "from_attributes": True}


class LoginResponse(BaseModel):
    """Successful login: a fresh bearer token plus the user it belongs to."""
    token: str = Field(description="Opaque bearer token (64 hex characters)")
    user: UserInfo


class VerifyResponse(BaseModel):
    """Successful token verification."""
    valid: bool = Field(default=True)
    user: UserInfo
