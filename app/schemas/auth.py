"""
==============================================================================
Authentication Schemas Module
==============================================================================

Request and response schemas for admin authentication endpoints.

==============================================================================
"""

from pydantic import BaseModel, Field, field_validator


class LoginRequest(BaseModel):
    """Login credentials."""
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1)

    @field_validator("username")
    @classmethod
    def normalize_username(cls, v: str) -> str:
        return v.lower().strip()


class AdminInfo(BaseModel):
    """Authenticated administrator."""
    username: str
    role: str = Field(default="admin")


class TokenResponse(BaseModel):
    """Token response after authentication."""
    success: bool = Field(default=True)
    access_token: str
    refresh_token: str
    token_type: str = Field(default="bearer")
    expires_in: int
    user: AdminInfo


class RefreshRequest(BaseModel):
    """Token refresh request."""
    refresh_token: str


class CurrentAdminResponse(BaseModel):
    """Current administrator response."""
    success: bool = Field(default=True)
    user: AdminInfo
