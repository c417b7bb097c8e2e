"""Auth-related schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Request a one-time code.

    Missing fields default to empty strings so an absent email is reported as
    "Email is required" instead of a schema error.
    """

    email: str = Field(default="", max_length=320, description="Email address")


class VerifyRequest(BaseModel):
    """Exchange a one-time code for a session."""

    email: str = Field(default="", max_length=320, description="Email address")
    code: str = Field(default="", max_length=32, description="6-digit login code")


class VerifyResponse(BaseModel):
    email: str = Field(..., description="Authenticated email")


class SessionResponse(BaseModel):
    authenticated: bool
    email: Optional[str] = None


class LogoutResponse(BaseModel):
    ok: bool = True
