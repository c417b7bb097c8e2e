"""Authentication routes: one-time code login and session lifecycle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from stockresearch.api.dependencies import get_challenge_store, get_session_manager
from stockresearch.auth.otp import ChallengeStore
from stockresearch.auth.sessions import SessionManager
from stockresearch.schemas.auth import (
    LoginRequest,
    LogoutResponse,
    SessionResponse,
    VerifyRequest,
    VerifyResponse,
)
from stockresearch.schemas.common import MessageResponse

router = APIRouter()


@router.post(
    "/login",
    response_model=MessageResponse,
    summary="Request a login code",
    description="Send a one-time login code to the given email address.",
    responses={
        400: {"description": "Email is missing"},
    },
)
async def login(
    payload: LoginRequest,
    challenges: ChallengeStore = Depends(get_challenge_store),
) -> MessageResponse:
    """The code itself is never part of the response."""
    await challenges.request_challenge(payload.email)
    return MessageResponse(message="One-time login code sent. Check your email inbox.")


@router.post(
    "/verify",
    response_model=VerifyResponse,
    summary="Verify a login code",
    description="Exchange a pending login code for a session cookie.",
    responses={
        400: {"description": "No pending login, expired code or wrong code"},
    },
)
async def verify(
    payload: VerifyRequest,
    response: Response,
    challenges: ChallengeStore = Depends(get_challenge_store),
    sessions: SessionManager = Depends(get_session_manager),
) -> VerifyResponse:
    email = await challenges.verify_challenge(payload.email, payload.code)
    await sessions.start_session(response, email)
    return VerifyResponse(email=email)


@router.get(
    "/session",
    response_model=SessionResponse,
    response_model_exclude_none=True,
    summary="Current session",
)
async def get_session(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionResponse:
    return SessionResponse(**await sessions.current_session(request))


@router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Logout",
    description="Destroy the session and clear the cookie. Safe to call when signed out.",
)
async def logout(
    request: Request,
    response: Response,
    sessions: SessionManager = Depends(get_session_manager),
) -> LogoutResponse:
    await sessions.end_session(request, response)
    return LogoutResponse(ok=True)
