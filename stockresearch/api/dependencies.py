"""API dependencies for the challenge store and session gate."""

from __future__ import annotations

from fastapi import Depends, Request

from stockresearch.auth.otp import ChallengeStore
from stockresearch.auth.sessions import SessionManager


__all__ = [
    "get_challenge_store",
    "get_session_manager",
    "require_session",
]


def get_challenge_store(request: Request) -> ChallengeStore:
    return request.app.state.challenges


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


async def require_session(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
) -> str:
    """
    Require a signed-in user.

    Returns the session email. Raises AuthRequiredError otherwise.
    """
    return await sessions.require_session(request)
