"""Email one-time-code login and server-side sessions."""

from .otp import ChallengeStore, LoginChallenge, generate_login_code, normalize_email
from .sessions import SessionData, SessionManager


__all__ = [
    "ChallengeStore",
    "LoginChallenge",
    "SessionData",
    "SessionManager",
    "generate_login_code",
    "normalize_email",
]
