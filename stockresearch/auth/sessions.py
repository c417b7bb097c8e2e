"""Server-side sessions behind a signed cookie.

The session record ``{email, created_at}`` lives in the key-value store under
an opaque id. The browser only holds the id, wrapped in an HS256 token signed
with ``AUTH_SECRET`` so that forged ids are rejected before any lookup.
Sessions last ``SESSION_TTL`` seconds from creation (absolute window).
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

import jwt
from fastapi import Request, Response
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from stockresearch.cache.store import KeyValueStore, store_key
from stockresearch.core.config import settings
from stockresearch.core.exceptions import AuthRequiredError, CacheError
from stockresearch.core.logging import get_logger

from .otp import utcnow


logger = get_logger("auth.sessions")

JWT_ALGORITHM = "HS256"
JWT_ISSUER = "stockresearch"
JWT_AUDIENCE = "stockresearch-web"


class SessionData(BaseModel):
    """Server-side session record."""

    email: str
    created_at: datetime


class SessionManager:
    """Creates, resolves and destroys sessions."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: Optional[int] = None,
        secret: Optional[str] = None,
        cookie_name: Optional[str] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds or settings.session_ttl
        self.secret = secret or settings.auth_secret
        self.cookie_name = cookie_name or settings.session_cookie_name
        self.clock = clock

    @staticmethod
    def _key(session_id: str) -> str:
        return store_key(session_id, prefix="session")

    def _encode(self, session_id: str, issued_at: datetime) -> str:
        payload = {
            "jti": session_id,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.ttl_seconds),
            "iss": JWT_ISSUER,
            "aud": JWT_AUDIENCE,
        }
        return jwt.encode(payload, self.secret, algorithm=JWT_ALGORITHM)

    def _decode(self, token: str) -> Optional[str]:
        """Return the session id carried by a cookie, or None if it is not ours."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[JWT_ALGORITHM],
                issuer=JWT_ISSUER,
                audience=JWT_AUDIENCE,
                options={"require": ["exp", "iat", "iss", "aud", "jti"]},
            )
        except jwt.InvalidTokenError:
            return None
        return payload["jti"]

    async def create(self, email: str) -> str:
        """Store a new session and return the cookie value."""
        session_id = secrets.token_urlsafe(32)
        now = self.clock()
        data = SessionData(email=email, created_at=now)
        await self.store.put(
            self._key(session_id), data.model_dump(mode="json"), ttl=self.ttl_seconds
        )
        logger.info(f"Signed in {email}")
        return self._encode(session_id, now)

    async def resolve(self, token: Optional[str]) -> Optional[SessionData]:
        """Map a cookie value to its session, or None.

        A store outage on the lookup raises CacheError. A corrupt record or
        a failed cleanup of an expired one reads as no session.
        """
        if not token:
            return None
        session_id = self._decode(token)
        if session_id is None:
            return None

        raw = await self.store.get(self._key(session_id))
        if raw is None:
            return None
        try:
            data = SessionData.model_validate(raw)
        except PydanticValidationError:
            logger.warning("Ignoring unreadable session record")
            return None

        if self.clock() > data.created_at + timedelta(seconds=self.ttl_seconds):
            try:
                await self.store.delete(self._key(session_id))
            except CacheError as e:
                logger.warning(f"Expired session cleanup failed: {e}")
            return None
        return data

    async def destroy(self, token: Optional[str]) -> None:
        """Delete the session behind a cookie value. Unknown cookies are ignored."""
        session_id = self._decode(token) if token else None
        if session_id is not None:
            await self.store.delete(self._key(session_id))

    def set_cookie(self, response: Response, token: str) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            httponly=True,
            secure=settings.https_enabled,
            samesite="lax",
            domain=settings.domain,
            max_age=self.ttl_seconds,
        )

    def clear_cookie(self, response: Response) -> None:
        response.delete_cookie(
            key=self.cookie_name,
            domain=settings.domain,
            path="/",
        )

    # Request-level operations

    async def start_session(self, response: Response, email: str) -> None:
        self.set_cookie(response, await self.create(email))

    async def current_session(self, request: Request) -> dict[str, Any]:
        """``{"authenticated": True, "email": ...}`` or ``{"authenticated": False}``. Never raises."""
        try:
            data = await self.resolve(request.cookies.get(self.cookie_name))
        except CacheError as e:
            logger.error(f"Session lookup failed: {e}")
            return {"authenticated": False}
        if data is None:
            return {"authenticated": False}
        return {"authenticated": True, "email": data.email}

    async def end_session(self, request: Request, response: Response) -> None:
        await self.destroy(request.cookies.get(self.cookie_name))
        self.clear_cookie(response)

    async def require_session(self, request: Request) -> str:
        """Email of the signed-in user, or AuthRequiredError."""
        data = await self.resolve(request.cookies.get(self.cookie_name))
        if data is None:
            raise AuthRequiredError()
        return data.email
