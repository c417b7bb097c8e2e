"""One-time login codes.

A challenge is a 6-digit code bound to an email address. Each email has at most
one pending challenge; requesting a new one overwrites the old slot. A
challenge is consumed on successful verification and deleted when a verify
attempt finds it expired.

Failed attempts are not counted: a pending challenge can be retried until it
succeeds or expires. Two concurrent verifies with the right code may both
succeed, since the read and the delete are separate operations.
"""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from pydantic import BaseModel

from stockresearch.cache.store import KeyValueStore, store_key
from stockresearch.core.config import settings
from stockresearch.core.exceptions import (
    ChallengeExpiredError,
    ChallengeMismatchError,
    ChallengeNotFoundError,
    ValidationError,
)
from stockresearch.core.logging import get_logger


logger = get_logger("auth.otp")

CODE_MIN = 100000
CODE_MAX = 999999


class LoginChallenge(BaseModel):
    """Pending login code for one email."""

    email: str
    code: str
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_email(email: Optional[str]) -> str:
    """Trim and lowercase an email address."""
    return (email or "").strip().lower()


def generate_login_code() -> str:
    """Uniform 6-digit code from the OS CSPRNG."""
    return str(CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1))


def deliver_login_code(email: str, code: str) -> None:
    """Stand-in for an email sender: the code goes to the server log."""
    logger.info(f"Login code for {email}: {code}")


class ChallengeStore:
    """Issues and verifies login challenges on top of a key-value store."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl_seconds: Optional[int] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.ttl_seconds = ttl_seconds or settings.otp_ttl_seconds
        self.clock = clock

    @staticmethod
    def _key(email: str) -> str:
        return store_key(email, prefix="otp")

    async def get(self, email: str) -> Optional[LoginChallenge]:
        raw = await self.store.get(self._key(normalize_email(email)))
        return None if raw is None else LoginChallenge.model_validate(raw)

    async def request_challenge(self, email: Optional[str]) -> LoginChallenge:
        """Create (or replace) the pending challenge for an email."""
        email = normalize_email(email)
        if not email:
            raise ValidationError(message="Email is required")

        challenge = LoginChallenge(
            email=email,
            code=generate_login_code(),
            expires_at=self.clock() + timedelta(seconds=self.ttl_seconds),
        )
        # Kept past expiry so a late attempt reports "expired", not "not found"
        await self.store.put(
            self._key(email),
            challenge.model_dump(mode="json"),
            ttl=self.ttl_seconds * 2,
        )
        deliver_login_code(email, challenge.code)
        return challenge

    async def verify_challenge(self, email: Optional[str], code: Optional[str]) -> str:
        """Consume the pending challenge. Returns the normalized email."""
        email = normalize_email(email)
        code = (code or "").strip()
        key = self._key(email)

        raw = await self.store.get(key)
        if raw is None:
            raise ChallengeNotFoundError()

        challenge = LoginChallenge.model_validate(raw)
        if challenge.email != email:
            raise ChallengeNotFoundError()

        if challenge.is_expired(self.clock()):
            await self.store.compare_and_delete(key, raw)
            logger.info(f"Expired login code discarded for {email}")
            raise ChallengeExpiredError()

        if not secrets.compare_digest(challenge.code.encode(), code.encode()):
            raise ChallengeMismatchError()

        await self.store.delete(key)
        return email
