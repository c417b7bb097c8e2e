"""Core infrastructure: settings, logging, exceptions."""

from .config import settings
from .exceptions import (
    ApiError,
    AppException,
    AuthChallengeError,
    AuthRequiredError,
    CacheError,
    ChallengeExpiredError,
    ChallengeMismatchError,
    ChallengeNotFoundError,
    UnknownTickerError,
    ValidationError,
)


__all__ = [
    "ApiError",
    "AppException",
    "AuthChallengeError",
    "AuthRequiredError",
    "CacheError",
    "ChallengeExpiredError",
    "ChallengeMismatchError",
    "ChallengeNotFoundError",
    "UnknownTickerError",
    "ValidationError",
    "settings",
]
