"""API routes package."""

from . import auth, health, research


__all__ = [
    "auth",
    "health",
    "research",
]
