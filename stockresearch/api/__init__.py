"""API module with routers and dependencies."""

from .app import create_api_app
from .dependencies import (
    get_challenge_store,
    get_session_manager,
    require_session,
)


__all__ = [
    "create_api_app",
    "get_challenge_store",
    "get_session_manager",
    "require_session",
]
