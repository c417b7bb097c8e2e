"""Pydantic schemas for API request/response validation."""

from .auth import (
    LoginRequest,
    LogoutResponse,
    SessionResponse,
    VerifyRequest,
    VerifyResponse,
)
from .common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)
from .research import (
    ConsensusScore,
    ResearchRecord,
    ResearchResponse,
    TickerSearchResult,
    format_display_date,
)


__all__ = [
    # Auth
    "LoginRequest",
    "LogoutResponse",
    "SessionResponse",
    "VerifyRequest",
    "VerifyResponse",
    # Common
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    # Research
    "ConsensusScore",
    "ResearchRecord",
    "ResearchResponse",
    "TickerSearchResult",
    "format_display_date",
]
