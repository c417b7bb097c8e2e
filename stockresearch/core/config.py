"""Application settings with Pydantic validation and environment loading."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, List, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


DEFAULT_AUTH_SECRET = "dev-secret-please-change-in-production-min-32-chars"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = "Stock Research API"
    app_version: str = "1.0.0"
    debug: bool = Field(
        default=False, description="Enable debug mode (disable in production)"
    )
    root_path: str = Field(default="", description="Root path for reverse proxy")
    environment: str = Field(
        default="production",
        description="Environment: development, staging, production",
    )

    # Security
    auth_secret: str = Field(
        default=DEFAULT_AUTH_SECRET,
        description="Secret key for signing session cookies",
    )
    session_ttl: int = Field(
        default=60 * 60 * 24 * 7, ge=60, description="Session lifetime in seconds"
    )
    session_cookie_name: str = Field(default="session", description="Session cookie name")
    otp_ttl_seconds: int = Field(
        default=10 * 60, ge=1, description="Lifetime of a one-time login code"
    )

    # Domain and HTTPS
    domain: Optional[str] = Field(default=None, description="Cookie domain")
    https_enabled: bool = Field(default=False, description="Enable secure cookies")

    # CORS
    cors_origins: Annotated[List[str], NoDecode] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins (no wildcards with credentials)",
    )

    # Challenge/session store
    store_backend: Literal["memory", "valkey"] = Field(
        default="memory", description="Key-value backend: memory or valkey"
    )
    valkey_url: str = Field(
        default="redis://valkey:6379/0", description="Valkey connection URL"
    )
    valkey_max_connections: int = Field(default=10, ge=1, le=100)

    # Client
    client_base_url: str = Field(
        default="http://localhost:8000", description="Base URL the client talks to"
    )
    client_storage_path: str = Field(
        default="~/.stockresearch/storage.json",
        description="File used by the client to persist saved tickers",
    )
    client_timeout: Optional[float] = Field(
        default=None, description="HTTP timeout for the client (None = no timeout)"
    )

    # Logging
    log_level: str = Field(
        default="INFO", description="Log level: DEBUG, INFO, WARNING, ERROR"
    )
    log_format: str = Field(default="json", description="Log format: json or text")

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid:
            raise ValueError(f"log_level must be one of {valid}")
        return upper

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def uses_default_secret(self) -> bool:
        return self.auth_secret == DEFAULT_AUTH_SECRET


@lru_cache
def get_settings() -> Settings:
    """Cached settings factory."""
    return Settings()


settings = get_settings()
