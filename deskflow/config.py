"""
Application Configuration
=========================

Centralized configuration using Pydantic Settings.
Loads from environment variables with validation.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "deskflow-secret-key-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ENVIRONMENT: str = Field(default="development")

    # Server
    PORT: int = Field(default=8000)

    # Database
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5, ge=1)
    DB_POOL_TIMEOUT: int = Field(default=30, ge=1, description="Seconds to wait for a pooled connection")
    SQL_ECHO: Optional[bool] = Field(
        default=None,
        description="Log every SQL statement (defaults to on in development)",
    )

    # Redis
    REDIS_URL: str = Field(default="redis://localhost:6379/0")

    # Session tokens
    JWT_SECRET: str = Field(default=DEFAULT_JWT_SECRET)
    JWT_ALGORITHM: str = Field(default="HS256")
    SESSION_EXPIRE_DAYS: int = Field(default=7, ge=1)
    SESSION_COOKIE_NAME: str = Field(default="deskflow-session")
    BCRYPT_ROUNDS: int = Field(default=12)

    # Route gating
    LOGIN_PATH: str = Field(default="/login")
    REGISTER_PATH: str = Field(default="/register")
    HOME_PATH: str = Field(default="/")

    # App Configuration
    ALLOWED_ORIGINS: str = Field(default="http://localhost:3000,http://localhost:8000")

    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def database_url_async(self) -> str:
        """Convert database URL to async format for asyncpg."""
        if self.DATABASE_URL.startswith("postgresql://"):
            return self.DATABASE_URL.replace(
                "postgresql://", "postgresql+asyncpg://", 1
            )
        return self.DATABASE_URL

    @property
    def sql_echo(self) -> bool:
        """Whether SQL statements are logged."""
        if self.SQL_ECHO is None:
            return self.is_development
        return self.SQL_ECHO

    @property
    def session_max_age_seconds(self) -> int:
        """Session lifetime in seconds (cookie Max-Age and token expiry)."""
        return self.SESSION_EXPIRE_DAYS * 24 * 60 * 60

    @property
    def uses_default_secret(self) -> bool:
        """True when JWT_SECRET was never configured."""
        return self.JWT_SECRET == DEFAULT_JWT_SECRET

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.ENVIRONMENT.lower() == "development"

    @field_validator("JWT_SECRET")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Ensure JWT secret is sufficiently long."""
        if len(v) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters long")
        return v

    @field_validator("BCRYPT_ROUNDS")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """Enforce the minimum bcrypt cost factor."""
        if v < 12:
            raise ValueError("BCRYPT_ROUNDS must be at least 12")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Export a default settings instance
settings = get_settings()
