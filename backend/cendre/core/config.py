"""
Application configuration settings.
"""

from typing import Optional, List
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from loguru import logger


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # Secret store backend: "auto" picks redis when REDIS_URL is set
    SECRET_STORE_BACKEND: str = "auto"

    # Redis
    REDIS_URL: Optional[str] = None
    REDIS_KEY_PREFIX: str = "secret:"
    REDIS_SOCKET_TIMEOUT: float = 2.0
    REDIS_CONNECT_TIMEOUT: float = 2.0
    REDIS_TAKE_MAX_RETRIES: int = 16
    REDIS_ALLOW_TRANSACTION_FALLBACK: bool = True

    # Secret limits
    SECRET_TTL_MIN_SECS: int = 1
    SECRET_TTL_MAX_SECS: int = 24 * 60 * 60
    SECRET_MAX_BLOB_LENGTH: int = 64 * 1024
    SECRET_ID_MAX_LENGTH: int = 64

    # In-memory backend
    MEMORY_SWEEP_INTERVAL_SECS: int = 60

    # Rate limiting (slowapi format: "count/period")
    RATE_LIMIT_ENABLED: bool = True
    SECRETS_RATE_LIMIT: str = "60/minute"

    # Application
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    WORKERS: int = 1
    CORS_ORIGINS: List[str] = ["http://localhost:5173", "http://127.0.0.1:5173"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    @field_validator("SECRET_STORE_BACKEND", mode="before")
    @classmethod
    def validate_backend(cls, v):
        v = (v or "auto").strip().lower()
        if v not in ("auto", "memory", "redis"):
            raise ValueError(f"Unsupported SECRET_STORE_BACKEND: {v}")
        return v

    @field_validator("SECRET_TTL_MIN_SECS")
    @classmethod
    def validate_ttl_min(cls, v):
        if v < 1:
            raise ValueError("SECRET_TTL_MIN_SECS must be at least 1")
        return v

    @field_validator("REDIS_TAKE_MAX_RETRIES")
    @classmethod
    def validate_retries(cls, v):
        if v < 1:
            raise ValueError("REDIS_TAKE_MAX_RETRIES must be at least 1")
        return v

    @model_validator(mode="after")
    def validate_ttl_bounds(self) -> "Settings":
        if self.SECRET_TTL_MAX_SECS < self.SECRET_TTL_MIN_SECS:
            raise ValueError(
                f"SECRET_TTL_MAX_SECS ({self.SECRET_TTL_MAX_SECS}) must not be lower than "
                f"SECRET_TTL_MIN_SECS ({self.SECRET_TTL_MIN_SECS})"
            )
        if self.SECRET_STORE_BACKEND == "redis" and not self.REDIS_URL:
            raise ValueError("REDIS_URL must be set when SECRET_STORE_BACKEND is 'redis'")
        return self

    @property
    def resolved_store_backend(self) -> str:
        """Backend actually used once "auto" is resolved."""
        if self.SECRET_STORE_BACKEND == "auto":
            return "redis" if self.REDIS_URL else "memory"
        return self.SECRET_STORE_BACKEND


# Global settings instance
settings = Settings()

# Configure logging
logger.remove()  # Remove default handler
if settings.LOG_FILE:
    logger.add(
        settings.LOG_FILE,
        level=settings.LOG_LEVEL,
        rotation="10 MB",
        retention="30 days",
        diagnose=False,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"
    )
logger.add(
    lambda msg: print(msg, end=""),
    level=settings.LOG_LEVEL,
    diagnose=False,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | {message}"
)
