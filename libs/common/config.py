from functools import lru_cache
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings."""

    # Application
    ENVIRONMENT: Literal["local", "development", "production", "test"] = "local"
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000
    BASE_URL: str = "http://localhost:3000"

    # Session cookie
    SESSION_SECRET: str = "dev-secret"
    SESSION_MAX_AGE_SECONDS: int = 14 * 24 * 60 * 60

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/neotech.sqlite"

    # Paystack
    # Left empty, the app still boots; Paystack answers every call with 401.
    PAYSTACK_SECRET_KEY: str = ""
    PAYSTACK_API_BASE_URL: str = "https://api.paystack.co"
    PAYSTACK_TIMEOUT_SECONDS: float = 30.0
    PAYMENT_REFERENCE_PREFIX: str = "neotech"

    # Seed data
    SEED_ADMIN_EMAIL: str = "admin@neotech.local"
    SEED_ADMIN_PASSWORD: str = "admin123"
    SEED_ON_STARTUP: bool = False

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    @field_validator("DATABASE_URL")
    @classmethod
    def assemble_db_connection(cls, v: str) -> str:
        if isinstance(v, str):
            if v.startswith("sqlite://"):
                return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @property
    def paystack_configured(self) -> bool:
        key = self.PAYSTACK_SECRET_KEY.strip()
        return bool(key) and not key.startswith("your-")


@lru_cache
def get_settings() -> Settings:
    """
    Return the global settings instance, cached.
    """
    return Settings()
