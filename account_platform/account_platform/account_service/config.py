"""
Configuration management for the account service
"""
from functools import lru_cache
from typing import List, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Local development convenience only; rejected when ENVIRONMENT=production.
DEV_JWT_SECRET = "dev-secret"


class Settings(BaseSettings):
    """Account service configuration loaded from environment variables"""

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    ENVIRONMENT: str = "development"  # development | test | production
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    # Database Configuration
    DATABASE_URL: str = "sqlite:///./database.db"

    # Token / Password Configuration
    JWT_SECRET: str = DEV_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    PASSWORD_HASH_ROUNDS: int = 29000

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def uses_dev_secret(self) -> bool:
        return self.JWT_SECRET == DEV_JWT_SECRET

    @model_validator(mode="after")
    def require_secret_in_production(self) -> "Settings":
        if self.is_production and (not self.JWT_SECRET or self.uses_dev_secret):
            raise ValueError("JWT_SECRET must be set explicitly when ENVIRONMENT=production")
        return self


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings instance, read once from the environment."""
    return Settings()
