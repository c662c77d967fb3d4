"""
Configuration management using Pydantic settings.
Handles database connection parameters, the token signing secret, upload storage and server options.
"""

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache


DEVELOPMENT_JWT_SECRET = "dev-secret-change-me"


class Settings(BaseSettings):
    """Application settings read from the environment (and an optional .env file)."""

    # Application configuration
    app_name: str = "Dealer Listings API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Database configuration
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = "postgres"
    db_name: str = "dealer_listings"
    create_tables_on_startup: bool = True

    # Token configuration
    jwt_secret: str = DEVELOPMENT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # File upload configuration
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    max_file_size: int = 10 * 1024 * 1024  # 10MB

    # API configuration
    api_prefix: str = ""
    cors_origins: List[str] = ["*"]

    # Pagination defaults
    default_page_size: int = 20
    max_page_size: int = 100

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 5000

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure an async driver is used when a full URL is supplied."""
        if not v:
            return None
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @model_validator(mode="after")
    def validate_jwt_secret(self):
        """The development secret is only accepted outside staging and production."""
        if not self.jwt_secret:
            raise ValueError("JWT_SECRET is required")
        if self.jwt_secret == DEVELOPMENT_JWT_SECRET:
            if self.environment in ("staging", "production"):
                raise ValueError("JWT_SECRET must be set in staging and production")
        elif len(self.jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters long")
        return self

    @property
    def sqlalchemy_database_url(self) -> str:
        """Database URL, assembled from the DB_* components unless DATABASE_URL is set."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    Used by the application factory when no explicit settings are passed in.
    """
    return Settings()
