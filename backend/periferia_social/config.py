"""
Periferia Social Backend — Application Configuration
=====================================================

What:  Centralized configuration management using Pydantic Settings.
Why:   Type-safe environment variable loading with validation on startup.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
Who:   Imported by every module that needs configuration values.
When:  Loaded once at module import time; read-only afterwards.

Development defaults:
    Every field has a default so `uvicorn periferia_social.main:app` works on a
    laptop with a local PostgreSQL. The signing secret and database password
    defaults are public knowledge; validate_required_for_production() reports
    them and the lifespan refuses to start with them when ENVIRONMENT=production.
"""

from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "super_secret_jwt_key"
DEFAULT_DB_PASSWORD = "postgres"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes are grouped by concern for readability.
    """

    # ── Database ──────────────────────────────────────────────────────────
    # The URL is composed from the DB_* parts unless DATABASE_URL is given
    # explicitly (tests point it at an aiosqlite file).
    db_host: str = Field(default="localhost")
    db_port: int = Field(default=5432, ge=1, le=65535)
    db_user: str = Field(default="postgres")
    db_password: str = Field(default=DEFAULT_DB_PASSWORD)
    db_name: str = Field(default="periferia_social")
    database_url: Optional[str] = Field(
        default=None,
        description="Full SQLAlchemy async URL; overrides the DB_* fields when set",
    )

    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_max_overflow: int = Field(default=5, ge=0, le=50)
    db_pool_pre_ping: bool = Field(default=True)

    # Create tables on startup instead of running Alembic. Local use only.
    db_create_schema: bool = Field(default=False)

    @property
    def sqlalchemy_url(self) -> str:
        """The async connection URL used to build the engine."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # ── Security ──────────────────────────────────────────────────────────
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET)
    jwt_algorithm: str = Field(default="HS256")
    access_token_expire_minutes: int = Field(default=60, ge=1, le=24 * 60)

    # bcrypt cost factor; passlib accepts 4-31
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)

    # ── CORS ──────────────────────────────────────────────────────────────
    # Comma-separated list; the Vite dev server runs on 5173
    cors_origins: str = Field(default="http://localhost:5173")

    @property
    def cors_origins_list(self) -> List[str]:
        """Splits comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # ── Server ────────────────────────────────────────────────────────────
    backend_host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }

    def validate_required_for_production(self) -> None:
        """
        What:  Reports settings still at their public development defaults.
        When:  Called during app startup (lifespan).
        How:   Raises ValueError listing every offending setting; the caller
               decides whether that is fatal (production) or a warning.
        """
        errors = []
        if self.jwt_secret == DEFAULT_JWT_SECRET:
            errors.append("JWT_SECRET is using the built-in development default.")
        if not self.database_url and self.db_password == DEFAULT_DB_PASSWORD:
            errors.append("DB_PASSWORD is using the built-in development default.")
        if errors:
            raise ValueError(
                "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
            )


# Singleton instance, imported throughout the application
settings = Settings()
