# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration using pydantic-settings.
# It provides a single, immutable Settings class with all configuration values.
#
# Usage:
#   from app.config import load_settings
#   settings = load_settings()
#   app = create_app(settings)
#
# Values are loaded from (highest priority first):
# 1. Keyword arguments passed to Settings(...)
# 2. System environment variables
# 3. .env file in project root (if exists)
# 4. YAML config file (load_settings(config_file=...), else CONFIG_FILE,
#    default config.yaml; skipped if missing)
#
# The Settings object is built once at startup and handed to every component
# that needs it. It is frozen, so nothing can mutate it after construction.
# =============================================================================

import os
from typing import Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

DEFAULT_CONFIG_FILE = "config.yaml"


class Settings(BaseSettings):
    """
    Application settings loaded from the environment and a YAML file.

    Uses pydantic-settings to:
    - Merge the YAML config file with environment overrides
    - Validate types and constraints
    - Provide sensible defaults for development
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging)"
    )

    API_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the API server to"
    )

    API_PORT: int = Field(
        default=8080,
        ge=1,
        le=65535,
        description="Port for the API server"
    )

    API_PREFIX: str = Field(
        default="/api/v1",
        description="Path prefix for all versioned routes"
    )

    SHUTDOWN_GRACE_SECONDS: int = Field(
        default=5,
        ge=0,
        le=120,
        description="How long shutdown waits for in-flight requests"
    )

    # -------------------------------------------------------------------------
    # Relational Store (Supabase / Postgres)
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    # -------------------------------------------------------------------------
    # Cache Store (Redis)
    # -------------------------------------------------------------------------

    REDIS_URL: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL for rate limits, tokens and cached queries"
    )

    REDIS_MAX_CONNECTIONS: int = Field(
        default=25,
        ge=1,
        le=1000,
        description="Fixed ceiling for the Redis connection pool"
    )

    CATEGORY_CACHE_TTL_SECONDS: int = Field(
        default=300,
        ge=0,
        description="How long the category listing stays cached"
    )

    # -------------------------------------------------------------------------
    # Security
    # -------------------------------------------------------------------------

    JWT_SECRET: str = Field(
        default="dev-secret-key-change-in-production",
        min_length=16,
        description="Secret key for signing tokens"
    )

    JWT_ALGORITHM: str = Field(
        default="HS256",
        description="JWT signing algorithm"
    )

    ACCESS_TOKEN_EXPIRE_HOURS: int = Field(
        default=24,
        ge=1,
        le=24 * 7,
        description="Access token lifetime in hours"
    )

    REFRESH_TOKEN_EXPIRE_DAYS: int = Field(
        default=30,
        ge=1,
        le=365,
        description="Refresh token lifetime in days"
    )

    # CORS origins (comma-separated string that gets parsed)
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:3001",
        description="Allowed CORS origins (comma-separated)"
    )

    # -------------------------------------------------------------------------
    # Request Handling
    # -------------------------------------------------------------------------

    REQUEST_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout before a 504 is returned"
    )

    RATE_LIMIT_REQUESTS: int = Field(
        default=100,
        ge=1,
        description="Requests allowed per client IP in one window"
    )

    RATE_LIMIT_WINDOW_SECONDS: int = Field(
        default=60,
        ge=1,
        description="Rate limit window length"
    )

    TRUST_PROXY_HEADERS: bool = Field(
        default=True,
        description="Resolve client IP from X-Forwarded-For / X-Real-IP"
    )

    # -------------------------------------------------------------------------
    # Embedding Provider (OpenAI)
    # -------------------------------------------------------------------------
    # Optional - without a key, semantic search falls back to keyword search

    OPENAI_API_KEY: str = Field(
        default="",
        description="OpenAI API key for embeddings"
    )

    EMBEDDING_MODEL: str = Field(
        default="text-embedding-ada-002",
        description="Embedding model (must match the vector column size)"
    )

    EMBEDDING_DIMENSIONS: int = Field(
        default=1536,
        ge=1,
        description="Length of every stored embedding vector"
    )

    SEMANTIC_SEARCH_TIMEOUT_SECONDS: float = Field(
        default=5.0,
        gt=0,
        description="Max wait for the query embedding before falling back to keyword search"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
        frozen=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """
        Add the YAML config file as the lowest-priority source.

        Environment variables always win over the file, so secrets and
        connection strings can be injected at deploy time.
        """
        yaml_file = settings_cls.model_config.get("yaml_file") or os.getenv("CONFIG_FILE", DEFAULT_CONFIG_FILE)
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=yaml_file),
            file_secret_settings,
        )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def cors_origins_list(self) -> list[str]:
        """
        Parse CORS_ORIGINS string into a list.

        Example: "http://localhost:3000, https://myapp.com" -> ["http://localhost:3000", "https://myapp.com"]
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.ACCESS_TOKEN_EXPIRE_HOURS * 3600

    @property
    def refresh_token_ttl_seconds(self) -> int:
        return self.REFRESH_TOKEN_EXPIRE_DAYS * 86400

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"


def load_settings(config_file: str | None = None, **overrides) -> Settings:
    """
    Build the Settings object for this process.

    Args:
        config_file: Optional path to a YAML file. Takes precedence over
            CONFIG_FILE and leaves the environment untouched.
        **overrides: Explicit values that win over every other source

    Returns:
        Settings: The validated, immutable settings
    """
    if not config_file:
        return Settings(**overrides)

    class FileSettings(Settings):
        model_config = SettingsConfigDict(yaml_file=config_file)

    return FileSettings(**overrides)
