"""Service configuration with pydantic-settings.

Settings are read once at process start and handed to each component's
constructor. Nothing else in the package reads the environment.

Usage:
    from buildlab.config import get_settings

    settings = get_settings()
    client = LLMClient.from_settings(settings)
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Generation service settings.

    Credentials default to empty strings so the service starts in development
    without every integration configured; the components that need them fail
    (or skip best-effort work) when they are missing.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging configuration
    service_name: str = Field(
        default="buildlab-generator",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    # Persistence
    database_url: str = Field(
        default="sqlite+aiosqlite:///./buildlab.db",
        description="SQLAlchemy async connection URL",
        examples=["postgresql+asyncpg://user:pass@db:5432/buildlab"],
    )

    # LLM provider
    llm_provider: Literal["openai", "openrouter"] = Field(default="openai")
    llm_model: str = Field(default="gpt-4o", description="Model identifier")
    llm_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    llm_max_tokens: int = Field(default=4000, ge=1)
    openai_api_key: str = Field(default="", description="OpenAI API key")
    openrouter_api_key: str = Field(default="", description="OpenRouter API key")
    openrouter_app_name: str = Field(default="BuildLab")

    # External auth provider
    auth_url: str = Field(default="", description="Auth provider base URL")
    auth_api_key: str = Field(default="", description="Auth provider API key")

    # Source-repository host
    github_token: str = Field(default="", description="Service GitHub token (fallback)")
    github_api_url: str = Field(default="https://api.github.com")
    github_repo_prefix: str = Field(default="buildlab")
    github_repo_private: bool = Field(default=False)
    github_init_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Pause after repository creation before pushing files",
    )

    # GitHub account connection (OAuth app)
    github_client_id: str = Field(default="")
    github_client_secret: str = Field(default="")
    github_oauth_url: str = Field(default="https://github.com")
    github_oauth_redirect_uri: str = Field(
        default="",
        description="Public URL of GET /github/oauth/callback; the OAuth app default when empty",
    )
    github_oauth_scope: str = Field(default="repo")
    github_oauth_state_ttl_seconds: int = Field(default=600, ge=1)
    frontend_url: str = Field(
        default="https://buildlab.dev",
        description="Origin notified by the OAuth popup when the account is connected",
    )

    # Object storage
    s3_bucket: str = Field(default="buildlab-previews")
    aws_region: str = Field(default="us-east-1")
    preview_url_scheme: str = Field(default="http")
    preview_cache_control: str = Field(default="public, max-age=3600")

    # Payment provider
    stripe_webhook_secret: str = Field(default="")

    # Generation tuning
    slug_max_length: int = Field(default=30, ge=1)
    upstream_excerpt_chars: int = Field(
        default=8000,
        ge=0,
        description="Max characters of an earlier document embedded in a later prompt",
    )
    prd_excerpt_chars: int = Field(default=2000, ge=0)
    tech_spec_excerpt_chars: int = Field(default=2000, ge=0)
    document_preview_chars: int = Field(default=500, ge=0)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
