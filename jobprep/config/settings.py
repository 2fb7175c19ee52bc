"""
Application settings and configuration management.

Uses pydantic-settings for environment variable loading.
"""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "JobPrep"
    app_version: str = "0.1.0"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # Gemini text generation
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash-lite"
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_timeout_ms: int = Field(default=30000, gt=0)
    generation_temperature: float = Field(default=0.7, ge=0, le=2)
    generation_max_output_tokens: int = Field(default=2048, gt=0)

    # Retry policy
    max_contract_attempts: int = Field(default=2, ge=1)
    max_transient_attempts: int = Field(default=3, ge=1)
    retry_backoff_seconds: float = Field(default=1.0, ge=0)

    # Prompt budgets (characters)
    job_description_char_limit: int = 2000
    outreach_description_char_limit: int = 500
    prior_context_char_limit: int = 1500
    answer_char_limit: int = 4000

    # Mock interview settings
    default_question_count: int = 5
    max_question_count: int = 10
    session_retention_seconds: int = 3600  # Finished sessions older than this are purged

    # Langfuse tracing
    langfuse_enabled: bool = False
    langfuse_public_key: str = ""
    langfuse_secret_key: str = ""
    langfuse_base_url: str = "https://cloud.langfuse.com"

    # CORS - stored as comma-separated string in env
    # Uses validation_alias to read from CORS_ORIGINS env var
    cors_origins_str: str = Field(
        default="http://localhost:3000,http://localhost:8000",
        validation_alias="cors_origins"
    )

    @computed_field
    @property
    def cors_origins(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins_str.split(",") if origin.strip()]

    @property
    def gemini_timeout_seconds(self) -> float:
        """Per-call upstream deadline in seconds."""
        return self.gemini_timeout_ms / 1000


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
