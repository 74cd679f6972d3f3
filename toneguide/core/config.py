"""Configuration management for ToneGuide."""

from functools import lru_cache
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file (only if accessible)
try:
    load_dotenv()
except (PermissionError, OSError):
    # In sandboxed environments, .env might not be accessible
    pass


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    # Environment
    TONEGUIDE_ENV: str = Field(default="dev", description="Environment: dev, test, prod")

    # Anthropic configuration (optional: without a key every request uses the fallback)
    ANTHROPIC_API_KEY: str | None = Field(default=None, description="Anthropic API key")
    REWRITE_MODEL: str = Field(
        default="claude-haiku-4-5-20251001", description="Model for variant generation"
    )
    REWRITE_TEMPERATURE: float = Field(default=0.7, description="Sampling temperature")
    REWRITE_MAX_TOKENS: int = Field(default=1024, description="Max output tokens per call")
    GENERATION_TIMEOUT_SECONDS: float = Field(
        default=8.0, gt=0, description="Bound on the single external generation call"
    )

    # Guideline corpus
    GUIDELINES_PATH: str | None = Field(
        default=None, description="Path to a guideline corpus JSON file (bundled corpus if unset)"
    )
    MAX_SELECTED_RULES: int = Field(
        default=6, ge=1, description="Max rules rendered into one prompt"
    )

    # History ledger
    HISTORY_CAPACITY: int = Field(default=3, ge=1, description="History items kept per target")
    HISTORY_BACKEND: Literal["memory", "supabase"] = Field(
        default="memory", description="Storage for per-target history"
    )

    # Supabase configuration (only required for the supabase history backend)
    SUPABASE_URL: str | None = Field(default=None, description="Supabase project URL")
    SUPABASE_SERVICE_ROLE_KEY: str | None = Field(
        default=None, description="Supabase service role key"
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings instance

    Raises:
        ValidationError: If an environment variable has an invalid value
    """
    return Settings()
