"""Configuration management for TripSplit."""

from decimal import Decimal
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Where trips, members and expenses live
    store_backend: Literal["supabase", "local"] = "supabase"

    # Supabase (PostgREST) API
    supabase_url: str | None = None
    supabase_anon_key: str | None = None
    supabase_access_token: str | None = None  # user JWT; falls back to anon key

    # OpenAI API
    openai_api_key: str | None = None
    openai_model: str = "gpt-3.5-turbo"

    # Settlement settings
    settlement_epsilon: Decimal = Decimal("0.01")  # balances within this are settled
    split_policy: Literal["exclude", "strict"] = "exclude"
    default_currency: str = "USD"

    # Local store path
    database_path: Path = Path.home() / ".tripsplit" / "tripsplit.db"

    def __init__(self, **kwargs):
        """Initialize settings and create database directory if needed."""
        super().__init__(**kwargs)
        if self.store_backend == "local":
            self.database_path.parent.mkdir(parents=True, exist_ok=True)


def load_settings() -> Settings:
    """Load application settings from environment variables."""
    try:
        return Settings()
    except Exception as e:
        raise ValueError(
            f"Failed to load settings. Make sure you have created a .env file "
            f"with all required variables. See .env.example for reference.\n"
            f"Error: {e}"
        ) from e
