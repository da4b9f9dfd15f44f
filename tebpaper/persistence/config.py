"""
Configuration for TebPaper persistence.

Environment-based settings using Pydantic BaseSettings.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Storage settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///data/tebpaper.db"
    database_echo: bool = False


# Global settings instance
settings = Settings()
