"""
Configuration management for the itinerary workbench client.
Settings come from environment variables prefixed with TRIP_WORKBENCH_ or a .env file.
"""
from pydantic_settings import BaseSettings
from typing import Optional
from pathlib import Path
import logging


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Remote service
    api_base_url: str = "http://localhost:8000"
    request_timeout: Optional[float] = None  # None waits indefinitely

    # Credential storage
    credential_db_path: Path = Path.home() / ".trip_workbench" / "credentials.db"
    token_storage_key: str = "token"

    # Session behaviour
    logout_on_unauthorized: bool = True

    # Logging
    log_level: str = "INFO"
    debug: bool = False

    class Config:
        env_prefix = "TRIP_WORKBENCH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


# Global settings instance
settings = Settings()


def setup_logging(level: Optional[str] = None):
    """Configure root logging for the console front end."""
    level_name = (level or ("DEBUG" if settings.debug else settings.log_level)).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
