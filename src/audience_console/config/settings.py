# Author: Green Mountain Systems AI Inc.
# Donated to IAB Tech Lab

"""Application settings loaded from environment variables."""

import logging
from functools import lru_cache
from typing import Optional

from dotenv import find_dotenv
from pydantic_settings import BaseSettings

# Find .env file by searching up from current working directory
_ENV_FILE = find_dotenv(usecwd=True)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Meta Graph API
    meta_graph_base_url: str = "https://graph.facebook.com/v18.0"
    meta_access_token: Optional[str] = None
    meta_search_limit: int = 25
    meta_locale: str = "en_US"
    http_timeout: float = 30.0

    # Searches are always geo-targeted to a single country
    target_country: str = "ID"

    # API Keys
    anthropic_api_key: str = ""

    # LLM Settings
    default_llm_model: str = "anthropic/claude-sonnet-4-5-20250929"
    llm_temperature: float = 0.7
    llm_response_max_tokens: int = 500
    llm_suggestion_max_tokens: int = 100
    llm_analysis_max_tokens: int = 1000

    # Debounce windows (seconds)
    suggestion_debounce_seconds: float = 0.3
    search_debounce_seconds: float = 0.5

    # Environment
    environment: str = "development"
    log_level: str = "INFO"

    model_config = {
        "env_file": _ENV_FILE if _ENV_FILE else None,
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging for the interfaces.

    Args:
        level: Log level name, defaults to ``settings.log_level``
    """
    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = get_settings()
