"""
Application configuration using pydantic-settings.

Values come from environment variables (or a local .env file).
"""
import logging
from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application configuration loaded from environment.

    Relevant environment variables:
      - DATABASE_URL
      - OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TIMEOUT_SECONDS
      - SESSION_TTL_DAYS, SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE
      - LOG_LEVEL
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "ChronoChef Backend"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./chronochef.db"

    # OpenAI
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout_seconds: float = Field(default=30.0, gt=0)
    openai_max_tokens: int = Field(default=2500, gt=0)
    openai_temperature: float = Field(default=0.7, ge=0, le=2)

    # Sessions
    session_ttl_days: int = Field(default=7, ge=1)
    session_cookie_name: str = "session_id"
    session_cookie_secure: bool = False

    cors_origins: List[str] = ["http://localhost:5173", "http://localhost:3000"]

    def model_post_init(self, __context) -> None:
        if not self.openai_api_key:
            logger.warning(
                "OPENAI_API_KEY not set. Recipe generation will be unavailable."
            )


@lru_cache()
def get_settings() -> Settings:
    return Settings()

