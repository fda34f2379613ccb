"""
Centralized configuration for Form Architect.

All settings are loaded from environment variables via .env file.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

from submission_quality.auto_responder import AutoResponseConfig
from submission_quality.spam_detector import QualityConfig

load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    # OpenAI
    openai_api_key: Optional[str] = Field(default=None)
    openai_llm_model: str = Field(default="gpt-3.5-turbo")
    ai_request_timeout: float = Field(default=5.0)

    # Spam detection
    spam_detection_enabled: bool = Field(default=True)
    spam_threshold: int = Field(default=60, ge=0, le=100)
    ai_spam_check_enabled: bool = Field(default=False)
    ai_spam_hourly_limit: int = Field(default=100)

    # Auto-responses
    auto_response_enabled: bool = Field(default=False)
    skip_low_scores: bool = Field(default=False)
    auto_response_hourly_limit: int = Field(default=50)
    auto_response_timeout: float = Field(default=15.0)
    from_name: str = Field(default="Form Architect")
    from_email: Optional[str] = Field(default=None)
    reply_to_email: Optional[str] = Field(default=None)
    sendgrid_api_key: Optional[str] = Field(default=None)

    # Form generation
    form_generation_hourly_limit: int = Field(default=50)
    form_generation_timeout: float = Field(default=30.0)

    # Database
    database_url: str = Field(default="sqlite+aiosqlite:///./form_architect.db")

    # API
    api_title: str = Field(default="Form Architect API")
    api_version: str = Field(default="1.0.0")

    # Logging
    log_level: str = Field(default="INFO")
    debug: bool = Field(default=False)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def ai_configured(self) -> bool:
        return bool(self.openai_api_key)

    def quality_config(self) -> QualityConfig:
        """Engine configuration for spam detection."""
        return QualityConfig(
            spam_threshold=self.spam_threshold,
            spam_detection_enabled=self.spam_detection_enabled,
            ai_spam_check_enabled=self.ai_spam_check_enabled,
            ai_api_key=self.openai_api_key,
        )

    def auto_response_config(self) -> AutoResponseConfig:
        return AutoResponseConfig(
            enabled=self.auto_response_enabled,
            skip_low_scores=self.skip_low_scores,
            from_name=self.from_name,
            reply_to_email=self.reply_to_email,
            timeout=self.auto_response_timeout,
        )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
