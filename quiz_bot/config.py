"""Configuration settings using pydantic-settings."""
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    BOT_TOKEN: str = Field(default="", description="Telegram Bot API token")

    # Database
    DATABASE_PATH: str = Field(
        default="data/quiz_bot.db",
        description="Path to SQLite database file"
    )

    # LLM (LM Studio or any OpenAI-compatible server)
    LLM_BASE_URL: str = Field(
        default="http://localhost:1234/v1",
        description="Base URL of the OpenAI-compatible API"
    )
    LLM_MODEL: str = Field(default="qwen2.5-7b-instruct", description="Model name")
    LLM_API_KEY: str = Field(default="not-needed", description="API key for the LLM server")

    # Quiz
    DEFAULT_QUESTION_COUNT: int = Field(
        default=5,
        description="Question count offered first in the count keyboard"
    )
    QUESTION_COUNTS: list[int] = Field(
        default=[5, 10, 15, 20],
        description="Preset question counts shown as buttons"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    class Config:
        """Pydantic config."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()
