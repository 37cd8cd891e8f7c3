"""Application settings and configuration."""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings

# Load .env file if present
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API CONFIG
    api_base_url: str = Field(
        default="http://localhost:3001/api",
        description="Base URL of the StudySync REST API",
        validation_alias="STUDYSYNC_API_URL",
    )
    access_token: str | None = Field(
        default=None,
        description="Bearer token attached to every API request",
        validation_alias="STUDYSYNC_ACCESS_TOKEN",
    )
    request_timeout: float = Field(
        default=30.0,
        ge=1.0,
        le=300.0,
        description="HTTP request timeout in seconds",
        validation_alias="STUDYSYNC_REQUEST_TIMEOUT",
    )

    # Quiz Settings
    default_time_limit_seconds: int = Field(
        default=1800,  # quizzes without a time limit still get 30 minutes
        ge=1,
        description="Countdown used when a quiz declares no time limit",
        validation_alias="DEFAULT_TIME_LIMIT_SECONDS",
    )

    # Subscription Settings
    upgrade_url: str = Field(
        default="/pricing",
        description="Link returned to users who hit a tier limit",
        validation_alias="UPGRADE_URL",
    )

    # Checkout price IDs (optional, per paid plan and billing period)
    price_premium_monthly: str | None = Field(
        default=None,
        validation_alias="STRIPE_PRICE_PREMIUM_MONTHLY",
    )
    price_premium_yearly: str | None = Field(
        default=None,
        validation_alias="STRIPE_PRICE_PREMIUM_YEARLY",
    )
    price_student_plus_monthly: str | None = Field(
        default=None,
        validation_alias="STRIPE_PRICE_STUDENT_PLUS_MONTHLY",
    )
    price_student_plus_yearly: str | None = Field(
        default=None,
        validation_alias="STRIPE_PRICE_STUDENT_PLUS_YEARLY",
    )

    # Output Settings
    default_output_path: str = Field(
        default="quiz_review",
        description="Default review export file path",
        validation_alias="DEFAULT_OUTPUT",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for the studysync loggers",
        validation_alias="LOG_LEVEL",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Loaded the first time and then cached for the client, session and CLI
@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings object with loaded configuration
    """
    return Settings()
