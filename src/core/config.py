"""Configuration management for gamifai-rewards."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenRouter Configuration
    openrouter_api_key: str | None = Field(default=None, description="OpenRouter API key for LLM access")
    openrouter_base_url: str = Field(
        default="https://openrouter.ai/api/v1", description="OpenRouter API base URL (used for health checks)"
    )

    # Pydantic Logfire Configuration (optional)
    logfire_token: str | None = Field(default=None, description="Pydantic Logfire token for observability")

    environment: str = Field(default="development", description="Deployment environment name")

    def require_credential(self, field_name: str, service_name: str) -> str:
        """Validate that a required credential is set, raising a clear error if missing.

        Args:
            field_name: Name of the field to check
            service_name: Human-readable service name for error message

        Returns:
            The credential value

        Raises:
            ValueError: If the credential is None or empty
        """
        value = getattr(self, field_name)
        if not value:
            raise ValueError(
                f"{service_name} credential not configured. "
                f"Set {field_name.upper()} environment variable or add to .env file."
            )
        return value

    # AI Model Configuration
    model_id: str = Field(
        default="openai/gpt-4o-mini",
        description="Model ID for OpenRouter used for activity analysis",
    )
    model_provider: str | None = Field(
        default=None, description="Restrict OpenRouter routing to a single upstream provider (optional)"
    )

    # Activity Analysis Configuration
    activity_temperature: float = Field(default=0.7, ge=0, le=2, description="Sampling temperature for analysis")
    activity_max_tokens: int = Field(default=2048, gt=0, description="Maximum tokens the classifier may generate")
    classifier_timeout_seconds: float = Field(
        default=60.0, gt=0, description="Upper bound on an activity classification call, retries included (in seconds)"
    )


# Application Constants
class Constants:
    """Application-wide constants."""

    # API Configuration
    API_TIMEOUT_SECONDS: int = 30

    # HTTP Status Codes
    HTTP_OK: int = 200
    HTTP_BAD_REQUEST: int = 400
    HTTP_SERVER_ERROR: int = 500
    HTTP_BAD_GATEWAY: int = 502
    HTTP_SERVICE_UNAVAILABLE: int = 503

    # Reward Rules
    SIMILAR_MATCH_MULTIPLIER: float = 0.8  # Similar matches earn 80% of the task reward
    SHARDS_DECIMAL_PLACES: int = 1


def get_settings() -> Settings:
    """Get application settings (singleton pattern)."""
    return Settings()


# Global settings instance
settings = get_settings()
constants = Constants()
