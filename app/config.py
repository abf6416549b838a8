"""
Application configuration with Pydantic Settings for validation and type safety.
Supports environment-specific configurations and .env file loading.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


DEFAULT_HISTORY_LIMIT = 12
DEFAULT_TIMEOUT_MS = 45000


class Environment(str, Enum):
    """Application environment types"""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class Settings(BaseSettings):
    """
    Application settings with validation.
    Settings are loaded from environment variables or .env file.
    """

    # Application settings
    app_name: str = Field(default="NutriChat", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, ge=1, le=65535, description="Server port")

    # Generator (DeepSeek chat completions) settings
    deepseek_api_url: str = Field(
        default="https://api.deepseek.com/v1/chat/completions",
        description="Chat completion endpoint",
    )
    deepseek_model: str = Field(default="deepseek-chat", description="Model identifier")
    deepseek_api_key: Optional[str] = Field(default=None, description="API credential")
    deepseek_timeout_ms: int = Field(
        default=DEFAULT_TIMEOUT_MS, gt=0, description="Generator request timeout (ms)"
    )
    deepseek_temperature: float = Field(
        default=0.6, ge=0, le=2, description="Sampling temperature"
    )

    # Conversation context
    context_history_limit: int = Field(
        default=DEFAULT_HISTORY_LIMIT,
        description="Maximum number of history entries forwarded to the generator",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="%(asctime)s %(levelname)s %(name)s: %(message)s",
        description="Log format string",
    )

    # CORS settings
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")
    cors_allow_credentials: bool = Field(
        default=False, description="Allow CORS credentials"
    )
    cors_allow_methods: list[str] = Field(
        default=["*"], description="Allowed HTTP methods"
    )
    cors_allow_headers: list[str] = Field(
        default=["*"], description="Allowed HTTP headers"
    )

    # API settings
    api_prefix: str = Field(default="/api", description="API route prefix")
    api_title: str = Field(default="NutriChat API", description="API documentation title")
    api_description: str = Field(
        default="Goal-driven meal plan generation with tolerant response canonicalization",
        description="API documentation description",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        """Validate and normalize environment value"""
        if isinstance(v, str):
            return Environment(v.lower())
        return v

    @field_validator("context_history_limit", mode="before")
    @classmethod
    def validate_history_limit(cls, v):
        """Fall back to the default for unparsable or non-positive limits"""
        try:
            limit = int(v)
        except (TypeError, ValueError):
            return DEFAULT_HISTORY_LIMIT
        return limit if limit > 0 else DEFAULT_HISTORY_LIMIT

    def is_production(self) -> bool:
        """Check if running in production environment"""
        return self.environment == Environment.PRODUCTION

    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment == Environment.DEVELOPMENT

    def is_testing(self) -> bool:
        """Check if running in testing environment"""
        return self.environment == Environment.TESTING


@dataclass(frozen=True)
class PipelineConfig:
    """Read-only values the planning pipeline needs, passed in explicitly."""

    history_limit: int = DEFAULT_HISTORY_LIMIT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    api_url: str = "https://api.deepseek.com/v1/chat/completions"
    model: str = "deepseek-chat"
    temperature: float = 0.6
    api_key: Optional[str] = None

    @classmethod
    def from_settings(cls, source: "Settings") -> "PipelineConfig":
        return cls(
            history_limit=source.context_history_limit,
            timeout_ms=source.deepseek_timeout_ms,
            api_url=source.deepseek_api_url,
            model=source.deepseek_model,
            temperature=source.deepseek_temperature,
            api_key=source.deepseek_api_key,
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


# Global settings instance
settings = Settings()
