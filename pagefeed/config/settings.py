"""
PageFeed Configuration System
=============================

Simple configuration management with environment variables and Pydantic models.
Environment variables override Field defaults with clear precedence.
"""

import os
from pathlib import Path
from typing import Optional, List
from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

# Environment variables checked, in order, when PAGEFEED_AI__GEMINI_API_KEY is unset
API_KEY_FALLBACK_VARS = ("GEMINI_API_KEY", "API_KEY")


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ServerSettings(BaseModel):
    """HTTP server configuration."""
    host: str = Field(default="0.0.0.0", description="Interface to bind")
    port: int = Field(default=8080, ge=1, le=65535, description="Port to listen on")


class FetchSettings(BaseModel):
    """Source page fetching configuration."""
    timeout_seconds: float = Field(default=15.0, gt=0, le=300, description="Total fetch timeout in seconds")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, description="User-Agent sent with page requests")

    @field_validator('user_agent')
    @classmethod
    def validate_user_agent(cls, v):
        """Reject blank user agents."""
        if not v or not v.strip():
            raise ValueError("user_agent must not be empty")
        return v.strip()


class AISettings(BaseModel):
    """Generative model configuration."""
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model used for feed generation")
    temperature: float = Field(default=0.1, ge=0.0, le=2.0, description="AI temperature setting")
    max_output_tokens: int = Field(default=8192, ge=256, le=65536, description="Maximum tokens per response")
    request_timeout: Optional[float] = Field(
        default=60.0,
        gt=0,
        description="Deadline for one model call in seconds; None leaves the call unbounded",
    )

    def has_credentials(self) -> bool:
        """Check whether an API key is configured."""
        return bool(self.gemini_api_key)


class CacheSettings(BaseModel):
    """Feed cache configuration."""
    ttl_seconds: float = Field(default=600.0, gt=0, description="Time-to-live of cached feeds (10 minutes)")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/pagefeed.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class PageFeedSettings(BaseSettings):
    """Main application settings."""

    server: ServerSettings = Field(default_factory=ServerSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    ai: AISettings = Field(default_factory=AISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="PageFeed", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "PAGEFEED_",
        "extra": "ignore",
    }

    def validate_configuration(self) -> None:
        """Validate complete configuration.

        A missing API key is deliberately not an error here: the server
        starts without one and reports it per request.
        """
        errors = []

        if self.logging.file_path:
            try:
                log_path = Path(self.logging.file_path)
                log_path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid log file path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def configuration_warnings(self) -> List[str]:
        """Conditions that will make requests fail but do not block startup."""
        warnings = []
        if not self.ai.has_credentials():
            warnings.append(
                "Gemini API key is not set (PAGEFEED_AI__GEMINI_API_KEY, GEMINI_API_KEY or API_KEY)"
            )
        return warnings

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> PageFeedSettings:
    """Load settings from environment variables and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = PageFeedSettings()

        if not settings.ai.gemini_api_key:
            for var in API_KEY_FALLBACK_VARS:
                if os.getenv(var):
                    settings.ai.gemini_api_key = os.getenv(var)
                    break

        settings.validate_configuration()

        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        ) from e


# Global settings instance
_settings: Optional[PageFeedSettings] = None


def get_settings(reload: bool = False) -> PageFeedSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
