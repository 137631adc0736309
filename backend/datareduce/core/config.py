"""
Centralized configuration management.

Settings seed the default reduction limits and configure logging and
metrics. The reduction functions themselves only read explicit options.
"""
import os
import logging
from typing import Optional
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """Engine settings with validation."""

    # Reduction defaults
    default_max_rows: int = Field(default=500, ge=1, le=1000000, description="Default row budget for sampling")
    default_max_data_points: int = Field(default=500, ge=1, le=1000000, description="Default point budget for decimation")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="text", description="Log output format: 'text' or 'json'")

    # Metrics
    metrics_history_size: int = Field(default=1000, ge=10, le=100000, description="Timings kept per metric")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}, got '{v}'")
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        valid_formats = ["text", "json"]
        if v.lower() not in valid_formats:
            raise ValueError(f"LOG_FORMAT must be one of {valid_formats}, got '{v}'")
        return v.lower()

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            default_max_rows=int(os.getenv("DEFAULT_MAX_ROWS", "500")),
            default_max_data_points=int(os.getenv("DEFAULT_MAX_DATA_POINTS", "500")),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "text"),
            metrics_history_size=int(os.getenv("METRICS_HISTORY_SIZE", "1000")),
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get engine settings (singleton pattern)."""
    global _settings
    if _settings is None:
        load_dotenv()
        _settings = Settings.from_env()
        logger.info("Configuration loaded and validated successfully")
    return _settings


def reload_settings() -> Settings:
    """Reload settings (useful for testing)."""
    global _settings
    _settings = None
    return get_settings()
