"""
Configuration management for the analytics engine.

The engine itself reads no configuration; the report service and the CLI
load these settings once and pass the values down explicitly.
"""

from decimal import Decimal
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsConfig(BaseSettings):
    """Configuration settings for the analytics engine."""

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Snapshot used by the CLI when no file is given
    snapshot_path: Optional[str] = Field(default=None, alias="SNAPSHOT_PATH")

    # Capacity Configuration
    standard_weekly_hours: Decimal = Field(
        default=Decimal("37"), alias="STANDARD_WEEKLY_HOURS"
    )

    # Risk Configuration
    red_list_threshold: Decimal = Field(
        default=Decimal("0.90"), alias="RED_LIST_THRESHOLD"
    )

    # Forecast Configuration
    forecast_min_points: int = Field(default=3, alias="FORECAST_MIN_POINTS")
    forecast_periods: int = Field(default=3, alias="FORECAST_PERIODS")
    staffing_window_days: int = Field(default=30, alias="STAFFING_WINDOW_DAYS")
    tentative_allocation_weight: Decimal = Field(
        default=Decimal("0.5"), alias="TENTATIVE_ALLOCATION_WEIGHT"
    )
    bridge_months_back: int = Field(default=5, alias="BRIDGE_MONTHS_BACK")
    bridge_months_forward: int = Field(default=3, alias="BRIDGE_MONTHS_FORWARD")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()

    @field_validator("red_list_threshold", "tentative_allocation_weight")
    @classmethod
    def validate_ratio(cls, v):
        """Ensure ratios lie between 0 and 1."""
        if v < 0 or v > 1:
            raise ValueError("Value must be between 0 and 1")
        return v

    @field_validator("standard_weekly_hours")
    @classmethod
    def validate_weekly_hours(cls, v):
        """Ensure the standard week is positive."""
        if v <= 0:
            raise ValueError("Standard weekly hours must be positive")
        return v

    @field_validator(
        "forecast_min_points",
        "forecast_periods",
        "staffing_window_days",
        "bridge_months_back",
        "bridge_months_forward",
    )
    @classmethod
    def validate_non_negative(cls, v):
        """Ensure counts are not negative."""
        if v < 0:
            raise ValueError("Value must not be negative")
        return v


def load_config(env_file: Optional[str] = None) -> AnalyticsConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return AnalyticsConfig()


# Global configuration instance
_config: Optional[AnalyticsConfig] = None


def get_config() -> AnalyticsConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> AnalyticsConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
