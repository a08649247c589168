"""Shared snapshot option handling for CLI commands."""

from typing import Optional

from analytics_engine.cli.error_handlers import ConfigurationError
from analytics_engine.config.settings import AnalyticsConfig


def resolve_snapshot_path(snapshot: Optional[str], settings: AnalyticsConfig) -> str:
    """Pick the snapshot file from the option or the SNAPSHOT_PATH setting.

    Raises:
        ConfigurationError: If neither names a file
    """
    path = snapshot or settings.snapshot_path
    if not path:
        raise ConfigurationError(
            "No snapshot file given",
            recovery_hint="Pass --snapshot or set SNAPSHOT_PATH in your .env file",
        )
    return path
