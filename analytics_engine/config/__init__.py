"""
Configuration module for the analytics engine.
"""
from .logging_config import (
    JSONFormatter,
    LoggingConfig,
    configure_logging,
    get_logger,
    reset_logging
)
from .settings import (
    AnalyticsConfig,
    get_config,
    load_config,
    reload_config
)

__all__ = [
    'AnalyticsConfig',
    'get_config',
    'load_config',
    'reload_config',
    'JSONFormatter',
    'LoggingConfig',
    'configure_logging',
    'get_logger',
    'reset_logging'
]
