"""Fixtures shared by the CLI tests."""

import pytest
from click.testing import CliRunner

from analytics_engine.config.logging_config import reset_logging


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_logging():
    """Drop handlers installed by the CLI group."""
    yield
    reset_logging()
