"""Validators for loaded snapshots."""

from analytics_engine.validators.validation_report import (
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
)
from analytics_engine.validators.validator import SnapshotValidator

__all__ = [
    "ValidationIssue",
    "ValidationReport",
    "ValidationSeverity",
    "SnapshotValidator",
]
