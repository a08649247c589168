"""Input-shape errors raised by the analytics engine.

Data sparsity (no entries, no budget, too few forecast points) is never an
error; those cases return documented empty or zeroed results. Only malformed
requests raise, and they raise before any aggregation runs.
"""

from typing import Optional


class AnalyticsInputError(ValueError):
    """Base class for rejected analytics requests."""

    def __init__(self, message: str, field: Optional[str] = None):
        """Initialize the error.

        Args:
            message: Human-readable description of the problem
            field: Name of the offending request field, if any
        """
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidGranularityError(AnalyticsInputError):
    """Granularity token is not one of the supported values."""


class InvalidDateRangeError(AnalyticsInputError):
    """Date range is missing or its start lies after its end."""


class UnknownReportTypeError(AnalyticsInputError):
    """Requested report type does not exist."""


class EntityNotFoundError(AnalyticsInputError):
    """A report was requested for a member or project that is not in the dataset."""
