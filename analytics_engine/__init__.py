"""Analytics aggregation and forecasting engine for time-tracking reports."""

__version__ = "1.0.0"
