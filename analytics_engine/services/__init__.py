"""Services building report payloads from loaded data."""

from analytics_engine.services.report_service import ReportService, ReportType

__all__ = ["ReportService", "ReportType"]
