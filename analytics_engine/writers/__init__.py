"""Writers turning report payloads into tabular output."""

from analytics_engine.writers.report_table_writer import ReportTables, ReportTableWriter

__all__ = ["ReportTables", "ReportTableWriter"]
