"""Unit tests for CLI output formatters."""

import pandas as pd

from analytics_engine.cli.utils.formatters import (
    format_cell,
    format_dataframe,
    format_error,
    format_info,
    format_success,
    format_table,
    format_warning,
)


class TestFormatters:
    """Test suite for CLI output formatters."""

    def test_format_messages_contain_text(self):
        """Test that message formatters include the message and symbol."""
        assert "✓ Operation completed" in format_success("Operation completed")
        assert "✗ Something went wrong" in format_error("Something went wrong")
        assert "⚠ This is a warning" in format_warning("This is a warning")
        assert "ℹ Information message" in format_info("Information message")

    def test_format_cell(self):
        """Test cell rendering."""
        assert format_cell(12500.5) == "12,500.50"
        assert format_cell(None) == ""
        assert format_cell(float("nan")) == ""
        assert format_cell(True) == "yes"
        assert format_cell(False) == "no"
        assert format_cell(3) == "3"
        assert format_cell("2024-01") == "2024-01"

    def test_format_table_with_headers_and_rows(self):
        """Test table formatting with headers and data."""
        result = format_table(["Name", "Hours"], [["Alice", 30.0], ["Bob", 7.5]])

        lines = result.splitlines()
        assert lines[0] == "+-------+-------+"
        assert lines[1] == "| Name  | Hours |"
        assert lines[3] == "| Alice | 30.00 |"
        assert len(lines) == 6

    def test_format_table_with_empty_rows(self):
        """Test table formatting with no data rows."""
        result = format_table(["Name", "Age"], [])

        assert "Name" in result
        assert len(result.splitlines()) == 3

    def test_format_table_without_headers(self):
        """Test that no headers render nothing."""
        assert format_table([], [["x"]]) == ""

    def test_format_table_truncates_long_cells(self):
        """Test column width limit."""
        result = format_table(["Project"], [["x" * 60]], max_width=10)
        assert "| xxxxxxxxxx |" in result

    def test_format_dataframe(self):
        """Test rendering a DataFrame with a missing value."""
        df = pd.DataFrame([{"name": "Ada", "margin": 45.5}, {"name": "Grace", "margin": None}])

        result = format_dataframe(df)

        assert "| Ada   | 45.50  |" in result
        assert "| Grace |        |" in result

    def test_format_empty_dataframe(self):
        """Test the placeholder for empty tables."""
        assert format_dataframe(pd.DataFrame()) == "(no rows)"
