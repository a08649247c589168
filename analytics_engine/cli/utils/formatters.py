"""Output formatting utilities for CLI."""

from typing import Any, List

import click
import pandas as pd


def format_success(message: str) -> str:
    """Format a success message with green color.

    Args:
        message: The success message to format

    Returns:
        Formatted success message with color
    """
    return click.style(f"✓ {message}", fg="green", bold=True)


def format_error(message: str) -> str:
    """Format an error message with red color."""
    return click.style(f"✗ {message}", fg="red", bold=True)


def format_warning(message: str) -> str:
    """Format a warning message with yellow color."""
    return click.style(f"⚠ {message}", fg="yellow", bold=True)


def format_info(message: str) -> str:
    """Format an info message with blue color."""
    return click.style(f"ℹ {message}", fg="blue")


def format_cell(value: Any) -> str:
    """Render one table cell.

    Floats are shown with two decimals and thousands separators, missing
    values as an empty cell.

    Example:
        >>> format_cell(12500.5)
        '12,500.50'
        >>> format_cell(None)
        ''
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        if value != value:  # NaN from a missing DataFrame cell
            return ""
        return f"{value:,.2f}"
    return str(value)


def format_table(headers: List[str], rows: List[List[Any]], max_width: int = 40) -> str:
    """Format data as a boxed table.

    Args:
        headers: Column headers
        rows: Data rows (each row is a list of cell values)
        max_width: Maximum width of a column; longer cells are truncated

    Returns:
        Formatted table as a string
    """
    if not headers:
        return ""

    cells = [[format_cell(value) for value in row] for row in rows]
    widths = [len(str(header)) for header in headers]
    for row in cells:
        for i, cell in enumerate(row[: len(widths)]):
            widths[i] = max(widths[i], len(cell))
    widths = [min(width, max_width) for width in widths]

    separator = "+" + "+".join("-" * (width + 2) for width in widths) + "+"

    def line(values: List[str]) -> str:
        return (
            "|"
            + "|".join(
                f" {str(value)[:width]:<{width}} " for value, width in zip(values, widths)
            )
            + "|"
        )

    lines = [separator, line([str(header) for header in headers]), separator]
    if cells:
        lines.extend(line(row) for row in cells)
        lines.append(separator)
    return "\n".join(lines)


def format_dataframe(df: pd.DataFrame, max_width: int = 40) -> str:
    """Format a DataFrame as a boxed table.

    Args:
        df: Table to render
        max_width: Maximum width of a column

    Returns:
        Formatted table, or a placeholder line for an empty frame
    """
    if df.empty:
        return "(no rows)"
    rows = df.astype(object).where(df.notna(), None).values.tolist()
    return format_table([str(column) for column in df.columns], rows, max_width)
