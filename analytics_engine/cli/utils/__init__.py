"""CLI utilities for output formatting."""
