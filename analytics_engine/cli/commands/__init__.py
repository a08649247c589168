"""CLI commands for the analytics engine."""
