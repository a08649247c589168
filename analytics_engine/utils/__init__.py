"""Utility helpers for the analytics engine."""
