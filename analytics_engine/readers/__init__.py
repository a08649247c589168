"""Readers for loading entity snapshots."""

from analytics_engine.readers.snapshot_reader import (
    RejectedRow,
    Snapshot,
    SnapshotError,
    SnapshotReader,
)

__all__ = ["RejectedRow", "Snapshot", "SnapshotError", "SnapshotReader"]
