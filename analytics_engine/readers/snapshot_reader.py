"""Snapshot reader for loading exported entity collections from JSON.

A snapshot is one JSON object holding every collection a report needs, as
exported from the storage layer::

    {
      "members": [...],
      "projects": [...],
      "timeEntries": [...],
      "projectExpenses": [...],
      "companyExpenses": [...],
      "allocations": [...],
      "invoices": [...],
      "holidays": ["2024-12-25", ...]
    }

Keys may be camelCase or snake_case; missing collections are empty.
"""

import datetime as dt
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from analytics_engine.models.allocation import ResourceAllocation
from analytics_engine.models.expense import CompanyExpense, ProjectExpense
from analytics_engine.models.invoice import Invoice
from analytics_engine.models.member import Member
from analytics_engine.models.project import Project
from analytics_engine.models.time_entry import TimeEntry

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class SnapshotError(Exception):
    """Raised when a snapshot file cannot be read or parsed."""


@dataclass
class RejectedRow:
    """A snapshot row that failed model validation.

    Attributes:
        collection: Collection the row belongs to
        index: Position of the row in its collection (1-based)
        error: Validation error message
    """

    collection: str
    index: int
    error: str


@dataclass
class Snapshot:
    """All entity collections of one export, validated into models."""

    members: List[Member] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    entries: List[TimeEntry] = field(default_factory=list)
    project_expenses: List[ProjectExpense] = field(default_factory=list)
    company_expenses: List[CompanyExpense] = field(default_factory=list)
    allocations: List[ResourceAllocation] = field(default_factory=list)
    invoices: List[Invoice] = field(default_factory=list)
    holidays: List[dt.date] = field(default_factory=list)
    rejected_rows: List[RejectedRow] = field(default_factory=list)

    def find_member(self, member_id: str) -> Optional[Member]:
        """Get a member by id, or None."""
        return next((m for m in self.members if m.id == member_id), None)

    def find_project(self, project_id: str) -> Optional[Project]:
        """Get a project by id, or None."""
        return next((p for p in self.projects if p.id == project_id), None)


# Snapshot collection name -> (accepted JSON keys, model)
_COLLECTIONS: Dict[str, Tuple[Tuple[str, ...], Type[BaseModel]]] = {
    "members": (("members",), Member),
    "projects": (("projects",), Project),
    "entries": (("timeEntries", "time_entries", "entries"), TimeEntry),
    "project_expenses": (("projectExpenses", "project_expenses"), ProjectExpense),
    "company_expenses": (("companyExpenses", "company_expenses"), CompanyExpense),
    "allocations": (
        ("allocations", "resourceAllocations", "resource_allocations"),
        ResourceAllocation,
    ),
    "invoices": (("invoices",), Invoice),
}


class SnapshotReader:
    """Reader for JSON snapshot files.

    Rows that fail validation are skipped with a warning and recorded on
    the snapshot's ``rejected_rows``; in strict mode the first invalid row
    raises instead.

    Example:
        >>> reader = SnapshotReader()
        >>> snapshot = reader.read("exports/2024-q1.json")
        >>> len(snapshot.entries)
        1250
    """

    def __init__(self, strict: bool = False):
        """Initialize the snapshot reader.

        Args:
            strict: Raise SnapshotError on the first invalid row
        """
        self.strict = strict

    def read(self, path: Union[str, Path]) -> Snapshot:
        """Read and validate a snapshot file.

        Args:
            path: Path to the JSON snapshot

        Returns:
            Snapshot with validated collections

        Raises:
            SnapshotError: If the file is missing, not JSON, not an object,
                or (strict mode) holds an invalid row
        """
        path = Path(path)
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            raise SnapshotError(f"Snapshot file not found: {path}")
        except json.JSONDecodeError as e:
            raise SnapshotError(f"Snapshot file {path} is not valid JSON: {e}")

        logger.info(f"Loaded snapshot from {path}")
        return self.parse(data)

    def parse(self, data: Any) -> Snapshot:
        """Validate an already-decoded snapshot object.

        Args:
            data: Decoded JSON object

        Returns:
            Snapshot with validated collections

        Raises:
            SnapshotError: If data is not an object or (strict mode) holds an
                invalid row
        """
        if not isinstance(data, dict):
            raise SnapshotError("Snapshot must be a JSON object of collections")

        snapshot = Snapshot()
        for name, (keys, model) in _COLLECTIONS.items():
            rows = self._collection_rows(data, keys)
            setattr(snapshot, name, self._parse_rows(name, rows, model, snapshot))

        snapshot.holidays = self._parse_holidays(data.get("holidays", []), snapshot)

        logger.info(
            f"Parsed snapshot: {len(snapshot.members)} members, "
            f"{len(snapshot.projects)} projects, {len(snapshot.entries)} entries, "
            f"{len(snapshot.rejected_rows)} rejected row(s)"
        )
        return snapshot

    @staticmethod
    def _collection_rows(data: Dict[str, Any], keys: Sequence[str]) -> List[Any]:
        for key in keys:
            if key in data:
                rows = data[key]
                if not isinstance(rows, list):
                    raise SnapshotError(f"Snapshot collection '{key}' must be a list")
                return rows
        return []

    def _parse_rows(
        self,
        name: str,
        rows: List[Any],
        model: Type[ModelT],
        snapshot: Snapshot,
    ) -> List[ModelT]:
        parsed: List[ModelT] = []
        for index, row in enumerate(rows, start=1):
            try:
                parsed.append(model.model_validate(row))
            except ValidationError as e:
                if self.strict:
                    raise SnapshotError(f"Invalid row {index} in {name}: {e}")
                logger.warning(f"Skipping invalid row {index} in {name}: {e}")
                snapshot.rejected_rows.append(
                    RejectedRow(collection=name, index=index, error=str(e))
                )
        return parsed

    def _parse_holidays(self, values: Any, snapshot: Snapshot) -> List[dt.date]:
        if not isinstance(values, list):
            raise SnapshotError("Snapshot 'holidays' must be a list of ISO dates")

        holidays: List[dt.date] = []
        for index, value in enumerate(values, start=1):
            try:
                holidays.append(dt.date.fromisoformat(str(value)))
            except ValueError as e:
                if self.strict:
                    raise SnapshotError(f"Invalid holiday {index}: {e}")
                logger.warning(f"Skipping invalid holiday '{value}': {e}")
                snapshot.rejected_rows.append(
                    RejectedRow(collection="holidays", index=index, error=str(e))
                )
        return holidays
