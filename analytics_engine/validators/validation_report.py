"""Validation report for collecting and formatting snapshot issues."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, List, Optional


class ValidationSeverity(IntEnum):
    """Severity levels for validation issues."""

    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass
class ValidationIssue:
    """Represents a single validation issue.

    Attributes:
        severity: The severity level of the issue
        field: The field (or collection) that has the issue
        message: Human-readable description of the issue
        value: The value that caused the issue
        context: Optional context information (e.g., entry id, project id)
    """

    severity: ValidationSeverity
    field: str
    message: str
    value: Any
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        """Return string representation of the issue.

        Returns:
            Formatted string with severity, field, and message
        """
        context_str = ""
        if self.context:
            context_parts = [f"{k}={v}" for k, v in self.context.items()]
            context_str = f" ({', '.join(context_parts)})"

        return f"[{self.severity.name}] {self.field}: {self.message}{context_str}"


class ValidationReport:
    """Collects and manages validation issues.

    Errors make a snapshot unusable for reporting; warnings flag data the
    aggregators will skip or treat specially (unknown references, missing
    budgets) but that does not stop a report.

    Example:
        >>> report = ValidationReport()
        >>> report.add_error("entries", "Row failed validation", 3)
        >>> report.add_warning("project_id", "Unknown project", "p-9")
        >>> report.summary()
        '1 error(s), 1 warning(s)'
    """

    def __init__(self) -> None:
        """Initialize an empty validation report."""
        self.issues: List[ValidationIssue] = []

    def issues_with(self, severity: ValidationSeverity) -> List[ValidationIssue]:
        """Get all issues of one severity, in the order they were added."""
        return [issue for issue in self.issues if issue.severity == severity]

    @property
    def error_count(self) -> int:
        """Number of error-level issues."""
        return len(self.issues_with(ValidationSeverity.ERROR))

    @property
    def warning_count(self) -> int:
        """Number of warning-level issues."""
        return len(self.issues_with(ValidationSeverity.WARNING))

    @property
    def info_count(self) -> int:
        """Number of info-level issues."""
        return len(self.issues_with(ValidationSeverity.INFO))

    def is_valid(self) -> bool:
        """Check if validation passed (no errors).

        Warnings and info messages do not affect validity.
        """
        return self.error_count == 0

    def add_issue(
        self,
        severity: ValidationSeverity,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an issue of any severity to the report.

        Args:
            severity: Severity of the issue
            field: The field or collection with the issue
            message: Human-readable description
            value: The value that caused the issue
            context: Optional context information
        """
        self.issues.append(
            ValidationIssue(
                severity=severity,
                field=field,
                message=message,
                value=value,
                context=context,
            )
        )

    def add_error(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an error to the report."""
        self.add_issue(ValidationSeverity.ERROR, field, message, value, context)

    def add_warning(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add a warning to the report."""
        self.add_issue(ValidationSeverity.WARNING, field, message, value, context)

    def add_info(
        self,
        field: str,
        message: str,
        value: Any,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Add an info message to the report."""
        self.add_issue(ValidationSeverity.INFO, field, message, value, context)

    def merge(self, other: "ValidationReport") -> None:
        """Merge another validation report into this one.

        Args:
            other: Another ValidationReport to merge
        """
        self.issues.extend(other.issues)

    def to_records(self) -> List[Dict[str, Any]]:
        """Flatten the issues into rows for tabular display."""
        return [
            {
                "severity": issue.severity.name,
                "field": issue.field,
                "message": issue.message,
                "value": issue.value,
                "context": ", ".join(
                    f"{k}={v}" for k, v in (issue.context or {}).items()
                ),
            }
            for issue in self.issues
        ]

    def summary(self) -> str:
        """Get a summary of the validation report.

        Returns:
            Summary string with counts of errors, warnings, and info messages
        """
        parts = []
        if self.error_count > 0:
            parts.append(f"{self.error_count} error(s)")
        if self.warning_count > 0:
            parts.append(f"{self.warning_count} warning(s)")
        if self.info_count > 0:
            parts.append(f"{self.info_count} info message(s)")

        if not parts:
            return "No issues found"

        return ", ".join(parts)

    def format(self) -> str:
        """Format the validation report for display.

        Returns:
            Formatted string with all issues grouped by severity
        """
        if not self.issues:
            return "Validation successful - no issues found"

        lines = [f"Validation Report - {self.summary()}", "=" * 60]

        for severity, heading in (
            (ValidationSeverity.ERROR, "ERRORS"),
            (ValidationSeverity.WARNING, "WARNINGS"),
            (ValidationSeverity.INFO, "INFO"),
        ):
            issues = self.issues_with(severity)
            if issues:
                lines.append(f"\n{heading}:")
                for issue in issues:
                    lines.append(f"  - {issue}")

        return "\n".join(lines)
