"""Tests for the snapshot validator."""

from analytics_engine.readers import SnapshotReader
from analytics_engine.validators import SnapshotValidator, ValidationSeverity


def _validate(data):
    return SnapshotValidator().validate(SnapshotReader().parse(data))


class TestSnapshotValidator:
    """Tests for SnapshotValidator."""

    def test_clean_snapshot(self, sample_snapshot_data):
        """Test that the sample snapshot has no issues."""
        report = _validate(sample_snapshot_data)

        assert report.is_valid()
        assert report.issues == []

    def test_rejected_rows_are_errors(self, sample_snapshot_data):
        """Test that rows failing validation become errors."""
        sample_snapshot_data["invoices"].append({"id": "i2", "total": -5})

        report = _validate(sample_snapshot_data)

        assert report.error_count == 1
        assert report.issues[0].field == "invoices"
        assert report.issues[0].context == {"row": 2}

    def test_duplicate_ids(self, sample_snapshot_data):
        """Test duplicate identifier detection."""
        sample_snapshot_data["members"].append({"id": "u1", "email": "copy@example.com"})

        report = _validate(sample_snapshot_data)

        errors = report.issues_with(ValidationSeverity.ERROR)
        assert len(errors) == 1
        assert errors[0].value == "u1"
        assert "2 times" in errors[0].message

    def test_unknown_references(self, sample_snapshot_data):
        """Test warnings for dangling references."""
        sample_snapshot_data["timeEntries"][0]["userId"] = "ghost"
        sample_snapshot_data["timeEntries"][1]["projectId"] = "p9"
        sample_snapshot_data["projectExpenses"][0]["projectId"] = "p9"
        sample_snapshot_data["allocations"][0]["projectId"] = "p9"

        report = _validate(sample_snapshot_data)

        assert report.is_valid()
        assert report.warning_count == 4
        assert {issue.value for issue in report.issues} == {"ghost", "p9"}

    def test_entry_with_embedded_project_not_flagged(self, sample_snapshot_data):
        """Test that an entry carrying its project snapshot is resolvable."""
        entry = sample_snapshot_data["timeEntries"][0]
        entry["projectId"] = "p9"
        entry["project"] = {"name": "Archived"}

        report = _validate(sample_snapshot_data)

        assert report.warning_count == 0

    def test_implausible_hours_and_missing_rate(self, sample_snapshot_data):
        """Test entry plausibility warnings."""
        entry = sample_snapshot_data["timeEntries"][0]
        entry["hours"] = 30
        entry["user"] = {"hourlyRate": 0, "costRate": 50}

        report = _validate(sample_snapshot_data)

        assert [issue.field for issue in report.issues] == ["hours", "hourly_rate"]

    def test_info_messages(self, sample_snapshot_data):
        """Test handled defaults reported as info."""
        sample_snapshot_data["projects"][0].pop("endDate")
        sample_snapshot_data["companyExpenses"][0].pop("frequency")

        report = _validate(sample_snapshot_data)

        assert report.info_count == 2
        assert report.is_valid()
