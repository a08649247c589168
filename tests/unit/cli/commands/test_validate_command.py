"""Unit tests for validate-data command."""

import json

import pytest

from analytics_engine.cli.commands.validate import validate_data


@pytest.fixture
def write_snapshot(tmp_path):
    """Write a snapshot dict to a temporary file."""

    def _write(data):
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write


class TestValidateDataCommand:
    """Test suite for validate-data command."""

    def test_clean_snapshot(self, runner, mock_env, snapshot_file):
        """Test that a clean snapshot passes."""
        result = runner.invoke(validate_data, ["--snapshot", str(snapshot_file)])

        assert result.exit_code == 0
        assert "Validation Summary" in result.output
        assert "Members:          2" in result.output
        assert "Time entries:     3" in result.output
        assert "Validation passed! No issues found." in result.output

    def test_warnings_do_not_fail(self, runner, mock_env, sample_snapshot_data, write_snapshot):
        """Test that warnings are shown with exit code 0."""
        sample_snapshot_data["timeEntries"][0]["userId"] = "ghost"

        result = runner.invoke(validate_data, ["--snapshot", write_snapshot(sample_snapshot_data)])

        assert result.exit_code == 0
        assert "WARNINGS (1):" in result.output
        assert "Validation completed with 1 warning(s)" in result.output

    def test_errors_exit_with_code_3(self, runner, mock_env, sample_snapshot_data, write_snapshot):
        """Test that errors fail validation."""
        sample_snapshot_data["projects"].append({"id": "p1", "name": "Duplicate"})

        result = runner.invoke(validate_data, ["--snapshot", write_snapshot(sample_snapshot_data)])

        assert result.exit_code == 3
        assert "ERRORS (1):" in result.output
        assert "Validation failed with 1 error(s)" in result.output

    def test_severity_filter(self, runner, mock_env, sample_snapshot_data, write_snapshot):
        """Test that info messages only show with --severity info."""
        sample_snapshot_data["projects"][0].pop("endDate")
        path = write_snapshot(sample_snapshot_data)

        default = runner.invoke(validate_data, ["--snapshot", path])
        verbose = runner.invoke(validate_data, ["--snapshot", path, "--severity", "info"])

        assert "INFOS (1):" not in default.output
        assert "INFOS (1):" in verbose.output
        assert verbose.exit_code == 0

    def test_issue_list_is_capped(self, runner, mock_env, sample_snapshot_data, write_snapshot):
        """Test that long issue lists are truncated."""
        for i in range(25):
            entry = dict(sample_snapshot_data["timeEntries"][0], id=f"x{i}", userId="ghost")
            sample_snapshot_data["timeEntries"].append(entry)

        result = runner.invoke(validate_data, ["--snapshot", write_snapshot(sample_snapshot_data)])

        assert "... and 5 more" in result.output

    def test_missing_snapshot(self, runner, mock_env):
        """Test that a snapshot is required."""
        result = runner.invoke(validate_data, [])

        assert result.exit_code == 1
        assert "No snapshot file given" in result.output
