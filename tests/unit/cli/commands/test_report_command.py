"""Unit tests for the report command."""

import json

import pytest

from analytics_engine.cli import cli
from analytics_engine.cli.commands.report import build_report

WINDOW = ["--start-date", "2024-01-01", "--end-date", "2024-03-31", "--today", "2024-03-01"]


@pytest.fixture
def invoke(runner, mock_env, snapshot_file):
    """Invoke the report command against the sample snapshot."""

    def _invoke(*args):
        return runner.invoke(
            build_report, ["--snapshot", str(snapshot_file), *WINDOW, *args]
        )

    return _invoke


class TestReportCommand:
    """Test suite for the report command."""

    def test_team_report_table(self, invoke):
        """Test the default table output."""
        result = invoke("--type", "team")

        assert result.exit_code == 0, result.output
        assert "Team report: 2024-01-01 to 2024-03-31" in result.output
        assert "Utilization" in result.output
        assert "Time Mix" in result.output
        assert "Ada Lovelace" in result.output

    def test_company_report_json(self, invoke):
        """Test JSON output is the bare payload."""
        result = invoke("--type", "company", "--format", "json")

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert payload["collections"]["paid"] == 1000.0
        assert len(payload["revenue_overhead"]) == 3

    def test_employee_listing(self, invoke):
        """Test the employee report without an id."""
        result = invoke("--type", "employee", "--format", "json")

        assert json.loads(result.output)["members"][0]["id"] == "u1"

    def test_weekly_granularity(self, invoke):
        """Test weekly bucketing of the employee report."""
        result = invoke(
            "--type", "employee", "--employee-id", "u1", "--granularity", "weekly", "--format", "json"
        )

        assert result.exit_code == 0, result.output
        assert len(json.loads(result.output)["utilization_trend"]) == 13

    def test_csv_output(self, invoke, tmp_path):
        """Test writing sections as CSV files."""
        output_dir = tmp_path / "out"

        result = invoke("--type", "risk", "--output-dir", str(output_dir))

        assert result.exit_code == 0, result.output
        assert "Wrote 1 CSV file(s)" in result.output
        assert (output_dir / "risk_budget_velocity.csv").exists()

    def test_unknown_employee(self, invoke):
        """Test that unknown ids exit with code 2."""
        result = invoke("--type", "employee", "--employee-id", "nobody")

        assert result.exit_code == 2
        assert "Not Found: Employee not found: nobody" in result.output

    def test_invalid_date(self, runner, mock_env, snapshot_file):
        """Test that malformed dates exit with code 2."""
        result = runner.invoke(
            build_report,
            [
                "--snapshot", str(snapshot_file),
                "--type", "team",
                "--start-date", "March 1st",
                "--end-date", "2024-03-31",
            ],
        )

        assert result.exit_code == 2
        assert "Invalid Request" in result.output

    def test_reversed_window(self, runner, mock_env, snapshot_file):
        """Test that a reversed window is rejected."""
        result = runner.invoke(
            build_report,
            [
                "--snapshot", str(snapshot_file),
                "--type", "team",
                "--start-date", "2024-03-31",
                "--end-date", "2024-01-01",
            ],
        )

        assert result.exit_code == 2

    def test_unknown_report_type(self, invoke):
        """Test that click rejects unknown report types."""
        result = invoke("--type", "payroll")
        assert result.exit_code == 2
        assert "Invalid value" in result.output

    def test_missing_snapshot_option(self, runner, mock_env):
        """Test that a snapshot is required."""
        result = runner.invoke(build_report, ["--type", "team", *WINDOW])

        assert result.exit_code == 1
        assert "No snapshot file given" in result.output

    def test_snapshot_from_settings(self, runner, mock_env, snapshot_file, monkeypatch):
        """Test SNAPSHOT_PATH from the environment."""
        monkeypatch.setenv("SNAPSHOT_PATH", str(snapshot_file))

        result = runner.invoke(build_report, ["--type", "risk", *WINDOW])

        assert result.exit_code == 0, result.output

    def test_missing_snapshot_file(self, runner, mock_env, tmp_path):
        """Test that an unreadable snapshot exits with code 3."""
        result = runner.invoke(
            build_report,
            ["--snapshot", str(tmp_path / "missing.json"), "--type", "team", *WINDOW],
        )

        assert result.exit_code == 3
        assert "Snapshot Error" in result.output

    def test_strict_mode(self, runner, mock_env, tmp_path, sample_snapshot_data):
        """Test that strict mode fails on invalid rows."""
        sample_snapshot_data["members"].append({"email": "no-id@example.com"})
        path = tmp_path / "snapshot.json"
        path.write_text(json.dumps(sample_snapshot_data), encoding="utf-8")

        lenient = runner.invoke(build_report, ["--snapshot", str(path), "--type", "team", *WINDOW])
        strict = runner.invoke(
            build_report, ["--snapshot", str(path), "--type", "team", "--strict", *WINDOW]
        )

        assert lenient.exit_code == 0
        assert "Skipped 1 invalid row(s)" in lenient.output
        assert strict.exit_code == 3

    def test_through_cli_group(self, runner, mock_env, snapshot_file):
        """Test the command registered on the group."""
        result = runner.invoke(
            cli, ["report", "--snapshot", str(snapshot_file), "--type", "forecast", *WINDOW]
        )

        assert result.exit_code == 0, result.output
        assert "Revenue Bridge" in result.output
