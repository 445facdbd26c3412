"""Tests for the command-line interface."""

import json
from datetime import date, timedelta

import pytest
from click.testing import CliRunner

from wellness_analytics import cli as cli_module
from wellness_analytics.cli import cli


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    monkeypatch.setattr(cli_module.config, "LOG_LEVEL", "ERROR")


@pytest.fixture
def entries_file(tmp_path):
    start = date(2025, 1, 5)
    entries = []
    for i in range(21):
        sleep = 6 + (i % 4)
        entries.append({
            "date": (start + timedelta(days=i)).isoformat(),
            "mood": sleep - 1,
            "energy": 5 + (i % 3),
            "stress": 4,
            "sleep": sleep,
            "exercise": i % 2 == 0,
            "notes": "logged",
        })
    path = tmp_path / "entries.json"
    path.write_text(json.dumps(entries))
    return path


@pytest.fixture
def goal_file(tmp_path):
    bundle = {
        "goal": {
            "id": "run",
            "title": "Run 100 km",
            "targetValue": 100,
            "currentValue": 20,
            "unit": "km",
            "createdAt": "2025-02-19T12:00:00",
            "deadline": "2025-05-30T12:00:00",
        },
        "progress": [
            {"timestamp": f"2025-02-{day:02d}T12:00:00", "value": (day - 19) * 2}
            for day in range(19, 29)
        ],
    }
    path = tmp_path / "goal.json"
    path.write_text(json.dumps(bundle))
    return path


class TestInsightsCommand:
    """Test the insights command."""

    def test_json_output(self, entries_file):
        """Test --json prints the serialized result."""
        result = CliRunner().invoke(cli, ["insights", str(entries_file), "--json"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert set(payload) >= {"correlations", "trends", "patterns", "optimizations", "prediction", "wellness_metrics"}
        sleep = [c for c in payload["correlations"] if c["factor"] == "Sleep"]
        assert sleep and sleep[0]["correlation"] == pytest.approx(1.0)

    def test_table_output(self, entries_file):
        """Test the rich table rendering."""
        result = CliRunner().invoke(cli, ["insights", str(entries_file)])
        assert result.exit_code == 0, result.output
        assert "Mood Correlations" in result.output

    def test_invalid_override(self, entries_file):
        """Test an out-of-range override is rejected."""
        result = CliRunner().invoke(cli, ["insights", str(entries_file), "--confidence", "2"])
        assert result.exit_code != 0
        assert "Invalid configuration" in result.output

    def test_malformed_file(self, tmp_path):
        """Test unreadable JSON fails with a clean error."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        result = CliRunner().invoke(cli, ["insights", str(path)])
        assert result.exit_code != 0
        assert "Could not read" in result.output


class TestGoalCommand:
    """Test the goal command."""

    def test_json_output(self, goal_file):
        """Test --json prints the serialized result."""
        result = CliRunner().invoke(cli, ["goal", str(goal_file), "--json", "--now", "2025-03-01T12:00:00"])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert payload["metrics"]["completion_rate"] == pytest.approx(20)
        assert payload["metrics"]["average_daily_progress"] == pytest.approx(2.0)
        assert payload["metrics"]["efficiency_score"] == 100

    def test_invalid_now(self, goal_file):
        """Test an unparseable --now value is rejected."""
        result = CliRunner().invoke(cli, ["goal", str(goal_file), "--now", "yesterday"])
        assert result.exit_code != 0
        assert "Invalid --now" in result.output


class TestQualityCommand:
    """Test the quality command."""

    def test_quality_table(self, entries_file):
        """Test the quality table with a pinned date."""
        result = CliRunner().invoke(cli, ["quality", str(entries_file), "--as-of", "2025-01-26"])
        assert result.exit_code == 0, result.output
        assert "Data Quality" in result.output
        assert "21 days" in result.output
