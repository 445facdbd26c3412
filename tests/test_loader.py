"""Tests for converting tracker exports into records."""

import json
from datetime import date, datetime

import pytest

from wellness_analytics.loader import (
    exercise_minutes,
    goal_bundle_from_dict,
    goal_from_dict,
    load_goal_bundle,
    load_wellness_records,
    parse_datetime,
    record_from_dict,
    records_from_dicts,
    safe_float,
)


class TestValueParsing:
    """Test scalar value parsing."""

    def test_safe_float(self):
        """Test numeric coercion of exported values."""
        assert safe_float("7.5") == 7.5
        assert safe_float(3) == 3.0
        assert safe_float(None) is None
        assert safe_float("tired") is None
        assert safe_float(True) is None
        assert safe_float(float("nan")) is None

    def test_exercise_flag_becomes_minutes(self):
        """Test exercise flag becomes minutes."""
        assert exercise_minutes(True, present_minutes=30) == 30
        assert exercise_minutes(False, present_minutes=30) == 0
        assert exercise_minutes(45) == 45
        assert exercise_minutes(None) is None

    def test_parse_naive_datetime(self):
        """Test naive timestamps and dates pass through."""
        assert parse_datetime("2025-01-05T08:30:00") == datetime(2025, 1, 5, 8, 30)
        assert parse_datetime(date(2025, 1, 5)) == datetime(2025, 1, 5)

    def test_parse_utc_suffix_yields_naive(self):
        """Test a UTC suffix is converted to naive local time."""
        parsed = parse_datetime("2025-01-05T12:00:00Z")
        assert parsed.tzinfo is None

    def test_parse_invalid(self):
        """Test empty and missing dates are rejected."""
        with pytest.raises(ValueError):
            parse_datetime("")
        with pytest.raises(ValueError):
            parse_datetime(None)


class TestWellnessRecords:
    """Test conversion of exported entries."""

    def test_record_from_entry(self):
        """Test a full exported entry."""
        record = record_from_dict({
            "date": "2025-01-05",
            "mood": 7,
            "energy": "6",
            "stress": None,
            "sleep": 7.5,
            "exercise": True,
            "notes": "good day",
            "factors": ["sunny", "coffee"],
        }, present_minutes=30)

        assert record.date == date(2025, 1, 5)
        assert record.mood == 7
        assert record.energy == 6
        assert record.stress is None
        assert record.sleep == 7.5
        assert record.exercise == 30
        assert record.notes == "good day"
        assert record.factors == ["sunny", "coffee"]

    def test_exercise_from_correlation_factors(self):
        """Test exercise from correlation factors."""
        record = record_from_dict({"date": "2025-01-05", "correlationFactors": {"exercise": 20}})
        assert record.exercise == 20

    def test_missing_date_raises(self):
        """Test missing date raises."""
        with pytest.raises(ValueError):
            record_from_dict({"mood": 5})

    def test_invalid_entries_are_skipped(self):
        """Test invalid entries are skipped."""
        records = records_from_dicts([
            {"date": "2025-01-05", "mood": 5},
            {"mood": 6},
            {"date": "not a date", "mood": 7},
            {"date": "2025-01-06", "mood": 8},
        ])
        assert [r.mood for r in records] == [5, 8]

    def test_invalid_entries_raise_when_strict(self):
        """Test invalid entries raise when strict."""
        with pytest.raises(ValueError):
            records_from_dicts([{"mood": 6}], skip_invalid=False)

    def test_load_from_file(self, tmp_path):
        """Test loading an object with an entries list."""
        entries = [{"date": "2025-01-05", "mood": 5}, {"date": "2025-01-06", "mood": 6}]
        path = tmp_path / "entries.json"
        path.write_text(json.dumps({"entries": entries}))

        records = load_wellness_records(path)
        assert [r.date for r in records] == [date(2025, 1, 5), date(2025, 1, 6)]

    def test_load_rejects_non_list(self, tmp_path):
        """Test load rejects non list."""
        path = tmp_path / "entries.json"
        path.write_text(json.dumps("nope"))
        with pytest.raises(ValueError):
            load_wellness_records(path)


class TestGoals:
    """Test goal and progress bundle parsing."""

    def test_camel_case_goal(self):
        """Test a goal exported with camelCase keys."""
        goal = goal_from_dict({
            "id": "g1",
            "title": "Read books",
            "targetValue": 12,
            "currentValue": 3,
            "unit": "books",
            "createdAt": "2025-01-01T00:00:00",
            "deadline": "2025-12-31T00:00:00",
        })
        assert goal.target_value == 12
        assert goal.current_value == 3
        assert goal.created_at == datetime(2025, 1, 1)
        assert goal.name == "Read books"

    def test_goal_without_target_raises(self):
        """Test goal without target raises."""
        with pytest.raises(ValueError):
            goal_from_dict({"created_at": "2025-01-01", "deadline": "2025-02-01"})

    def test_bundle(self):
        """Test a goal bundle with other goals."""
        goal = {"id": "a", "target_value": 10, "created_at": "2025-01-01", "deadline": "2025-02-01"}
        other = {"id": "b", "target_value": 5, "created_at": "2025-01-01", "deadline": "2025-02-01"}
        bundle = goal_bundle_from_dict({
            "goal": goal,
            "progress": [
                {"timestamp": "2025-01-02T09:00:00", "value": 1, "mood": 6},
                {"timestamp": "2025-01-03T09:00:00", "value": "n/a"},
            ],
            "otherGoals": [{"goal": other, "progress": [{"date": "2025-01-02", "value": 2}]}],
        })

        parsed_goal, samples, other_goals = bundle
        assert parsed_goal.id == "a"
        assert len(samples) == 1
        assert samples[0].mood == 6
        assert other_goals[0][0].id == "b"
        assert other_goals[0][1][0].value == 2

    def test_load_bundle_requires_goal(self, tmp_path):
        """Test load bundle requires goal."""
        path = tmp_path / "goal.json"
        path.write_text(json.dumps({"progress": []}))
        with pytest.raises(ValueError):
            load_goal_bundle(path)
