"""
Conversion of exported tracker data into typed records.

The tracker exports JSON; this is the boundary where field names are
normalized (camelCase or snake_case), non-numeric measures are dropped and the
exercise field is converted to minutes.
"""

import json
import logging
import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .config import config
from .models import GoalRecord, ProgressSample, WellnessMetric, WellnessRecord

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
GoalBundle = Tuple[GoalRecord, List[ProgressSample], List[Tuple[GoalRecord, List[ProgressSample]]]]


def _pick(raw: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def parse_datetime(value: Any) -> datetime:
    """Parse an ISO-8601 string (or pass a datetime through) as naive local time."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Invalid date value: {value!r}")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_date(value: Any) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    return parse_datetime(value).date()


def safe_float(value: Any) -> Optional[float]:
    """Numeric value or None for anything non-numeric or non-finite."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def exercise_minutes(value: Any, present_minutes: Optional[float] = None) -> Optional[float]:
    """Exercise as minutes; a yes/no flag becomes a fixed number of minutes."""
    if isinstance(value, bool):
        minutes = config.EXERCISE_PRESENT_MINUTES if present_minutes is None else present_minutes
        return float(minutes) if value else 0.0
    return safe_float(value)


def record_from_dict(raw: Mapping[str, Any], present_minutes: Optional[float] = None) -> WellnessRecord:
    """Build a WellnessRecord from one exported entry."""
    date_value = _pick(raw, "date", "timestamp")
    if date_value is None:
        raise ValueError(f"Entry has no date: {dict(raw)!r}")

    exercise_raw = raw.get("exercise")
    if exercise_raw is None:
        exercise_raw = _pick(raw.get("correlationFactors") or {}, "exercise")

    measures = {
        metric.value: safe_float(raw.get(metric.value))
        for metric in WellnessMetric
        if metric is not WellnessMetric.EXERCISE
    }

    factors = raw.get("factors") or []
    return WellnessRecord(
        date=parse_date(date_value),
        exercise=exercise_minutes(exercise_raw, present_minutes),
        notes=str(raw.get("notes") or ""),
        factors=[str(factor) for factor in factors] if isinstance(factors, (list, tuple)) else [],
        **measures,
    )


def records_from_dicts(entries: Sequence[Mapping[str, Any]], present_minutes: Optional[float] = None,
                       skip_invalid: bool = True) -> List[WellnessRecord]:
    records = []
    for i, raw in enumerate(entries):
        try:
            records.append(record_from_dict(raw, present_minutes))
        except (ValueError, TypeError) as e:
            if not skip_invalid:
                raise
            logger.warning(f"Skipping entry {i}: {e}")
    return records


def load_wellness_records(path: PathLike, present_minutes: Optional[float] = None) -> List[WellnessRecord]:
    """Load records from a JSON export (a list, or an object with ``entries``)."""
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, Mapping):
        data = data.get("entries", [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of entries")

    records = records_from_dicts(data, present_minutes)
    logger.info(f"Loaded {len(records)} wellness records from {path}")
    return records


def goal_from_dict(raw: Mapping[str, Any]) -> GoalRecord:
    target = safe_float(_pick(raw, "target_value", "targetValue"))
    current = safe_float(_pick(raw, "current_value", "currentValue", default=0))
    if target is None:
        raise ValueError(f"Goal has no numeric target: {dict(raw)!r}")

    return GoalRecord(
        target_value=target,
        current_value=current or 0.0,
        created_at=parse_datetime(_pick(raw, "created_at", "createdAt")),
        deadline=parse_datetime(raw.get("deadline")),
        unit=str(raw.get("unit") or ""),
        id=str(raw.get("id") or ""),
        title=str(raw.get("title") or ""),
    )


def sample_from_dict(raw: Mapping[str, Any]) -> ProgressSample:
    value = safe_float(raw.get("value"))
    if value is None:
        raise ValueError(f"Progress sample has no numeric value: {dict(raw)!r}")

    return ProgressSample(
        timestamp=parse_datetime(_pick(raw, "timestamp", "date")),
        value=value,
        mood=safe_float(raw.get("mood")),
        notes=str(raw.get("notes") or ""),
    )


def _samples(entries: Sequence[Mapping[str, Any]]) -> List[ProgressSample]:
    samples = []
    for i, raw in enumerate(entries):
        try:
            samples.append(sample_from_dict(raw))
        except (ValueError, TypeError) as e:
            logger.warning(f"Skipping progress sample {i}: {e}")
    return samples


def goal_bundle_from_dict(data: Mapping[str, Any]) -> GoalBundle:
    """Goal, its progress and the other goals' histories from one export object."""
    goal = goal_from_dict(data["goal"])
    samples = _samples(data.get("progress", []))

    other_goals = []
    for other in _pick(data, "other_goals", "otherGoals", default=[]):
        other_goals.append((goal_from_dict(other["goal"]), _samples(other.get("progress", []))))

    return goal, samples, other_goals


def load_goal_bundle(path: PathLike) -> GoalBundle:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, Mapping) or "goal" not in data:
        raise ValueError(f"{path}: expected an object with a 'goal' key")

    return goal_bundle_from_dict(data)
