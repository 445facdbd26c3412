"""Data quality scoring for a wellness logging history."""

from datetime import date, timedelta
from typing import Optional, Sequence

from ..models import DataQuality, WellnessRecord
from .statistics import mean

GAP_PENALTY_PER_DAY = 10


def assess_data_quality(records: Sequence[WellnessRecord], as_of: Optional[date] = None) -> DataQuality:
    """Score how complete, regular and detailed the logging history is.

    Args:
        records: Wellness records in any order
        as_of: Day the history is evaluated on (defaults to today)

    Returns:
        DataQuality with completeness, consistency, depth and reliability (0-100)
    """
    as_of = as_of or date.today()
    records = sorted(records, key=lambda record: record.date)

    first_date = records[0].date if records else as_of
    total_possible_days = max(1, (as_of - first_date).days + 1)
    days_tracked = len(records)
    completeness = min(100.0, days_tracked / total_possible_days * 100)

    consistency = 0.0
    if len(records) > 1:
        gaps = [(current.date - previous.date).days for previous, current in zip(records, records[1:])]
        consistency = max(0.0, 100 - (mean(gaps) - 1) * GAP_PENALTY_PER_DAY)

    depth = 0.0
    if records:
        with_notes = sum(1 for record in records if record.notes and record.notes.strip())
        with_factors = sum(1 for record in records if record.factors)
        depth = (with_notes + with_factors) / (len(records) * 2) * 100

    return DataQuality(
        completeness=completeness,
        consistency=consistency,
        depth=depth,
        reliability=(completeness + consistency + depth) / 3,
        days_tracked=days_tracked,
        total_possible_days=total_possible_days,
    )


def calculate_streak(records: Sequence[WellnessRecord], as_of: Optional[date] = None) -> int:
    """Consecutive logged days ending today, or yesterday if today is not logged yet."""
    as_of = as_of or date.today()
    logged_days = {record.date for record in records}
    if not logged_days:
        return 0

    current = as_of if as_of in logged_days else as_of - timedelta(days=1)
    streak = 0
    while current in logged_days:
        streak += 1
        current -= timedelta(days=1)

    return streak
