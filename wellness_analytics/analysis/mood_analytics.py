"""
Mood analytics engine for daily wellness records.

This module implements:
1. Mood-vs-factor Pearson correlations with significance testing
2. Linear trend detection per metric
3. Weekly (day-of-week) mood pattern detection
4. Optimization suggestions generated from significant correlations
5. Aggregate wellness metrics, moving averages and a one-week mood prediction
"""

import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd

from ..config import AnalyticsConfig
from ..models import (
    CORRELATION_FACTORS,
    AdvancedInsights,
    CorrelationResult,
    MoodPattern,
    MoodPrediction,
    MovingAveragePoint,
    OptimizationSuggestion,
    TrendResult,
    WellnessMetric,
    WellnessMetrics,
    WellnessRecord,
)
from .statistics import linear_regression, mean, moving_average, pearson_correlation

# Indexed by date.weekday()
WEEKDAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
# Reporting order
WEEKDAY_ORDER = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

STABLE_WEEKLY_CHANGE = 0.1
MIN_PATTERN_WEEKDAYS = 4
MIN_PATTERN_VARIATION = 0.5
PEAK_LOW_TOLERANCE = 0.3
PATTERN_FULL_STRENGTH_SPREAD = 3.0

TRACKING_WINDOW_DAYS = 30
IMPROVEMENT_WINDOW = 14
IMPROVEMENT_MIN_ENTRIES = 7
IMPROVEMENT_THRESHOLD = 0.3

PREDICTION_WINDOW = 7
DEFAULT_PREDICTED_MOOD = 5.0
MAX_PREDICTION_CONFIDENCE = 90


class MoodAnalytics:
    """
    Statistical analysis of a snapshot of wellness records.

    The records are copied and sorted by date on construction; the caller's
    collection is never modified. All results are recomputed on every call.
    """

    def __init__(self, records: Sequence[WellnessRecord], analytics_config: Optional[AnalyticsConfig] = None):
        self.records: List[WellnessRecord] = sorted(records, key=lambda record: record.date)
        self.config = analytics_config or AnalyticsConfig()
        self.logger = logging.getLogger(__name__)

    def _values(self, metric: WellnessMetric) -> List[float]:
        return [record.value(metric) for record in self.records]

    def calculate_correlations(self) -> List[CorrelationResult]:
        """Correlate mood with each wellness factor, strongest first."""
        if len(self.records) < self.config.min_entries_for_correlation:
            self.logger.debug(
                f"Skipping correlations: {len(self.records)} entries, "
                f"need {self.config.min_entries_for_correlation}"
            )
            return []

        mood_values = self._values(WellnessMetric.MOOD)
        thresholds = self.config.correlation_thresholds
        correlations = []

        for metric in CORRELATION_FACTORS:
            factor_values = [record.factor_value(metric) for record in self.records]
            result = pearson_correlation(mood_values, factor_values)

            correlations.append(CorrelationResult(
                factor=metric.label,
                metric=metric,
                correlation=result.r,
                p_value=result.p_value,
                sample_size=result.n,
                interpretation=thresholds.interpret(result.r),
            ))

        # sorted() is stable, so ties keep factor order
        return sorted(correlations, key=lambda c: abs(c.correlation), reverse=True)

    def analyze_trends(self) -> List[TrendResult]:
        """Fit a linear trend per metric against days since the first record."""
        if len(self.records) < self.config.min_entries_for_trends:
            self.logger.debug(
                f"Skipping trends: {len(self.records)} entries, need {self.config.min_entries_for_trends}"
            )
            return []

        first_date = self.records[0].date
        day_index = [(record.date - first_date).days for record in self.records]
        trends = []

        for metric in WellnessMetric:
            # Raw values: a rising stress trend means more stress, unlike the inverted correlations
            regression = linear_regression(day_index, self._values(metric))
            weekly_change = regression.slope * 7

            if abs(weekly_change) < STABLE_WEEKLY_CHANGE:
                direction = "stable"
            elif weekly_change > 0:
                direction = "increasing"
            else:
                direction = "decreasing"

            trends.append(TrendResult(
                metric=metric,
                direction=direction,
                magnitude=abs(weekly_change),
                weekly_change=weekly_change,
                significance=regression.r_squared,
                sample_size=len(self.records),
            ))

        return sorted(trends, key=lambda t: t.significance, reverse=True)

    def detect_weekly_patterns(self) -> List[MoodPattern]:
        """Detect day-of-week mood differences.

        Reports a pattern only when at least four weekdays are represented and
        the spread between the best and worst weekday mean is >= 0.5 points.
        """
        if len(self.records) < self.config.min_entries_for_trends:
            return []

        df = pd.DataFrame({
            'day': [WEEKDAY_NAMES[record.date.weekday()] for record in self.records],
            'mood': self._values(WellnessMetric.MOOD),
        })
        day_averages = df.groupby('day')['mood'].mean().reindex(WEEKDAY_ORDER).dropna()

        if len(day_averages) < MIN_PATTERN_WEEKDAYS:
            return []

        max_mood = float(day_averages.max())
        min_mood = float(day_averages.min())
        variation = max_mood - min_mood

        if variation < MIN_PATTERN_VARIATION:
            return []

        peak_days = [day for day, avg in day_averages.items() if avg >= max_mood - PEAK_LOW_TOLERANCE]
        low_days = [day for day, avg in day_averages.items() if avg <= min_mood + PEAK_LOW_TOLERANCE]

        return [MoodPattern(
            pattern_type="weekly",
            description=f"Weekly mood pattern detected with {variation:.1f} point variation",
            strength=min(1.0, variation / PATTERN_FULL_STRENGTH_SPREAD),
            peak_days=peak_days,
            low_days=low_days,
            recommendations=[
                f"Peak mood days ({', '.join(peak_days)}) - maintain current routines",
                f"Low mood days ({', '.join(low_days)}) - plan extra self-care activities",
            ],
        )]

    def generate_optimizations(self) -> List[OptimizationSuggestion]:
        """Turn significant correlations into prioritized suggestions."""
        weak = self.config.correlation_thresholds.weak
        suggestions = []

        for corr in self.calculate_correlations():
            if abs(corr.correlation) < weak or corr.p_value >= self.config.confidence_threshold:
                continue

            average = mean(self._values(corr.metric))
            suggestion = self._build_suggestion(corr, average)
            if suggestion is not None:
                suggestions.append(suggestion)

        return sorted(suggestions, key=lambda s: (s.priority, -s.expected_impact))

    def _build_suggestion(self, corr: CorrelationResult, average: float) -> Optional[OptimizationSuggestion]:
        r = corr.correlation
        abs_r = abs(r)
        metric = corr.metric

        if metric is WellnessMetric.SLEEP:
            if r > 0:
                title = "Optimize Sleep Duration"
                description = (
                    f"Longer nights go with better mood. You average {average:.1f} hours; "
                    "aim for 7-9 hours per night for better mood regulation."
                )
            else:
                title = "Improve Sleep Quality"
                description = (
                    f"More time in bed is not lifting your mood (average {average:.1f} hours). "
                    "Focus on sleep quality through consistent bedtime routines and sleep hygiene."
                )
            return OptimizationSuggestion(
                category="sleep",
                priority=1 if abs_r > 0.5 else 2,
                title=title,
                description=description,
                expected_impact=abs_r * 3,
                timeframe="1-2 weeks",
                difficulty="moderate",
                based_on_correlation=r,
            )

        elif metric is WellnessMetric.EXERCISE:
            if r > 0:
                title = "Increase Physical Activity"
                description = (
                    f"Regular exercise tracks with improved mood. You average {average:.0f} minutes a day; "
                    "aim for 30 minutes of moderate activity daily."
                )
            else:
                title = "Rebalance Exercise Load"
                description = (
                    f"Harder exercise days line up with lower mood (average {average:.0f} minutes). "
                    "Mix in lighter sessions and protect recovery days."
                )
            return OptimizationSuggestion(
                category="exercise",
                priority=1 if abs_r > 0.4 else 2,
                title=title,
                description=description,
                expected_impact=abs_r * 2.5,
                timeframe="2-3 weeks",
                difficulty="moderate",
                based_on_correlation=r,
            )

        elif metric is WellnessMetric.NUTRITION:
            return OptimizationSuggestion(
                category="nutrition",
                priority=2,
                title="Improve Nutritional Quality",
                description=(
                    f"Your nutrition rating averages {average:.1f}/10. Focus on whole foods, "
                    "balanced meals, and consistent eating patterns."
                ),
                expected_impact=abs_r * 2,
                timeframe="1-3 weeks",
                difficulty="easy",
                based_on_correlation=r,
            )

        elif metric is WellnessMetric.STRESS:
            if r > 0:
                lead = f"Calmer days go with better mood (stress averages {average:.1f}/10)."
            else:
                lead = f"Your mood holds up under stress (average {average:.1f}/10), but stress still needs an outlet."
            return OptimizationSuggestion(
                category="stress",
                priority=1,
                title="Implement Stress Management",
                description=(
                    f"{lead} Practice stress reduction techniques like meditation, deep breathing, "
                    "or progressive muscle relaxation."
                ),
                expected_impact=abs_r * 3.5,
                timeframe="1-4 weeks",
                difficulty="moderate",
                based_on_correlation=r,
            )

        elif metric is WellnessMetric.HYDRATION:
            return OptimizationSuggestion(
                category="hydration",
                priority=3,
                title="Maintain Proper Hydration",
                description=(
                    f"You average {average:.1f} glasses of water a day. Aim for 8-10 glasses daily; "
                    "dehydration can significantly impact mood and energy."
                ),
                expected_impact=abs_r * 1.5,
                timeframe="1 week",
                difficulty="easy",
                based_on_correlation=r,
            )

        elif metric is WellnessMetric.ENERGY:
            return OptimizationSuggestion(
                category="lifestyle",
                priority=2,
                title="Boost Energy Levels",
                description=(
                    f"Energy and mood are closely linked (energy averages {average:.1f}/10). "
                    "Focus on sleep, nutrition, and regular activity."
                ),
                expected_impact=abs_r * 2,
                timeframe="2-4 weeks",
                difficulty="moderate",
                based_on_correlation=r,
            )

        return None

    def calculate_wellness_metrics(self) -> WellnessMetrics:
        """Averages over all records plus logging consistency and mood direction."""
        if not self.records:
            return WellnessMetrics()

        averages: Dict[WellnessMetric, float] = {
            metric: mean(self._values(metric)) for metric in WellnessMetric
        }

        moods = self._values(WellnessMetric.MOOD)
        recent = moods[-IMPROVEMENT_WINDOW:]
        older = moods[-2 * IMPROVEMENT_WINDOW:-IMPROVEMENT_WINDOW]

        improvement_trend = "stable"
        if len(recent) >= IMPROVEMENT_MIN_ENTRIES and len(older) >= IMPROVEMENT_MIN_ENTRIES:
            delta = mean(recent) - mean(older)
            if delta > IMPROVEMENT_THRESHOLD:
                improvement_trend = "improving"
            elif delta < -IMPROVEMENT_THRESHOLD:
                improvement_trend = "declining"

        return WellnessMetrics(
            average_mood=averages[WellnessMetric.MOOD],
            average_energy=averages[WellnessMetric.ENERGY],
            average_stress=averages[WellnessMetric.STRESS],
            average_sleep=averages[WellnessMetric.SLEEP],
            average_hydration=averages[WellnessMetric.HYDRATION],
            average_exercise=averages[WellnessMetric.EXERCISE],
            average_nutrition=averages[WellnessMetric.NUTRITION],
            consistency_score=min(100.0, len(self.records) / TRACKING_WINDOW_DAYS * 100),
            improvement_trend=improvement_trend,
        )

    def moving_averages(self, metric: WellnessMetric = WellnessMetric.MOOD, window: int = 3) -> List[MovingAveragePoint]:
        """Chart series: raw values with a trailing moving average."""
        values = self._values(metric)
        smoothed = moving_average(values, window)
        return [
            MovingAveragePoint(date=record.date, value=value, moving_average=avg)
            for record, value, avg in zip(self.records, values, smoothed)
        ]

    def generate_advanced_insights(self) -> AdvancedInsights:
        """Combine every analysis into one result for the dashboard."""
        correlations = self.calculate_correlations()
        trends = self.analyze_trends()
        patterns = self.detect_weekly_patterns()
        optimizations = self.generate_optimizations()

        return AdvancedInsights(
            correlations=correlations,
            trends=trends,
            patterns=patterns,
            optimizations=optimizations,
            prediction=self._predict_mood(correlations, trends),
        )

    def _predict_mood(self, correlations: List[CorrelationResult], trends: List[TrendResult]) -> MoodPrediction:
        """Recent average mood shifted by one week of the mood trend.

        A stable trend leaves the recent average unchanged; otherwise the
        weekly change is added or subtracted and the result clamped to 1-10.
        """
        recent_moods = self._values(WellnessMetric.MOOD)[-PREDICTION_WINDOW:]
        avg_recent_mood = mean(recent_moods) if recent_moods else DEFAULT_PREDICTED_MOOD

        mood_trend = next((t for t in trends if t.metric is WellnessMetric.MOOD), None)
        next_week_mood = avg_recent_mood
        if mood_trend is not None:
            if mood_trend.direction == "increasing":
                next_week_mood += mood_trend.magnitude
            elif mood_trend.direction == "decreasing":
                next_week_mood -= mood_trend.magnitude
            next_week_mood = max(1.0, min(10.0, next_week_mood))

        based_on = [c.factor for c in correlations[:3]]
        if mood_trend is not None:
            based_on.append(f"{mood_trend.direction} mood trend")

        return MoodPrediction(
            next_week_mood=next_week_mood,
            confidence=min(MAX_PREDICTION_CONFIDENCE, len(self.records) * 3),
            based_on=based_on,
        )


def analyze_wellness(records: Sequence[WellnessRecord], analytics_config: Optional[AnalyticsConfig] = None) -> Dict:
    """
    Convenience function to run the full analysis and serialize it.

    Args:
        records: Wellness records in any order
        analytics_config: Analysis options (defaults when omitted)

    Returns:
        JSON-ready dictionary with insights and aggregate metrics
    """
    analytics = MoodAnalytics(records, analytics_config)
    result = analytics.generate_advanced_insights().to_dict()
    result['wellness_metrics'] = analytics.calculate_wellness_metrics().to_dict()
    return result
