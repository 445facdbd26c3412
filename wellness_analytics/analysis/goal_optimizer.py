"""Goal progress optimization: rates, efficiency, consistency and bottlenecks."""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..config import AnalyticsConfig
from ..models import (
    Bottleneck,
    GoalCorrelation,
    GoalMetrics,
    GoalOptimizationAnalysis,
    GoalRecord,
    OptimizationRecommendation,
    ProgressSample,
)
from .statistics import coefficient_of_variation, pearson_correlation

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 24 * 60 * 60
MIN_DAILY_RATE = 0.001
DEFAULT_CONSISTENCY_SCORE = 50.0
MIN_CONSISTENCY_SAMPLES = 3
STAGNATION_WINDOW_DAYS = 7
MIN_CORRELATION_PAIRS = 3

# Bottleneck thresholds
LOW_EFFICIENCY = 50
LOW_CONSISTENCY = 40
DEADLINE_DAYS = 7
DEADLINE_COMPLETION = 80

# Recommendation thresholds
INCREASE_FREQUENCY_EFFICIENCY = 60
ADD_SUPPORT_CONSISTENCY = 50
ADJUST_TARGET_COMPLETION = 80
ADJUST_TARGET_DAYS_LEFT = 30

GoalHistory = Tuple[GoalRecord, Sequence[ProgressSample]]


def _days_between(start: datetime, end: datetime) -> float:
    return (end - start).total_seconds() / SECONDS_PER_DAY


def _sorted_samples(samples: Iterable[ProgressSample]) -> List[ProgressSample]:
    return sorted(samples, key=lambda sample: sample.timestamp)


class GoalOptimizer:
    """Derive goal metrics from a goal and its progress log.

    Metrics are never stored; every call recomputes them from the inputs.
    ``now`` defaults to the current time and can be pinned for reproducible
    results.
    """

    def __init__(self, analytics_config: Optional[AnalyticsConfig] = None):
        self.config = analytics_config or AnalyticsConfig()

    def calculate_goal_metrics(
        self,
        goal: GoalRecord,
        samples: Sequence[ProgressSample],
        now: Optional[datetime] = None
    ) -> GoalMetrics:
        """
        Calculate completion, rate, projection, efficiency and consistency.

        Args:
            goal: Goal with target, current value, creation date and deadline
            samples: Progress samples in any order
            now: Reference time (defaults to datetime.now())

        Returns:
            GoalMetrics for the goal at ``now``
        """
        now = now or datetime.now()
        samples = _sorted_samples(samples)

        if goal.target_value == 0:
            logger.warning(f"Goal '{goal.name}' has a zero target; completion rate reported as 0")
            completion_rate = 0.0
        else:
            completion_rate = goal.current_value / goal.target_value * 100

        time_remaining = max(0.0, _days_between(now, goal.deadline))

        if len(samples) >= 2:
            daily_progress = self.calculate_average_daily_progress(samples)
        else:
            elapsed_days = _days_between(goal.created_at, now)
            daily_progress = goal.current_value / elapsed_days if elapsed_days > 0 else 0.0

        projected_days = (goal.target_value - goal.current_value) / max(daily_progress, MIN_DAILY_RATE)
        try:
            projected_completion = now + timedelta(days=projected_days)
        except OverflowError:
            projected_completion = datetime.max if projected_days > 0 else datetime.min

        planned_days = _days_between(goal.created_at, goal.deadline)
        theoretical_rate = goal.target_value / planned_days if planned_days > 0 else 0.0
        if theoretical_rate > 0:
            # Ahead of schedule reports 100, behind schedule is not floored
            efficiency_score = min(100.0, daily_progress / theoretical_rate * 100)
        else:
            logger.warning(f"Goal '{goal.name}' has no positive planned rate; efficiency reported as 0")
            efficiency_score = 0.0

        return GoalMetrics(
            completion_rate=completion_rate,
            time_remaining=time_remaining,
            average_daily_progress=daily_progress,
            projected_completion=projected_completion,
            efficiency_score=efficiency_score,
            consistency_score=self.calculate_consistency_score(samples),
        )

    @staticmethod
    def calculate_average_daily_progress(samples: Sequence[ProgressSample]) -> float:
        """Pooled progress rate: total change over total elapsed days.

        Pairs logged at the same instant are ignored.
        """
        samples = _sorted_samples(samples)
        if len(samples) < 2:
            return 0.0

        total_progress = 0.0
        total_days = 0.0
        for previous, current in zip(samples, samples[1:]):
            days = _days_between(previous.timestamp, current.timestamp)
            if days > 0:
                total_progress += current.value - previous.value
                total_days += days

        return total_progress / total_days if total_days > 0 else 0.0

    @staticmethod
    def calculate_consistency_score(samples: Sequence[ProgressSample]) -> float:
        """100 minus the coefficient of variation (in percent) of positive steps."""
        samples = _sorted_samples(samples)
        if len(samples) < MIN_CONSISTENCY_SAMPLES:
            return DEFAULT_CONSISTENCY_SCORE

        changes = [max(0.0, current.value - previous.value) for previous, current in zip(samples, samples[1:])]
        cv = coefficient_of_variation(changes)
        return max(0.0, 100 - cv * 100)

    def analyze_goal_optimization(
        self,
        goal: GoalRecord,
        samples: Sequence[ProgressSample],
        other_goals: Sequence[GoalHistory] = (),
        now: Optional[datetime] = None
    ) -> GoalOptimizationAnalysis:
        """Metrics plus bottlenecks, recommendations and goal correlations."""
        now = now or datetime.now()
        metrics = self.calculate_goal_metrics(goal, samples, now)
        bottlenecks = self.identify_bottlenecks(metrics, samples, now)

        return GoalOptimizationAnalysis(
            metrics=metrics,
            bottlenecks=bottlenecks,
            recommendations=self.generate_recommendations(metrics),
            correlation_matrix=self.calculate_correlations(goal, samples, other_goals),
        )

    def identify_bottlenecks(
        self,
        metrics: GoalMetrics,
        samples: Sequence[ProgressSample],
        now: datetime
    ) -> List[Bottleneck]:
        bottlenecks = []

        if metrics.efficiency_score < LOW_EFFICIENCY:
            bottlenecks.append(Bottleneck(
                "low_rate", "Low progress rate - may need increased frequency or intensity"
            ))

        if metrics.consistency_score < LOW_CONSISTENCY:
            bottlenecks.append(Bottleneck(
                "inconsistent", "High variability in progress - inconsistent effort patterns"
            ))

        if metrics.time_remaining < DEADLINE_DAYS and metrics.completion_rate < DEADLINE_COMPLETION:
            bottlenecks.append(Bottleneck(
                "time_constraint", "Time constraint - approaching deadline with significant work remaining"
            ))

        window = timedelta(days=STAGNATION_WINDOW_DAYS)
        recent = [s for s in samples if now - s.timestamp < window]
        if samples and not recent:
            bottlenecks.append(Bottleneck(
                "stagnation", "Progress stagnation - no recent activity recorded"
            ))

        return bottlenecks

    def generate_recommendations(self, metrics: GoalMetrics) -> List[OptimizationRecommendation]:
        recommendations = []

        if metrics.efficiency_score < INCREASE_FREQUENCY_EFFICIENCY:
            recommendations.append(OptimizationRecommendation(
                type="increase_frequency",
                priority=1,
                description="Increase activity frequency by 25-50% to improve progress rate",
                expected_improvement=30,
            ))

        if metrics.consistency_score < ADD_SUPPORT_CONSISTENCY:
            recommendations.append(OptimizationRecommendation(
                type="add_support",
                priority=2,
                description="Add accountability measures or tracking reminders to improve consistency",
                expected_improvement=25,
            ))

        if metrics.completion_rate > ADJUST_TARGET_COMPLETION and metrics.time_remaining > ADJUST_TARGET_DAYS_LEFT:
            recommendations.append(OptimizationRecommendation(
                type="adjust_target",
                priority=3,
                description="Consider increasing target value to maintain challenge level",
                expected_improvement=15,
            ))

        return sorted(recommendations, key=lambda r: r.priority)

    def calculate_correlations(
        self,
        goal: GoalRecord,
        samples: Sequence[ProgressSample],
        other_goals: Sequence[GoalHistory] = ()
    ) -> List[GoalCorrelation]:
        """
        Correlate this goal's progress with logged mood and with other goals.

        Only pairs with at least three aligned observations are reported.
        """
        samples = _sorted_samples(samples)
        correlations = []

        # Progress step vs mood logged with the step
        steps = [
            (current.value - previous.value, current.mood)
            for previous, current in zip(samples, samples[1:])
            if current.mood is not None
        ]
        if len(steps) >= MIN_CORRELATION_PAIRS:
            correlation = self._correlate(
                "Daily Progress", "Mood Score",
                [step for step, _ in steps], [mood for _, mood in steps],
            )
            if correlation is not None:
                correlations.append(correlation)

        own_increments = self._daily_increments(samples)
        for other_goal, other_samples in other_goals:
            if other_goal is goal or (goal.id and other_goal.id == goal.id):
                continue

            other_increments = self._daily_increments(_sorted_samples(other_samples))
            common_days = sorted(set(own_increments) & set(other_increments))
            if len(common_days) < MIN_CORRELATION_PAIRS:
                continue

            correlation = self._correlate(
                f"{goal.name} Progress", f"{other_goal.name} Progress",
                [own_increments[day] for day in common_days],
                [other_increments[day] for day in common_days],
            )
            if correlation is not None:
                correlations.append(correlation)

        return sorted(correlations, key=lambda c: abs(c.correlation), reverse=True)

    def _correlate(self, name_1: str, name_2: str, x: List[float], y: List[float]) -> Optional[GoalCorrelation]:
        result = pearson_correlation(x, y)
        if result.n < MIN_CORRELATION_PAIRS:
            return None

        interpretation = self.config.correlation_thresholds.interpret(result.r)
        if interpretation == "negligible":
            description = f"No meaningful relationship between {name_1.lower()} and {name_2.lower()}"
        else:
            strength, direction = interpretation.split("_")
            description = (
                f"{strength.capitalize()} {direction} correlation between "
                f"{name_1.lower()} and {name_2.lower()}"
            )

        return GoalCorrelation(
            variable_1=name_1,
            variable_2=name_2,
            correlation=result.r,
            significance=result.p_value,
            sample_size=result.n,
            interpretation=description,
        )

    @staticmethod
    def _daily_increments(samples: Sequence[ProgressSample]) -> Dict[date, float]:
        """Progress gained per calendar day, credited to the day of the later sample."""
        increments: Dict[date, float] = {}
        for previous, current in zip(samples, samples[1:]):
            day = current.timestamp.date()
            increments[day] = increments.get(day, 0.0) + (current.value - previous.value)
        return increments


def analyze_goal(
    goal: GoalRecord,
    samples: Sequence[ProgressSample],
    other_goals: Sequence[GoalHistory] = (),
    analytics_config: Optional[AnalyticsConfig] = None,
    now: Optional[datetime] = None
) -> Dict:
    """Convenience function returning the serialized goal analysis."""
    optimizer = GoalOptimizer(analytics_config)
    return optimizer.analyze_goal_optimization(goal, samples, other_goals, now).to_dict()
