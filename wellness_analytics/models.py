"""Typed records and analysis results for the wellness analytics engine.

Records are plain dataclasses: the engine never mutates them and never talks
to storage. Every result type exposes ``to_dict()`` returning JSON-ready
primitives for the presentation layer.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional


class WellnessMetric(Enum):
    """Numeric measures recorded on every wellness entry."""

    MOOD = "mood"            # 1-10
    ENERGY = "energy"        # 1-10
    STRESS = "stress"        # 1-10, higher is worse
    SLEEP = "sleep"          # hours, 0-24
    HYDRATION = "hydration"  # glasses, 0-20
    EXERCISE = "exercise"    # minutes
    NUTRITION = "nutrition"  # 1-10

    @property
    def label(self) -> str:
        return self.value.capitalize()


# Factors correlated against mood, in reporting order
CORRELATION_FACTORS = (
    WellnessMetric.ENERGY,
    WellnessMetric.STRESS,
    WellnessMetric.SLEEP,
    WellnessMetric.HYDRATION,
    WellnessMetric.EXERCISE,
    WellnessMetric.NUTRITION,
)

STRESS_SCALE_MAX = 10


def _as_number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return float(value)


@dataclass
class WellnessRecord:
    """One day of wellness tracking."""
    date: date
    mood: Optional[float] = None
    energy: Optional[float] = None
    stress: Optional[float] = None
    sleep: Optional[float] = None
    hydration: Optional[float] = None
    exercise: Optional[float] = None
    nutrition: Optional[float] = None
    notes: str = ""
    factors: List[str] = field(default_factory=list)

    def value(self, metric: WellnessMetric) -> float:
        """Numeric value of a metric; missing or non-finite values read as 0."""
        return _as_number(getattr(self, metric.value))

    def factor_value(self, metric: WellnessMetric) -> float:
        """Value used for correlation against mood (stress is inverted)."""
        value = self.value(metric)
        if metric is WellnessMetric.STRESS:
            return STRESS_SCALE_MAX - value
        return value


@dataclass
class ProgressSample:
    """A logged progress value for a goal."""
    timestamp: datetime
    value: float
    mood: Optional[float] = None
    notes: str = ""


@dataclass
class GoalRecord:
    """A goal with a numeric target and a deadline."""
    target_value: float
    current_value: float
    created_at: datetime
    deadline: datetime
    unit: str = ""
    id: str = ""
    title: str = ""

    @property
    def name(self) -> str:
        return self.title or self.id or "Goal"


@dataclass
class CorrelationResult:
    """Correlation between mood and one wellness factor."""
    factor: str
    metric: WellnessMetric
    correlation: float
    p_value: float
    sample_size: int
    interpretation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'factor': self.factor,
            'metric': self.metric.value,
            'correlation': float(round(self.correlation, 3)),
            'p_value': float(round(self.p_value, 4)),
            'sample_size': int(self.sample_size),
            'interpretation': self.interpretation,
        }


@dataclass
class TrendResult:
    """Linear trend of one metric over the tracking period."""
    metric: WellnessMetric
    direction: str  # increasing, decreasing, stable
    magnitude: float  # absolute change per week
    weekly_change: float  # signed change per week
    significance: float  # R-squared of the fit
    sample_size: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'metric': self.metric.value,
            'direction': self.direction,
            'magnitude': float(round(self.magnitude, 3)),
            'weekly_change': float(round(self.weekly_change, 3)),
            'significance': float(round(self.significance, 4)),
            'sample_size': int(self.sample_size),
        }


@dataclass
class MoodPattern:
    """A recurring mood pattern."""
    pattern_type: str
    description: str
    strength: float  # 0-1
    peak_days: List[str]
    low_days: List[str]
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'pattern_type': self.pattern_type,
            'description': self.description,
            'strength': float(round(self.strength, 3)),
            'peak_days': list(self.peak_days),
            'low_days': list(self.low_days),
            'recommendations': list(self.recommendations),
        }


@dataclass
class OptimizationSuggestion:
    """Actionable suggestion derived from a significant correlation."""
    category: str  # sleep, exercise, nutrition, stress, hydration, lifestyle
    priority: int  # 1 = highest
    title: str
    description: str
    expected_impact: float
    timeframe: str
    difficulty: str  # easy, moderate, challenging
    based_on_correlation: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category,
            'priority': int(self.priority),
            'title': self.title,
            'description': self.description,
            'expected_impact': float(round(self.expected_impact, 3)),
            'timeframe': self.timeframe,
            'difficulty': self.difficulty,
            'based_on_correlation': float(round(self.based_on_correlation, 3)),
        }


@dataclass
class WellnessMetrics:
    """Aggregate averages over the full record set."""
    average_mood: float = 0.0
    average_energy: float = 0.0
    average_stress: float = 0.0
    average_sleep: float = 0.0
    average_hydration: float = 0.0
    average_exercise: float = 0.0
    average_nutrition: float = 0.0
    consistency_score: float = 0.0  # logging frequency over 30 days
    improvement_trend: str = "stable"

    def to_dict(self) -> Dict[str, Any]:
        return {
            'average_mood': float(round(self.average_mood, 2)),
            'average_energy': float(round(self.average_energy, 2)),
            'average_stress': float(round(self.average_stress, 2)),
            'average_sleep': float(round(self.average_sleep, 2)),
            'average_hydration': float(round(self.average_hydration, 2)),
            'average_exercise': float(round(self.average_exercise, 2)),
            'average_nutrition': float(round(self.average_nutrition, 2)),
            'consistency_score': float(round(self.consistency_score, 1)),
            'improvement_trend': self.improvement_trend,
        }


@dataclass
class MoodPrediction:
    next_week_mood: float
    confidence: float
    based_on: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'next_week_mood': float(round(self.next_week_mood, 2)),
            'confidence': float(self.confidence),
            'based_on': list(self.based_on),
        }


@dataclass
class AdvancedInsights:
    """Everything the insights dashboard renders."""
    correlations: List[CorrelationResult]
    trends: List[TrendResult]
    patterns: List[MoodPattern]
    optimizations: List[OptimizationSuggestion]
    prediction: MoodPrediction

    def to_dict(self) -> Dict[str, Any]:
        return {
            'correlations': [c.to_dict() for c in self.correlations],
            'trends': [t.to_dict() for t in self.trends],
            'patterns': [p.to_dict() for p in self.patterns],
            'optimizations': [o.to_dict() for o in self.optimizations],
            'prediction': self.prediction.to_dict(),
        }


@dataclass
class MovingAveragePoint:
    date: date
    value: float
    moving_average: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date.isoformat(),
            'value': float(self.value),
            'moving_average': float(round(self.moving_average, 3)),
        }


@dataclass
class DataQuality:
    """How complete and regular the logging history is."""
    completeness: float
    consistency: float
    depth: float
    reliability: float
    days_tracked: int
    total_possible_days: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'completeness': float(round(self.completeness, 1)),
            'consistency': float(round(self.consistency, 1)),
            'depth': float(round(self.depth, 1)),
            'reliability': float(round(self.reliability, 1)),
            'days_tracked': int(self.days_tracked),
            'total_possible_days': int(self.total_possible_days),
        }


@dataclass
class GoalMetrics:
    """Derived goal state, recomputed from the goal and its samples."""
    completion_rate: float  # percent, may exceed 100
    time_remaining: float  # days
    average_daily_progress: float
    projected_completion: datetime
    efficiency_score: float  # capped at 100
    consistency_score: float  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {
            'completion_rate': float(round(self.completion_rate, 2)),
            'time_remaining': float(round(self.time_remaining, 2)),
            'average_daily_progress': float(round(self.average_daily_progress, 4)),
            'projected_completion': self.projected_completion.isoformat(),
            'efficiency_score': float(round(self.efficiency_score, 2)),
            'consistency_score': float(round(self.consistency_score, 2)),
        }


@dataclass
class Bottleneck:
    kind: str  # low_rate, inconsistent, time_constraint, stagnation
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {'kind': self.kind, 'description': self.description}


@dataclass
class OptimizationRecommendation:
    type: str  # increase_frequency, adjust_target, change_approach, add_support
    priority: int
    description: str
    expected_improvement: float  # percent

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'priority': int(self.priority),
            'description': self.description,
            'expected_improvement': float(self.expected_improvement),
        }


@dataclass
class GoalCorrelation:
    variable_1: str
    variable_2: str
    correlation: float
    significance: float  # p-value
    sample_size: int
    interpretation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'variable_1': self.variable_1,
            'variable_2': self.variable_2,
            'correlation': float(round(self.correlation, 3)),
            'significance': float(round(self.significance, 4)),
            'sample_size': int(self.sample_size),
            'interpretation': self.interpretation,
        }


@dataclass
class GoalOptimizationAnalysis:
    metrics: GoalMetrics
    bottlenecks: List[Bottleneck]
    recommendations: List[OptimizationRecommendation]
    correlation_matrix: List[GoalCorrelation]

    @property
    def current_efficiency(self) -> float:
        return self.metrics.efficiency_score

    def to_dict(self) -> Dict[str, Any]:
        return {
            'current_efficiency': float(round(self.current_efficiency, 2)),
            'metrics': self.metrics.to_dict(),
            'bottlenecks': [b.to_dict() for b in self.bottlenecks],
            'recommendations': [r.to_dict() for r in self.recommendations],
            'correlation_matrix': [c.to_dict() for c in self.correlation_matrix],
        }
