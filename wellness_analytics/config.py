"""Configuration management for the wellness analytics engine."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

load_dotenv()


class Config:
    """Application configuration."""

    # Application
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Data model boundary
    EXERCISE_PRESENT_MINUTES: float = float(os.getenv("EXERCISE_PRESENT_MINUTES", "30"))

    # Minimum data requirements
    MIN_ENTRIES_FOR_CORRELATION: int = int(os.getenv("MIN_ENTRIES_FOR_CORRELATION", "7"))
    MIN_ENTRIES_FOR_TRENDS: int = int(os.getenv("MIN_ENTRIES_FOR_TRENDS", "14"))

    # Significance
    CONFIDENCE_THRESHOLD: float = float(os.getenv("CONFIDENCE_THRESHOLD", "0.05"))

    # Correlation interpretation (absolute r)
    CORRELATION_STRONG: float = float(os.getenv("CORRELATION_STRONG", "0.5"))
    CORRELATION_MODERATE: float = float(os.getenv("CORRELATION_MODERATE", "0.3"))
    CORRELATION_WEAK: float = float(os.getenv("CORRELATION_WEAK", "0.1"))


config = Config()


@dataclass(frozen=True)
class CorrelationThresholds:
    """Absolute |r| cut-offs used to bucket a correlation."""
    strong: float = 0.5
    moderate: float = 0.3
    weak: float = 0.1

    def interpret(self, r: float) -> str:
        """Map a correlation coefficient to its signed strength label."""
        abs_r = abs(r)
        if abs_r >= self.strong:
            strength = "strong"
        elif abs_r >= self.moderate:
            strength = "moderate"
        elif abs_r >= self.weak:
            strength = "weak"
        else:
            return "negligible"

        return f"{strength}_{'positive' if r > 0 else 'negative'}"


@dataclass(frozen=True)
class AnalyticsConfig:
    """Options threaded explicitly into every analysis call."""
    min_entries_for_correlation: int = 7
    min_entries_for_trends: int = 14
    confidence_threshold: float = 0.05
    correlation_thresholds: CorrelationThresholds = field(default_factory=CorrelationThresholds)

    @classmethod
    def from_env(cls, source: Optional[Config] = None) -> "AnalyticsConfig":
        """Snapshot the environment defaults into an immutable config."""
        source = source or config
        analytics_config = cls(
            min_entries_for_correlation=source.MIN_ENTRIES_FOR_CORRELATION,
            min_entries_for_trends=source.MIN_ENTRIES_FOR_TRENDS,
            confidence_threshold=source.CONFIDENCE_THRESHOLD,
            correlation_thresholds=CorrelationThresholds(
                strong=source.CORRELATION_STRONG,
                moderate=source.CORRELATION_MODERATE,
                weak=source.CORRELATION_WEAK,
            ),
        )
        analytics_config.validate()
        return analytics_config

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> "AnalyticsConfig":
        """Build a config from a mapping of options.

        Accepts both snake_case keys and the camelCase keys used by the
        front-end (``minEntriesForCorrelation``, ``correlationThresholds`` ...).
        Unrecognized keys are ignored; missing keys keep their defaults.
        """
        defaults = cls()

        def pick(snake: str, camel: str, default: Any) -> Any:
            if snake in options:
                return options[snake]
            return options.get(camel, default)

        thresholds = pick("correlation_thresholds", "correlationThresholds", None) or {}
        analytics_config = cls(
            min_entries_for_correlation=int(pick(
                "min_entries_for_correlation", "minEntriesForCorrelation",
                defaults.min_entries_for_correlation,
            )),
            min_entries_for_trends=int(pick(
                "min_entries_for_trends", "minEntriesForTrends",
                defaults.min_entries_for_trends,
            )),
            confidence_threshold=float(pick(
                "confidence_threshold", "confidenceThreshold",
                defaults.confidence_threshold,
            )),
            correlation_thresholds=CorrelationThresholds(
                strong=float(thresholds.get("strong", defaults.correlation_thresholds.strong)),
                moderate=float(thresholds.get("moderate", defaults.correlation_thresholds.moderate)),
                weak=float(thresholds.get("weak", defaults.correlation_thresholds.weak)),
            ),
        )
        analytics_config.validate()
        return analytics_config

    def validate(self) -> bool:
        """Validate option ranges."""
        thresholds = self.correlation_thresholds
        if not 0 <= thresholds.weak <= thresholds.moderate <= thresholds.strong <= 1:
            raise ValueError(
                "Correlation thresholds must satisfy 0 <= weak <= moderate <= strong <= 1, "
                f"got weak={thresholds.weak}, moderate={thresholds.moderate}, strong={thresholds.strong}"
            )
        if self.min_entries_for_correlation < 3 or self.min_entries_for_trends < 3:
            raise ValueError("Minimum entry counts must be at least 3")
        if not 0 < self.confidence_threshold < 1:
            raise ValueError(
                f"Confidence threshold must be between 0 and 1, got {self.confidence_threshold}"
            )
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'min_entries_for_correlation': self.min_entries_for_correlation,
            'min_entries_for_trends': self.min_entries_for_trends,
            'confidence_threshold': self.confidence_threshold,
            'correlation_thresholds': {
                'strong': self.correlation_thresholds.strong,
                'moderate': self.correlation_thresholds.moderate,
                'weak': self.correlation_thresholds.weak,
            },
        }
