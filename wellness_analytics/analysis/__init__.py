"""Analysis module for wellness and goal statistics."""

from .data_quality import assess_data_quality, calculate_streak
from .goal_optimizer import GoalOptimizer, analyze_goal
from .mood_analytics import MoodAnalytics, analyze_wellness

__all__ = [
    "MoodAnalytics",
    "GoalOptimizer",
    "analyze_wellness",
    "analyze_goal",
    "assess_data_quality",
    "calculate_streak",
]
