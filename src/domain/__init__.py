"""Domain models and DTOs."""

from src.domain.activity import ActivityAnalysis, ActivityMatch, MatchType
from src.domain.reward import (
    ActivityReward,
    CategoryBreakdown,
    CategoryRewards,
    RewardCalculationResult,
    SkippedActivity,
)
from src.domain.task import Category, TaggedTask, Task, UserTasks


__all__ = [
    "ActivityAnalysis",
    "ActivityMatch",
    "ActivityReward",
    "Category",
    "CategoryBreakdown",
    "CategoryRewards",
    "MatchType",
    "RewardCalculationResult",
    "SkippedActivity",
    "TaggedTask",
    "Task",
    "UserTasks",
]
