"""Reward calculation result models.

Field names are snake_case in Python and serialize with the camelCase keys
the client expects (``totalXP``, ``categoryBreakdown``, ...).
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.activity import MatchType
from src.domain.task import Category


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ActivityReward(_CamelModel):
    """Reward earned by a single processed activity."""

    activity_name: str
    match_type: MatchType
    category: Category
    matched_task: str | None = None
    goal_link: str | None = None
    effort_ratio: float
    xp_earned: int
    shards_earned: float
    calculation_notes: str


class SkippedActivity(_CamelModel):
    """Activity excluded from rewards, with the reason why."""

    activity_name: str
    category: Category
    reason: str
    notes: str = ""


class CategoryRewards(_CamelModel):
    """XP and shard subtotal for one category."""

    xp: int = 0
    shards: float = 0.0


class CategoryBreakdown(_CamelModel):
    """Per-category reward subtotals."""

    strength: CategoryRewards = Field(default_factory=CategoryRewards, alias="Strength")
    intelligence: CategoryRewards = Field(default_factory=CategoryRewards, alias="Intelligence")
    charisma: CategoryRewards = Field(default_factory=CategoryRewards, alias="Charisma")

    def get(self, category: Category) -> CategoryRewards:
        """Return the subtotal for a category."""
        return getattr(self, category.value.lower())


class RewardCalculationResult(_CamelModel):
    """Complete reward breakdown for one activity analysis."""

    total_xp: int = Field(default=0, alias="totalXP")
    total_shards: float = Field(default=0.0, alias="totalShards")
    category_breakdown: CategoryBreakdown = Field(default_factory=CategoryBreakdown)
    activity_rewards: list[ActivityReward] = Field(default_factory=list)
    skipped_activities: list[SkippedActivity] = Field(default_factory=list)
    processed_count: int = 0
    skipped_count: int = 0
