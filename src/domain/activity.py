"""Activity match models produced by the activity classifier."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator

from src.domain.task import Category


class MatchType(StrEnum):
    """Strength-of-match tier between an activity and the user's plan."""

    EXACT = "exact"
    SIMILAR = "similar"
    GOAL_ALIGNED = "goal-aligned"
    UNRELATED = "unrelated"


class ActivityMatch(BaseModel):
    """A real-world activity detected in the user's daily description."""

    name: str = Field(..., description="Human-readable label for the activity")
    category: Category = Field(..., description="Category the activity belongs to")
    match_type: MatchType = Field(..., description="How closely the activity matches a planned task")
    matched_task: str | None = Field(
        default=None,
        description="Title or description of the planned task this activity corresponds to",
    )
    goal_link: str | None = Field(default=None, description="How the activity supports a long-term goal")
    effort_ratio: float = Field(
        ...,
        allow_inf_nan=False,
        description="Share of the task's full effort this activity represents (1.0 = full effort)",
    )
    notes: str = Field(default="", description="Short rationale for the classification")

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class ActivityAnalysis(BaseModel):
    """Structured output of the activity classifier."""

    matches: list[ActivityMatch] = Field(default_factory=list, description="One entry per detected activity")
