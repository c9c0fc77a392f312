"""Pydantic models for the HTTP request and response envelopes.

Keys are accepted in camelCase (as sent by the web client) or snake_case, and
responses are serialized in camelCase.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.domain.activity import ActivityMatch
from src.domain.reward import RewardCalculationResult
from src.domain.task import UserTasks


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AnalyzeActivityRequest(_ApiModel):
    """Request body for daily activity analysis."""

    daily_activity: str = Field(..., description="User's description of what they did today")
    current_tasks: UserTasks | None = Field(default=None, description="User's current tasks grouped by category")
    long_term_goals: str | None = Field(default=None, description="User's long-term goals text")


class AnalyzeActivityData(_ApiModel):
    """Payload of a successful activity analysis."""

    matches: list[ActivityMatch]
    rewards: RewardCalculationResult
    ai_response: str
    processing_time: int = Field(..., description="Processing time in milliseconds")


class ApiSuccessResponse(_ApiModel):
    """Success envelope."""

    success: bool = True
    message: str
    data: Any = None


class ApiErrorResponse(_ApiModel):
    """Error envelope."""

    success: bool = False
    message: str
    code: str | None = None
    suggestion: str | None = None
