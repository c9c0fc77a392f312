"""Test doubles and builders shared across the unit and integration suites."""

from dataclasses import dataclass, field

from src.agents.activity_agent import ClassifierHealth, ClassifierOutcome
from src.domain.activity import ActivityAnalysis, ActivityMatch, MatchType
from src.domain.task import Category


def make_match(
    name: str,
    *,
    category: Category = Category.STRENGTH,
    match_type: MatchType = MatchType.EXACT,
    matched_task: str | None = None,
    goal_link: str | None = None,
    effort_ratio: float = 1.0,
    notes: str = "",
) -> ActivityMatch:
    """Build an activity match with sensible defaults."""
    return ActivityMatch(
        name=name,
        category=category,
        match_type=match_type,
        matched_task=matched_task,
        goal_link=goal_link,
        effort_ratio=effort_ratio,
        notes=notes,
    )


@dataclass
class FakeClassifier:
    """In-memory activity classifier returning canned matches or raising an error."""

    matches: list[ActivityMatch] = field(default_factory=list)
    error: Exception | None = None
    healthy: bool = True
    calls: list[dict] = field(default_factory=list)

    async def classify(self, *, daily_activity, user_tasks, long_term_goals) -> ClassifierOutcome:
        self.calls.append(
            {"daily_activity": daily_activity, "user_tasks": user_tasks, "long_term_goals": long_term_goals}
        )
        if self.error is not None:
            raise self.error
        return ClassifierOutcome(
            matches=list(self.matches),
            raw_response=ActivityAnalysis(matches=self.matches).model_dump_json(),
        )

    async def check_health(self) -> ClassifierHealth:
        if self.healthy:
            return ClassifierHealth(success=True, message="ok", model_id="test/model")
        return ClassifierHealth(success=False, message="OpenRouter returned status 503", model_id="test/model")
