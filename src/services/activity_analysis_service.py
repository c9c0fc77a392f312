"""Daily activity analysis: classify what the user did, then calculate rewards.

The classifier and logger are injected so the HTTP layer decides how they are
built and tests can swap them. The reward calculation itself stays pure; only
this service logs around it.
"""

import logging
import time
from dataclasses import dataclass

from src.agents.activity_agent import ActivityClassifier
from src.core.errors import ErrorResponse, classify_error_with_response
from src.core.logging import log_with_context, span
from src.domain.activity import ActivityMatch
from src.domain.reward import RewardCalculationResult
from src.domain.task import UserTasks
from src.services.reward_service import calculate_rewards_from_analysis


class ActivityAnalysisError(Exception):
    """Raised when the activity classifier fails; rewards were not calculated."""

    def __init__(self, error: ErrorResponse, cause: Exception) -> None:
        self.error = error
        self.cause = cause
        super().__init__(f"{error.code}: {cause}")


@dataclass
class ActivityAnalysisOutcome:
    """Classifier matches together with the rewards they earned."""

    matches: list[ActivityMatch]
    rewards: RewardCalculationResult
    ai_response: str
    processing_time_ms: int


class ActivityAnalysisService:
    """Runs the activity classifier and turns its matches into rewards."""

    def __init__(self, *, classifier: ActivityClassifier, logger: logging.Logger | None = None) -> None:
        self.classifier = classifier
        self.logger = logger or logging.getLogger(__name__)

    async def analyze(
        self,
        *,
        daily_activity: str,
        user_tasks: UserTasks | None,
        long_term_goals: str | None = None,
    ) -> ActivityAnalysisOutcome:
        """Analyze a daily activity description and calculate the rewards it earns.

        Args:
            daily_activity: User's description of what they did today
            user_tasks: User's current tasks grouped by category, or None if unavailable
            long_term_goals: User's long-term goals text

        Returns:
            Matches, reward breakdown, raw classifier output and processing time

        Raises:
            ActivityAnalysisError: If the classifier fails (rewards are not calculated)
            UnknownMatchTypeError: If a match carries a match type with no reward rule
            NonFiniteRewardError: If a reward or total is NaN or infinite
        """
        started = time.perf_counter()
        task_count = sum(len(tasks) for _, tasks in user_tasks.items()) if user_tasks else 0

        with span("activity_analysis.analyze", activity_length=len(daily_activity), task_count=task_count):
            try:
                outcome = await self.classifier.classify(
                    daily_activity=daily_activity,
                    user_tasks=user_tasks,
                    long_term_goals=long_term_goals,
                )
            except Exception as e:
                error = classify_error_with_response(e)
                self.logger.error(
                    "activity_analysis_failed",
                    extra={"error_code": error.code, "error_type": type(e).__name__, "error": str(e)},
                )
                raise ActivityAnalysisError(error, e) from e

            if user_tasks is None:
                self.logger.warning("reward_calculation_without_tasks", extra={"match_count": len(outcome.matches)})

            rewards = calculate_rewards_from_analysis(outcome.matches, user_tasks)

        processing_time_ms = round((time.perf_counter() - started) * 1000)
        breakdown = rewards.category_breakdown
        log_with_context(
            self.logger,
            "info",
            "reward_calculation_summary",
            processed_count=rewards.processed_count,
            skipped_count=rewards.skipped_count,
            total_xp=rewards.total_xp,
            total_shards=rewards.total_shards,
            strength_xp=breakdown.strength.xp,
            intelligence_xp=breakdown.intelligence.xp,
            charisma_xp=breakdown.charisma.xp,
            processing_time_ms=processing_time_ms,
        )

        return ActivityAnalysisOutcome(
            matches=outcome.matches,
            rewards=rewards,
            ai_response=outcome.raw_response,
            processing_time_ms=processing_time_ms,
        )
