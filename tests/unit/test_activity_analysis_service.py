"""Unit tests for the activity analysis service."""

from unittest.mock import MagicMock, patch

import pytest

from src.core.errors import ErrorCode
from src.domain.activity import MatchType
from src.domain.task import Category
from src.services.activity_analysis_service import ActivityAnalysisError, ActivityAnalysisService
from src.services.reward_service import SKIP_REASON_NO_TASKS, UnknownMatchTypeError
from tests.unit.mocks import FakeClassifier, make_match


@pytest.mark.unit
class TestActivityAnalysisService:
    """Tests for classification followed by reward calculation."""

    @pytest.fixture
    def mock_logger(self):
        return MagicMock()

    @pytest.mark.asyncio
    async def test_calculates_rewards_for_matches(self, fake_classifier, user_tasks, mock_logger):
        """Test classifier matches are turned into rewards."""
        service = ActivityAnalysisService(classifier=fake_classifier, logger=mock_logger)

        outcome = await service.analyze(
            daily_activity="Ran 2.5k this morning",
            user_tasks=user_tasks,
            long_term_goals="Run a marathon",
        )

        assert outcome.matches[0].name == "Morning run"
        assert outcome.rewards.total_xp == 50
        assert outcome.rewards.total_shards == 10.0
        assert outcome.rewards.category_breakdown.strength.xp == 50
        assert outcome.rewards.processed_count == 1
        assert '"Morning run"' in outcome.ai_response
        assert outcome.processing_time_ms >= 0
        assert fake_classifier.calls == [
            {
                "daily_activity": "Ran 2.5k this morning",
                "user_tasks": user_tasks,
                "long_term_goals": "Run a marathon",
            }
        ]

    @pytest.mark.asyncio
    async def test_logs_summary(self, fake_classifier, user_tasks, mock_logger):
        """Test a reward summary is logged with structured fields."""
        service = ActivityAnalysisService(classifier=fake_classifier, logger=mock_logger)

        await service.analyze(daily_activity="Ran 2.5k", user_tasks=user_tasks)

        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.args[0] == "reward_calculation_summary"
        extra = mock_logger.info.call_args.kwargs["extra"]
        assert extra["processed_count"] == 1
        assert extra["skipped_count"] == 0
        assert extra["total_xp"] == 50
        assert extra["strength_xp"] == 50

    @pytest.mark.asyncio
    async def test_missing_tasks_skips_everything_and_warns(self, fake_classifier, mock_logger):
        """Test missing tasks skip every match and log a warning."""
        service = ActivityAnalysisService(classifier=fake_classifier, logger=mock_logger)

        outcome = await service.analyze(daily_activity="Ran 2.5k", user_tasks=None)

        assert outcome.rewards.total_xp == 0
        assert outcome.rewards.skipped_count == 1
        assert outcome.rewards.skipped_activities[0].reason == SKIP_REASON_NO_TASKS
        assert mock_logger.warning.call_args.args[0] == "reward_calculation_without_tasks"

    @pytest.mark.asyncio
    async def test_classifier_failure_skips_reward_calculation(self, user_tasks, mock_logger):
        """Test a classifier failure raises ActivityAnalysisError without calculating rewards."""
        classifier = FakeClassifier(error=Exception("HTTP 429: Too many requests"))
        service = ActivityAnalysisService(classifier=classifier, logger=mock_logger)

        with (
            patch("src.services.activity_analysis_service.calculate_rewards_from_analysis") as mock_calculate,
            pytest.raises(ActivityAnalysisError) as exc_info,
        ):
            await service.analyze(daily_activity="Ran 2.5k", user_tasks=user_tasks)

        mock_calculate.assert_not_called()
        assert exc_info.value.error.code == ErrorCode.ERR_RATE_LIMIT_EXCEEDED
        assert str(exc_info.value.cause) == "HTTP 429: Too many requests"
        assert mock_logger.error.call_args.args[0] == "activity_analysis_failed"

    @pytest.mark.asyncio
    async def test_classifier_timeout_maps_to_network_error(self, user_tasks, mock_logger):
        """Test a classifier timeout is reported as a network error."""
        service = ActivityAnalysisService(classifier=FakeClassifier(error=TimeoutError()), logger=mock_logger)

        with pytest.raises(ActivityAnalysisError) as exc_info:
            await service.analyze(daily_activity="Ran 2.5k", user_tasks=user_tasks)

        assert exc_info.value.error.code == ErrorCode.ERR_NETWORK_ERROR

    @pytest.mark.asyncio
    async def test_unknown_match_type_propagates(self, user_tasks, mock_logger):
        """Test an unknown match type escapes the service unchanged."""
        match = make_match("Morning run").model_copy(update={"match_type": "partial"})
        service = ActivityAnalysisService(classifier=FakeClassifier(matches=[match]), logger=mock_logger)

        with pytest.raises(UnknownMatchTypeError):
            await service.analyze(daily_activity="Ran 2.5k", user_tasks=user_tasks)

    @pytest.mark.asyncio
    async def test_mixed_matches(self, user_tasks, mock_logger):
        """Test exact, similar, goal-aligned and unrelated matches together."""
        classifier = FakeClassifier(
            matches=[
                make_match("Read", category=Category.INTELLIGENCE, matched_task="Read a chapter"),
                make_match("TV", category=Category.CHARISMA, match_type=MatchType.UNRELATED, effort_ratio=0),
            ]
        )
        service = ActivityAnalysisService(classifier=classifier, logger=mock_logger)

        outcome = await service.analyze(daily_activity="Read a chapter and watched TV", user_tasks=user_tasks)

        assert outcome.rewards.processed_count == 1
        assert outcome.rewards.skipped_count == 1
        assert outcome.rewards.category_breakdown.intelligence.xp == 40
        assert outcome.rewards.category_breakdown.charisma.xp == 0
