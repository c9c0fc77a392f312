"""Activity analysis endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from src.agents.activity_agent import AgentActivityClassifier
from src.core.config import constants
from src.core.errors import ErrorCode, classify_error_with_response
from src.models.service_models import (
    AnalyzeActivityData,
    AnalyzeActivityRequest,
    ApiErrorResponse,
    ApiSuccessResponse,
)
from src.services.activity_analysis_service import ActivityAnalysisError, ActivityAnalysisService
from src.services.reward_service import NonFiniteRewardError, UnknownMatchTypeError


router = APIRouter(prefix="/api/ai", tags=["ai"])
logger = logging.getLogger(__name__)

# Error messages
ERROR_MSG_ACTIVITY_REQUIRED = "Daily activity description is required"
ERROR_MSG_ANALYSIS_FAILED = "Could not analyze activity"


def get_analysis_service() -> ActivityAnalysisService:
    """Build the activity analysis service with its classifier and logger."""
    return ActivityAnalysisService(
        classifier=AgentActivityClassifier(),
        logger=logging.getLogger("src.services.activity_analysis_service"),
    )


def _error(status_code: int, body: ApiErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True, exclude_none=True))


@router.post("/analyze-activity")
async def analyze_activity(
    payload: AnalyzeActivityRequest,
    service: ActivityAnalysisService = Depends(get_analysis_service),
) -> JSONResponse:
    """Analyze a daily activity description and return the rewards it earns.

    The classifier output is only passed to the reward calculation when it
    was produced and parsed successfully; otherwise a user-visible error is
    returned and no rewards are calculated.
    """
    if not payload.daily_activity.strip():
        return _error(
            constants.HTTP_BAD_REQUEST,
            ApiErrorResponse(message=ERROR_MSG_ACTIVITY_REQUIRED, code=ErrorCode.ERR_INVALID_REQUEST),
        )

    try:
        outcome = await service.analyze(
            daily_activity=payload.daily_activity,
            user_tasks=payload.current_tasks,
            long_term_goals=payload.long_term_goals,
        )
    except ActivityAnalysisError as e:
        return _error(
            constants.HTTP_BAD_GATEWAY,
            ApiErrorResponse(
                message=f"{ERROR_MSG_ANALYSIS_FAILED}. {e.error.message}",
                code=e.error.code,
                suggestion=e.error.suggestion,
            ),
        )
    except UnknownMatchTypeError as e:
        logger.error("unknown_match_type", extra={"match_type": str(e.match_type)})
        error = classify_error_with_response(e)
        return _error(
            constants.HTTP_SERVER_ERROR,
            ApiErrorResponse(message=error.message, code=error.code, suggestion=error.suggestion),
        )
    except NonFiniteRewardError as e:
        logger.error("non_finite_reward", extra={"quantity": e.quantity, "value": repr(e.value)})
        error = classify_error_with_response(e)
        return _error(
            constants.HTTP_BAD_GATEWAY,
            ApiErrorResponse(
                message=f"{ERROR_MSG_ANALYSIS_FAILED}. {error.message}",
                code=error.code,
                suggestion=error.suggestion,
            ),
        )

    data = AnalyzeActivityData(
        matches=outcome.matches,
        rewards=outcome.rewards,
        ai_response=outcome.ai_response,
        processing_time=outcome.processing_time_ms,
    )
    body = ApiSuccessResponse(
        message="Activity analyzed successfully",
        data=data.model_dump(by_alias=True, mode="json"),
    )
    return JSONResponse(status_code=constants.HTTP_OK, content=body.model_dump(by_alias=True))


@router.get("/health")
async def ai_health(service: ActivityAnalysisService = Depends(get_analysis_service)) -> JSONResponse:
    """Report whether the activity classifier is reachable."""
    health = await service.classifier.check_health()
    body = ApiSuccessResponse(
        success=health.success,
        message="AI health check completed",
        data={
            "classifier": {"success": health.success, "message": health.message, "modelId": health.model_id},
            "timestamp": datetime.now(UTC).isoformat(),
        },
    )
    status_code = constants.HTTP_OK if health.success else constants.HTTP_SERVICE_UNAVAILABLE
    return JSONResponse(status_code=status_code, content=body.model_dump(by_alias=True))
