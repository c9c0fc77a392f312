"""Activity classifier: detects activities in a daily description and matches them to planned tasks."""

import asyncio
import logging
import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

import httpx
from pydantic_ai import Agent
from pydantic_ai.settings import ModelSettings

from src.agents.agent_instance import get_activity_agent
from src.agents.base import ActivityDeps
from src.agents.retry_handler import ClassifierRetryHandler, get_retry_handler
from src.core.config import constants, settings
from src.domain.activity import ActivityAnalysis, ActivityMatch
from src.domain.task import UserTasks
from src.modules.activity.prompt import build_activity_prompt


logger = logging.getLogger(__name__)

# Regex pattern to strip special tokens from LLM output
# These tokens can leak from various models (Qwen, DeepSeek, etc.)
_SPECIAL_TOKEN_PATTERN = re.compile(
    r"<\|(?:FunctionCallEnd|endoftext|im_start|im_end|pad|eos|bos|assistant|user|system)\|>",
    re.IGNORECASE,
)


def _sanitize_llm_output(text: str) -> str:
    """Remove leaked special tokens and collapse whitespace in LLM output."""
    sanitized = _SPECIAL_TOKEN_PATTERN.sub("", text)
    sanitized = re.sub(r"\s{2,}", " ", sanitized)
    return sanitized.strip()


def _sanitize_match(match: ActivityMatch) -> ActivityMatch:
    return match.model_copy(
        update={
            "name": _sanitize_llm_output(match.name),
            "notes": _sanitize_llm_output(match.notes),
            "matched_task": _sanitize_llm_output(match.matched_task) if match.matched_task else match.matched_task,
            "goal_link": _sanitize_llm_output(match.goal_link) if match.goal_link else match.goal_link,
        }
    )


@dataclass
class ClassifierOutcome:
    """Parsed classifier output plus its raw JSON form."""

    matches: list[ActivityMatch] = field(default_factory=list)
    raw_response: str = ""


@dataclass
class ClassifierHealth:
    """Result of a classifier connectivity check."""

    success: bool
    message: str
    model_id: str | None = None


class ActivityClassifier(Protocol):
    """Port for the external activity classification service."""

    async def classify(
        self,
        *,
        daily_activity: str,
        user_tasks: UserTasks | None,
        long_term_goals: str | None,
    ) -> ClassifierOutcome:
        """Detect activities in the description and match them against the user's tasks."""
        ...

    async def check_health(self) -> ClassifierHealth:
        """Check that the classification service is reachable."""
        ...


class AgentActivityClassifier:
    """Activity classifier backed by the Pydantic AI agent."""

    def __init__(
        self,
        *,
        agent: Agent[ActivityDeps, ActivityAnalysis] | None = None,
        retry_handler: ClassifierRetryHandler | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self._agent = agent
        self._retry_handler = retry_handler or get_retry_handler()
        self._timeout_seconds = timeout_seconds or settings.classifier_timeout_seconds

    async def classify(
        self,
        *,
        daily_activity: str,
        user_tasks: UserTasks | None,
        long_term_goals: str | None,
    ) -> ClassifierOutcome:
        """Run the agent and return sanitized activity matches.

        The whole call, retries and backoff included, is bounded by the classifier
        timeout; transient failures are retried by the retry handler.

        Raises:
            TimeoutError: If the call and its retries outlast the classifier timeout
            Exception: Whatever the agent raised once retries are exhausted
        """
        agent = self._agent or get_activity_agent()
        prompt = build_activity_prompt(
            daily_activity=daily_activity,
            user_tasks=user_tasks,
            long_term_goals=long_term_goals,
        )
        deps = ActivityDeps(current_time=datetime.now(UTC))
        model_settings = ModelSettings(
            temperature=settings.activity_temperature,
            max_tokens=settings.activity_max_tokens,
        )

        async def _run() -> ActivityAnalysis:
            result = await agent.run(prompt, deps=deps, model_settings=model_settings)
            return result.output

        async with asyncio.timeout(self._timeout_seconds):
            analysis = await self._retry_handler.execute_with_retry(_run)
        matches = [_sanitize_match(match) for match in analysis.matches]
        logger.info("activity_classified", extra={"match_count": len(matches)})

        return ClassifierOutcome(
            matches=matches,
            raw_response=ActivityAnalysis(matches=matches).model_dump_json(),
        )

    async def check_health(self) -> ClassifierHealth:
        """Probe the OpenRouter models endpoint with the configured key."""
        try:
            api_key = settings.require_credential("openrouter_api_key", "OpenRouter API key")
        except ValueError as e:
            return ClassifierHealth(success=False, message=str(e), model_id=settings.model_id)

        try:
            async with httpx.AsyncClient(timeout=constants.API_TIMEOUT_SECONDS) as client:
                response = await client.get(
                    f"{settings.openrouter_base_url}/models",
                    headers={"Authorization": f"Bearer {api_key}"},
                )
        except httpx.HTTPError as e:
            logger.warning("classifier_health_failed", extra={"error": str(e)})
            return ClassifierHealth(success=False, message=f"OpenRouter unreachable: {e}", model_id=settings.model_id)

        if not response.is_success:
            logger.warning("classifier_health_failed", extra={"status_code": response.status_code})
            return ClassifierHealth(
                success=False,
                message=f"OpenRouter returned status {response.status_code}",
                model_id=settings.model_id,
            )

        return ClassifierHealth(
            success=True,
            message=f"Successfully connected to OpenRouter (model: {settings.model_id})",
            model_id=settings.model_id,
        )
