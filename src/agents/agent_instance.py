"""Activity classifier agent instance.

The agent turns a daily-activity description into structured activity matches
(`ActivityAnalysis`). It is created lazily so importing this module never needs
an API key; tests build their own agent with a test model.
"""

import logging

from pydantic_ai import Agent, RunContext
from pydantic_ai.models import Model
from pydantic_ai.models.openrouter import OpenRouterModel, OpenRouterModelSettings
from pydantic_ai.providers.openrouter import OpenRouterProvider

from src.agents.base import ActivityDeps
from src.core.config import settings
from src.domain.activity import ActivityAnalysis
from src.modules.activity.prompt import ACTIVITY_ANALYSIS_PROMPT


logger = logging.getLogger(__name__)


class _AgentState:
    """Singleton state for agent instance."""

    instance: Agent[ActivityDeps, ActivityAnalysis] | None = None


def _create_openrouter_model() -> OpenRouterModel:
    """Build the OpenRouter model from settings.

    Raises:
        ValueError: If the OpenRouter API key is not configured
    """
    api_key = settings.require_credential("openrouter_api_key", "OpenRouter API key")
    provider = OpenRouterProvider(api_key=api_key)

    # Configure provider routing if specified
    model_settings: OpenRouterModelSettings | None = None
    if settings.model_provider:
        model_settings = OpenRouterModelSettings(openrouter_provider={"only": [settings.model_provider]})

    return OpenRouterModel(
        model_name=settings.model_id,
        provider=provider,
        settings=model_settings,
    )


def _current_date_instructions(ctx: RunContext[ActivityDeps]) -> str:
    return f"Today is {ctx.deps.current_time:%A, %Y-%m-%d}."


def create_activity_agent(model: Model | None = None) -> Agent[ActivityDeps, ActivityAnalysis]:
    """Create an activity classifier agent.

    Args:
        model: Model to run the agent on; defaults to the configured OpenRouter model

    Returns:
        Agent producing ActivityAnalysis output
    """
    agent = Agent(
        model=model or _create_openrouter_model(),
        deps_type=ActivityDeps,
        output_type=ActivityAnalysis,
        instructions=ACTIVITY_ANALYSIS_PROMPT,
        retries=0,  # Retries are handled by the classifier retry handler
    )
    agent.instructions(_current_date_instructions)
    return agent


def get_activity_agent() -> Agent[ActivityDeps, ActivityAnalysis]:
    """Get or create the shared activity classifier agent."""
    if _AgentState.instance is None:
        _AgentState.instance = create_activity_agent()
        logger.info("activity_agent_created", extra={"model_id": settings.model_id})

    return _AgentState.instance
