"""Advisor agent: final trade recommendations as a schema-constrained payload."""

import logging
from typing import Any

from pydantic_ai import Agent

from agentic_invest.agents.agent_factory import AgentFactory, credentials_for_model
from agentic_invest.config import RubricConfig, Settings
from agentic_invest.pipeline.exceptions import ProviderRequestFailed
from agentic_invest.pipeline.stages import Stage

from .models import AdvisorPayload
from .prompts import build_advisor_prompt, build_analyst_prompt

logger = logging.getLogger(__name__)


class AgentAdvisorSource:
    """Asks the advisor model for trades; the payload is validated by the orchestrator."""

    def __init__(self, factory: AgentFactory[None, AdvisorPayload], rubric: RubricConfig):
        self._factory = factory
        self._rubric = rubric

    async def recommend(self, candidates: str, strategy: str) -> dict[str, Any]:
        agent = self._factory.get_agent()
        prompt = build_advisor_prompt(candidates, strategy, self._rubric.trade_count)

        try:
            result = await agent.run(prompt)
        except Exception as e:
            raise ProviderRequestFailed(
                f"Failed to get a valid response from the Advisor Agent: {e}",
                stage=Stage.TRADE_RECOMMENDATION,
            ) from e

        payload = result.output.model_dump(exclude_none=True)
        logger.debug(
            f"Advisor returned {len(payload.get('trades', []))} trades, "
            f"error={payload.get('error')!r}"
        )
        return payload


def create_advisor_source(settings: Settings) -> AgentAdvisorSource:
    models = settings.models
    rubric = settings.rubric

    def create_agent() -> Agent[None, AdvisorPayload]:
        return Agent(
            model=models.advisor,
            output_type=AdvisorPayload,
            system_prompt=build_analyst_prompt(rubric),
            model_settings={
                "temperature": models.advisor_temperature,
                "timeout": models.timeout_seconds,
            },
        )

    api_key, envs = credentials_for_model(settings, models.advisor)
    return AgentAdvisorSource(
        AgentFactory(create_agent, api_key=api_key, api_key_envs=envs),
        rubric=rubric,
    )
