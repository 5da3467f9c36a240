"""Candidate selection: narrow the financial summary to a ranked top five."""

import logging

from pydantic import BaseModel, Field
from pydantic_ai import Agent

from agentic_invest.agents.agent_factory import AgentFactory, credentials_for_model
from agentic_invest.agents.trends.filters import normalize_ticker
from agentic_invest.config import Settings
from agentic_invest.pipeline.exceptions import ProviderRequestFailed
from agentic_invest.pipeline.stages import Stage

logger = logging.getLogger(__name__)

SELECTOR_SYSTEM_PROMPT = """You are a financial decision agent. Given financial data summaries for a set
of stocks, select the most promising investment candidates based on a balance of strong
fundamentals and positive sentiment. Rank them best first and return tickers only."""


class CandidateList(BaseModel):
    """Structured output of the selector agent."""

    tickers: list[str] = Field(
        description="Ticker symbols of the top candidates, best first, no $ prefix"
    )


def build_selection_prompt(summary: str, count: int) -> str:
    return (
        f"Given the following financial data summaries:\n\n{summary}\n\n"
        f"Select the top {count} most promising investment candidates."
    )


class AgentCandidateSource:
    """Selects candidates with a schema-constrained agent and renders them comma-separated."""

    def __init__(self, factory: AgentFactory[None, CandidateList], count: int = 5):
        self._factory = factory
        self._count = count

    async def select(self, summary: str) -> str:
        agent = self._factory.get_agent()

        try:
            result = await agent.run(build_selection_prompt(summary, self._count))
        except Exception as e:
            raise ProviderRequestFailed(
                f"Candidate selection failed: {e}", stage=Stage.CANDIDATE_SELECTION
            ) from e

        tickers: list[str] = []
        for raw in result.output.tickers:
            ticker = normalize_ticker(raw)
            if ticker and ticker not in tickers:
                tickers.append(ticker)

        selected = ",".join(tickers[: self._count])
        logger.info(f"Selected candidates: {selected or '(none)'}")
        return selected


def create_candidate_source(settings: Settings) -> AgentCandidateSource:
    models = settings.models

    def create_agent() -> Agent[None, CandidateList]:
        return Agent(
            model=models.selector,
            output_type=CandidateList,
            system_prompt=SELECTOR_SYSTEM_PROMPT,
            model_settings={
                "temperature": models.selector_temperature,
                "timeout": models.timeout_seconds,
            },
        )

    api_key, envs = credentials_for_model(settings, models.selector)
    return AgentCandidateSource(
        AgentFactory(create_agent, api_key=api_key, api_key_envs=envs),
        count=settings.rubric.trade_count,
    )
