"""Trend detection: Grok (real-time X data) with a Gemini simulation fallback."""

import logging
from dataclasses import dataclass, field

from pydantic_ai import Agent

from agentic_invest.agents.agent_factory import AgentFactory, credentials_for_model
from agentic_invest.agents.base import TrendSource
from agentic_invest.config import Settings
from agentic_invest.pipeline.exceptions import (
    PipelineError,
    ProviderRequestFailed,
    ProviderUnavailable,
)
from agentic_invest.pipeline.stages import Stage

from .filters import exclude_large_caps
from .models import TrendAnalysis, TrendReport
from .prompts import TREND_USER_PROMPT, build_fallback_prompt, build_primary_prompt

logger = logging.getLogger(__name__)


class AgentTrendSource:
    """Trend source backed by a pydantic-ai agent with structured output."""

    name = "agent"
    label = "Agent Social Media Analysis"

    def __init__(
        self,
        factory: AgentFactory[None, TrendAnalysis],
        excluded_tickers: list[str],
        max_stocks: int,
    ):
        self._factory = factory
        self._excluded = excluded_tickers
        self._max_stocks = max_stocks

    async def fetch_trending(self) -> TrendReport:
        """Run the agent and return its stocks with large caps removed.

        Raises:
            ProviderUnavailable: if the provider key is not configured.
            ProviderRequestFailed: if the model call fails.
        """
        agent = self._factory.get_agent()

        try:
            result = await agent.run(TREND_USER_PROMPT)
        except Exception as e:
            raise ProviderRequestFailed(
                f"{self.label} request failed: {e}", stage=Stage.TREND_DETECTION
            ) from e

        analysis: TrendAnalysis = result.output
        stocks = exclude_large_caps(analysis.stocks, self._excluded)[: self._max_stocks]
        logger.info(f"{self.label}: {len(stocks)} trending stocks after exclusion")

        return TrendReport(
            stocks=stocks,
            source=f"{self.label} ({len(stocks)} stocks)",
            confidence=analysis.confidence,
            sentiment=analysis.sentiment,
            analysis=analysis.analysis,
        )


class GrokTrendSource(AgentTrendSource):
    """Primary source: Grok with live X/Twitter access."""

    name = "grok"
    label = "Grok Real-time Twitter Analysis"


class GeminiTrendSource(AgentTrendSource):
    """Fallback source: Gemini simulating the same social-media analysis."""

    name = "gemini"
    label = "Gemini Enhanced Social Media Simulation"


@dataclass
class SourceAttempt:
    """Outcome of asking one trend source; exactly one of report/error is set."""

    source: str
    report: TrendReport | None = None
    error: str | None = None
    unavailable: bool = False

    @property
    def succeeded(self) -> bool:
        return self.report is not None and bool(self.report.stocks)


@dataclass
class TrendDetector:
    """Ranked fallback chain: the first source with a non-empty answer wins."""

    sources: list[TrendSource]
    excluded_tickers: list[str] = field(default_factory=list)

    async def detect(self) -> TrendReport:
        attempts: list[SourceAttempt] = []

        for source in self.sources:
            attempt = await self._attempt(source)
            attempts.append(attempt)
            if attempt.succeeded:
                if len(attempts) > 1:
                    logger.info(f"Trend detection fell back to {attempt.source}")
                return attempt.report
            logger.warning(f"Trend source {attempt.source} failed: {attempt.error}")

        details = "; ".join(f"{a.source}: {a.error}" for a in attempts)
        message = f"Trend detection failed: {details}"
        if attempts and all(a.unavailable for a in attempts):
            raise ProviderUnavailable(message, stage=Stage.TREND_DETECTION)
        raise ProviderRequestFailed(message, stage=Stage.TREND_DETECTION)

    async def _attempt(self, source: TrendSource) -> SourceAttempt:
        try:
            report = await source.fetch_trending()
        except ProviderUnavailable as e:
            return SourceAttempt(source=source.name, error=e.message, unavailable=True)
        except PipelineError as e:
            return SourceAttempt(source=source.name, error=e.message)
        except Exception as e:
            logger.exception(f"Unexpected error from trend source {source.name}")
            return SourceAttempt(source=source.name, error=str(e) or type(e).__name__)

        stocks = exclude_large_caps(report.stocks, self.excluded_tickers)
        if not stocks:
            return SourceAttempt(source=source.name, error="returned no eligible tickers")
        return SourceAttempt(
            source=source.name,
            report=report.model_copy(update={"stocks": stocks}),
        )


def create_trend_detector(settings: Settings) -> TrendDetector:
    """Build the Grok -> Gemini chain from settings."""
    trends = settings.trends
    models = settings.models

    def create_primary() -> Agent[None, TrendAnalysis]:
        return Agent(
            model=models.trend_primary,
            output_type=TrendAnalysis,
            system_prompt=build_primary_prompt(trends.primary_target, trends.excluded_tickers),
            model_settings={
                "temperature": models.trend_primary_temperature,
                "timeout": models.timeout_seconds,
            },
        )

    def create_fallback() -> Agent[None, TrendAnalysis]:
        return Agent(
            model=models.trend_fallback,
            output_type=TrendAnalysis,
            system_prompt=build_fallback_prompt(
                trends.fallback_min, trends.fallback_max, trends.excluded_tickers
            ),
            model_settings={
                "temperature": models.trend_fallback_temperature,
                "timeout": models.timeout_seconds,
            },
        )

    primary_key, primary_envs = credentials_for_model(settings, models.trend_primary)
    fallback_key, fallback_envs = credentials_for_model(settings, models.trend_fallback)

    primary = GrokTrendSource(
        AgentFactory(create_primary, api_key=primary_key, api_key_envs=primary_envs),
        excluded_tickers=trends.excluded_tickers,
        max_stocks=trends.primary_target,
    )
    fallback = GeminiTrendSource(
        AgentFactory(create_fallback, api_key=fallback_key, api_key_envs=fallback_envs),
        excluded_tickers=trends.excluded_tickers,
        max_stocks=trends.fallback_max,
    )
    return TrendDetector(sources=[primary, fallback], excluded_tickers=trends.excluded_tickers)
