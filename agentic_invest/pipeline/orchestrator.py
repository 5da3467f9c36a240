"""Pipeline orchestration: Trends -> Financials -> Candidates -> Advisor -> Valuation."""

import asyncio
import logging

from agentic_invest.agents.advisor import TradesRejected, validate_trade_payload
from agentic_invest.agents.trends import exclude_large_caps
from agentic_invest.context import ProviderContext
from agentic_invest.observability import stage_span

from .dedupe import dedupe_citations
from .exceptions import (
    BusinessRuleUnmet,
    PipelineError,
    ProviderRequestFailed,
    ValidationFailed,
)
from .models import (
    SessionSnapshot,
    StageOutput,
    TradeRecommendation,
    ValuationSample,
)
from .stages import Stage
from .state import SessionStore
from .valuation import next_valuation_sample

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."
CANCELLED_MESSAGE = "The pipeline run was cancelled."


def error_message_for(exc: BaseException) -> str:
    """Message shown to observers: the failure's own text, unmodified."""
    if isinstance(exc, PipelineError):
        return exc.message
    return str(exc) or UNKNOWN_ERROR_MESSAGE


class PipelineOrchestrator:
    """Runs one investment cycle at a time against a SessionStore."""

    def __init__(self, context: ProviderContext, store: SessionStore):
        self.context = context
        self.store = store

    async def run_cycle(self, strategy: str) -> SessionSnapshot:
        """Run all five stages in order and return the final snapshot.

        Failures in stages 1-4 end the run in the error state; they are not
        re-raised. Starting while another run is in flight raises
        PipelineBusyError before any state changes.
        """
        run_id = self.store.begin_run(strategy)
        return await self._execute(run_id, strategy)

    def start_cycle(self, strategy: str) -> asyncio.Task[SessionSnapshot]:
        """Claim the session now and run the stages in a background task.

        The single-flight check happens synchronously, so a second caller is
        rejected with PipelineBusyError even before the first task is scheduled.
        """
        run_id = self.store.begin_run(strategy)
        return asyncio.create_task(self._execute(run_id, strategy))

    async def _execute(self, run_id: str, strategy: str) -> SessionSnapshot:
        logger.info(f"Pipeline {run_id} starting")

        try:
            try:
                tickers = await self._detect_trends()
                summary = await self._gather_financials(tickers)
                candidates = await self._select_candidates(summary)
                await self._recommend_trades(candidates, strategy)
            except Exception as e:
                message = error_message_for(e)
                if isinstance(e, PipelineError):
                    logger.error(f"Pipeline {run_id} failed: {message}")
                else:
                    logger.exception(f"Pipeline {run_id} failed unexpectedly")
                self.store.fail(message)
                return self.store.snapshot()

            self._update_valuation()
            self.store.complete()
            logger.info(f"Pipeline {run_id} complete")
            return self.store.snapshot()
        finally:
            # Still open only when the task was cancelled
            if self.store.is_running:
                logger.warning(f"Pipeline {run_id} cancelled")
                self.store.fail(CANCELLED_MESSAGE)

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    async def _detect_trends(self) -> list[str]:
        stage = Stage.TREND_DETECTION
        self.store.enter_stage(stage)

        with stage_span(stage):
            report = await self.context.trends.detect()

        stocks = exclude_large_caps(
            report.stocks, self.context.settings.trends.excluded_tickers
        )
        if not stocks:
            raise ProviderRequestFailed("No eligible trending stocks were detected.", stage=stage)

        tickers = [stock.ticker for stock in stocks]
        logger.info(f"Trending stocks ({report.source}): {', '.join(tickers)}")
        self.store.record_output(
            stage,
            StageOutput(
                text=f"Identified trending stocks via {report.source}: {', '.join(tickers)}"
            ),
        )
        return tickers

    async def _gather_financials(self, tickers: list[str]) -> str:
        stage = Stage.FINANCIAL_SUMMARY
        self.store.enter_stage(stage)

        with stage_span(stage):
            result = await self.context.finance.fetch_summary(tickers)

        sources = dedupe_citations(result.sources)
        preview_chars = self.context.settings.pipeline.summary_preview_chars
        preview = result.summary[:preview_chars]
        if len(result.summary) > preview_chars:
            preview += "..."

        self.store.record_output(
            stage,
            StageOutput(text=f"Gathered financial data:\n{preview}", sources=sources),
        )
        return result.summary

    async def _select_candidates(self, summary: str) -> str:
        stage = Stage.CANDIDATE_SELECTION
        self.store.enter_stage(stage)

        with stage_span(stage):
            candidates = (await self.context.selector.select(summary)).strip()

        if not candidates:
            raise ProviderRequestFailed("Candidate selection returned no tickers.", stage=stage)

        self.store.record_output(stage, StageOutput(text=f"Selected candidates: {candidates}"))
        return candidates

    async def _recommend_trades(self, candidates: str, strategy: str) -> list[TradeRecommendation]:
        stage = Stage.TRADE_RECOMMENDATION
        self.store.enter_stage(stage)

        with stage_span(stage):
            raw = await self.context.advisor.recommend(candidates, strategy)

        result = validate_trade_payload(
            raw, trade_count=self.context.settings.rubric.trade_count
        )
        if isinstance(result, TradesRejected):
            if result.reason == "business_rule":
                raise BusinessRuleUnmet(result.message, stage=stage)
            raise ValidationFailed(result.message, stage=stage)

        self.store.set_trades(result.trades)
        self.store.record_output(
            stage,
            StageOutput(text=f"Generated {len(result.trades)} final trade recommendations."),
        )
        return result.trades

    def _update_valuation(self) -> ValuationSample:
        stage = Stage.VALUATION_UPDATE
        self.store.enter_stage(stage)

        last = self.store.last_valuation or ValuationSample(
            day=0, value=int(self.context.settings.rubric.nav_usd)
        )
        sample = next_valuation_sample(last, self.context.rng)
        self.store.append_valuation(sample)
        self.store.record_output(
            stage,
            StageOutput(
                text=f"Simulated trades executed. New portfolio value: ${sample.value:,}"
            ),
        )
        return sample


async def run_pipeline(
    context: ProviderContext,
    store: SessionStore,
    strategy: str | None = None,
) -> SessionSnapshot:
    """Run one cycle with the configured default strategy when none is given."""
    if strategy is None:
        strategy = context.settings.pipeline.default_strategy
    return await PipelineOrchestrator(context, store).run_cycle(strategy)
