"""Financial summary stage backed by the Exa answer API."""

import logging
from typing import Callable

from agentic_invest.config import Settings
from agentic_invest.pipeline.exceptions import ProviderRequestFailed, ProviderUnavailable
from agentic_invest.pipeline.models import Citation
from agentic_invest.pipeline.stages import Stage
from agentic_invest.services.exa import ExaAPIError, ExaClient, ExaConfig

from .models import FinancialSummary
from .prompts import build_financial_question

logger = logging.getLogger(__name__)

NO_SUMMARY_TEXT = "No summary available"


class ExaFinanceSource:
    """Answers a per-ticker financial question with Exa and keeps its citations."""

    def __init__(
        self,
        api_key: str,
        config: ExaConfig | None = None,
        client_factory: Callable[[str, ExaConfig], ExaClient] | None = None,
    ):
        self._api_key = api_key
        self._config = config or ExaConfig()
        self._client_factory = client_factory or (
            lambda key, cfg: ExaClient(api_key=key, config=cfg)
        )

    async def fetch_summary(self, tickers: list[str]) -> FinancialSummary:
        """Fetch a narrative summary and citations for ``tickers``.

        Citations are returned as received; deduplication is the caller's job.
        """
        if not self._api_key:
            raise ProviderUnavailable(
                "EXA_API_KEY is not configured", stage=Stage.FINANCIAL_SUMMARY
            )

        question = build_financial_question(tickers)
        logger.info(f"Exa financial query for {len(tickers)} tickers")

        try:
            async with self._client_factory(self._api_key, self._config) as client:
                response = await client.answer(question=question)
        except ExaAPIError as e:
            raise ProviderRequestFailed(
                f"Financial data request failed: {e}", stage=Stage.FINANCIAL_SUMMARY
            ) from e

        sources = [
            Citation(uri=citation.url, title=citation.title)
            for citation in response.citations
        ]
        summary = response.answer.strip() or NO_SUMMARY_TEXT
        logger.info(f"Exa returned {len(summary)} chars, {len(sources)} citations")

        return FinancialSummary(summary=summary, sources=sources)


def create_finance_source(settings: Settings) -> ExaFinanceSource:
    return ExaFinanceSource(api_key=settings.exa_api_key)
