"""Provider adapter interfaces consumed by the pipeline orchestrator."""

from typing import Any, Protocol

from agentic_invest.agents.finance.models import FinancialSummary
from agentic_invest.agents.trends.models import TrendReport


class TrendSource(Protocol):
    """A single social-trend reasoning source."""

    name: str

    async def fetch_trending(self) -> TrendReport: ...


class TrendProvider(Protocol):
    """Stage 1 entry point (the fallback chain implements this)."""

    async def detect(self) -> TrendReport: ...


class FinanceSource(Protocol):
    """Stage 2: narrative financial summary with citations."""

    async def fetch_summary(self, tickers: list[str]) -> FinancialSummary: ...


class CandidateSource(Protocol):
    """Stage 3: narrow a financial summary to a comma-separated ticker list."""

    async def select(self, summary: str) -> str: ...


class AdvisorSource(Protocol):
    """Stage 4: raw (unvalidated) trade recommendation payload."""

    async def recommend(self, candidates: str, strategy: str) -> str | dict[str, Any]: ...
