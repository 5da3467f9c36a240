"""Shared fakes for pipeline tests."""

import json
import random

import pytest

from agentic_invest.agents.finance import FinancialSummary
from agentic_invest.agents.trends import TrendingStock, TrendReport
from agentic_invest.config import Settings
from agentic_invest.context import ProviderContext
from agentic_invest.pipeline.models import Citation
from agentic_invest.pipeline.state import SessionStore


def make_trade(ticker: str, pop: float = 0.72) -> dict:
    return {
        "ticker": ticker,
        "strategy": "Bull Put Spread",
        "legs": f"Sell {ticker} 20P / Buy {ticker} 18P, 30 DTE",
        "thesis": f"{ticker} holding support with rising retail interest.",
        "pop": pop,
    }


def trades_payload(tickers=("PLTR", "SOFI", "RBLX", "HOOD", "AFRM")) -> str:
    return json.dumps({"trades": [make_trade(t) for t in tickers]})


class FakeTrends:
    def __init__(self, tickers=("PLTR", "SOFI", "RBLX"), error: Exception | None = None):
        self.tickers = tickers
        self.error = error
        self.calls = 0

    async def detect(self) -> TrendReport:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return TrendReport(
            stocks=[TrendingStock(ticker=t, reason="retail buzz") for t in self.tickers],
            source="Fake Trends (3 stocks)",
        )


class FakeFinance:
    def __init__(self, summary: str = "PLTR: strong contract wins. SOFI: deposit growth.", sources=None):
        self.summary = summary
        self.sources = sources if sources is not None else [
            Citation(uri="https://example.com/a", title="A"),
            Citation(uri="https://example.com/a", title="A again"),
        ]
        self.seen_tickers: list[str] | None = None

    async def fetch_summary(self, tickers: list[str]) -> FinancialSummary:
        self.seen_tickers = tickers
        return FinancialSummary(summary=self.summary, sources=self.sources)


class FakeSelector:
    def __init__(self, result: str = "PLTR,SOFI"):
        self.result = result
        self.seen_summary: str | None = None

    async def select(self, summary: str) -> str:
        self.seen_summary = summary
        return self.result


class FakeAdvisor:
    def __init__(self, payload: str | None = None):
        self.payload = payload if payload is not None else trades_payload()
        self.seen: tuple[str, str] | None = None

    async def recommend(self, candidates: str, strategy: str) -> str:
        self.seen = (candidates, strategy)
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def store(settings: Settings) -> SessionStore:
    return SessionStore.from_settings(settings)


@pytest.fixture
def make_context(settings: Settings):
    def _make(trends=None, finance=None, selector=None, advisor=None, seed: int = 7) -> ProviderContext:
        return ProviderContext(
            settings=settings,
            trends=trends or FakeTrends(),
            finance=finance or FakeFinance(),
            selector=selector or FakeSelector(),
            advisor=advisor or FakeAdvisor(),
            rng=random.Random(seed),
        )

    return _make
