"""Best-effort per-ticker data collection from Finnhub.

Every data category for a ticker is requested concurrently. A failed
sub-request leaves its field as None and never cancels its siblings.
"""

import asyncio
import json
import logging
import time
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from agentic_invest.pipeline.exceptions import ProviderUnavailable

from .client import FinnhubClient
from .config import FinnhubConfig
from .models import StockDataBundle

logger = logging.getLogger(__name__)

# (section, field, endpoint, params)
RequestSpec = tuple[str, str, str, dict[str, Any]]


def _day(offset_days: int) -> str:
    return (date.today() - timedelta(days=offset_days)).isoformat()


def _unix(offset_days: int) -> int:
    return int(time.time() - offset_days * 86400)


def build_request_specs(ticker: str) -> list[RequestSpec]:
    """All Finnhub requests made for one ticker."""
    sym = {"symbol": ticker}
    return [
        # Company information
        ("company", "profile", "/stock/profile2", sym),
        ("company", "executives", "/stock/executive", sym),
        ("company", "news", "/company-news", {**sym, "from": _day(7), "to": _day(0)}),
        # Market data
        ("market", "quote", "/quote", sym),
        (
            "market",
            "candles",
            "/stock/candle",
            {**sym, "resolution": "D", "from": _unix(30), "to": _unix(0)},
        ),
        # Also filed under financials.basic_financials
        ("market", "metrics", "/stock/metric", {**sym, "metric": "all"}),
        ("market", "recommendation", "/stock/recommendation", sym),
        ("market", "price_target", "/stock/price-target", sym),
        # Financials
        ("financials", "reported_financials", "/stock/financials-reported", {**sym, "freq": "annual"}),
        ("financials", "earnings", "/stock/earnings", sym),
        (
            "financials",
            "earnings_calendar",
            "/calendar/earnings",
            {**sym, "from": _day(30), "to": _day(-30)},
        ),
        # Ownership
        ("ownership", "institutional_ownership", "/stock/institutional-ownership", sym),
        ("ownership", "fund_ownership", "/stock/fund-ownership", sym),
        (
            "ownership",
            "insider_transactions",
            "/stock/insider-transactions",
            {**sym, "from": _day(90), "to": _day(0)},
        ),
        # Technical analysis
        (
            "technical",
            "technical_indicators",
            "/indicator",
            {
                **sym,
                "resolution": "D",
                "from": _unix(100),
                "to": _unix(0),
                "indicator": "rsi",
                "timeperiod": 14,
            },
        ),
        ("technical", "support_resistance", "/scan/support-resistance", {**sym, "resolution": "D"}),
        ("technical", "pattern_recognition", "/scan/pattern", {**sym, "resolution": "D"}),
        # Market context
        ("market_data", "similar_stocks", "/stock/peers", sym),
        (
            "market_data",
            "social_sentiment",
            "/stock/social-sentiment",
            {**sym, "from": _day(7), "to": _day(0)},
        ),
    ]


async def collect_stock_data(client: FinnhubClient, ticker: str) -> StockDataBundle:
    """Fan out every request for ``ticker`` and keep whatever succeeds."""
    bundle = StockDataBundle(ticker=ticker)
    specs = build_request_specs(ticker)

    results = await asyncio.gather(
        *(client.get(endpoint, params) for _, _, endpoint, params in specs),
        return_exceptions=True,
    )

    failed = 0
    for (section, field_name, endpoint, _), result in zip(specs, results):
        if isinstance(result, Exception):
            failed += 1
            logger.debug(f"{ticker} {endpoint} failed: {result}")
            continue
        if isinstance(result, BaseException):
            raise result
        setattr(getattr(bundle, section), field_name, result)
    bundle.financials.basic_financials = bundle.market.metrics

    logger.info(
        f"Collected {len(specs) - failed}/{len(specs)} data categories for {ticker}"
    )
    return bundle


async def collect_all(
    client: FinnhubClient,
    tickers: list[str],
    delay_seconds: float | None = None,
) -> list[StockDataBundle]:
    """Collect tickers one after another; a ticker that fails entirely is skipped."""
    if delay_seconds is None:
        delay_seconds = client.config.inter_ticker_delay_seconds

    results: list[StockDataBundle] = []
    for index, ticker in enumerate(tickers):
        try:
            results.append(await collect_stock_data(client, ticker))
        except Exception as e:
            logger.error(f"Failed to collect data for {ticker}: {e}")
            continue
        if delay_seconds and index < len(tickers) - 1:
            await asyncio.sleep(delay_seconds)

    logger.info(f"Financial data collection finished: {len(results)}/{len(tickers)} tickers")
    return results


def export_bundle(
    results: list[StockDataBundle],
    out_dir: Path,
    generated_at: datetime | None = None,
) -> Path:
    """Write a master file plus one file per ticker; returns the bundle directory.

    Layout::

        financial-data-<timestamp>/master-financial-data.json
        financial-data-<timestamp>/stocks/<TICKER>-complete-data.json
    """
    generated_at = generated_at or datetime.now(timezone.utc)
    stamp = generated_at.strftime("%Y-%m-%dT%H-%M-%S")
    bundle_dir = out_dir / f"financial-data-{stamp}"
    stocks_dir = bundle_dir / "stocks"
    stocks_dir.mkdir(parents=True, exist_ok=True)

    master = {
        "generated_at": generated_at.isoformat(),
        "total_stocks": len(results),
        "stocks": [stock.model_dump(mode="json") for stock in results],
    }
    (bundle_dir / "master-financial-data.json").write_text(
        json.dumps(master, indent=2), encoding="utf-8"
    )

    for stock in results:
        (stocks_dir / f"{stock.ticker}-complete-data.json").write_text(
            json.dumps(stock.model_dump(mode="json"), indent=2), encoding="utf-8"
        )

    logger.info(f"Saved {len(results)} stock files to {bundle_dir}")
    return bundle_dir


async def collect_financial_data(
    api_key: str,
    tickers: list[str],
    out_dir: Path | None = None,
    config: FinnhubConfig | None = None,
) -> list[StockDataBundle]:
    """Collect data for ``tickers`` and optionally export it under ``out_dir``.

    Raises:
        ProviderUnavailable: if no Finnhub API key is configured.
    """
    if not api_key:
        raise ProviderUnavailable("FINNHUB_API_KEY not found. Cannot collect financial data.")

    async with FinnhubClient(api_key=api_key, config=config) as client:
        results = await collect_all(client, tickers)

    if out_dir is not None:
        export_bundle(results, out_dir)
    return results
