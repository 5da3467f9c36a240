import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from agentic_invest.pipeline.exceptions import ProviderUnavailable
from agentic_invest.services.finnhub import (
    FinnhubAuthError,
    FinnhubClient,
    FinnhubRateLimitError,
    StockDataBundle,
    build_request_specs,
    collect_all,
    collect_financial_data,
    collect_stock_data,
    export_bundle,
)


def _handler(request: httpx.Request) -> httpx.Response:
    assert request.url.params["token"] == "test-key"
    symbol = request.url.params.get("symbol")
    if symbol == "DEAD":
        return httpx.Response(500, json={"error": "boom"})
    if request.url.path == "/api/v1/quote":
        return httpx.Response(200, json={"c": 21.5, "pc": 20.0})
    if request.url.path == "/api/v1/stock/profile2":
        return httpx.Response(200, json={"name": "Palantir", "ticker": symbol})
    return httpx.Response(403, json={"error": "You don't have access to this resource."})


def _client() -> FinnhubClient:
    return FinnhubClient(api_key="test-key", transport=httpx.MockTransport(_handler))


def test_partial_failures_leave_fields_empty():
    async def run():
        async with _client() as client:
            return await collect_stock_data(client, "PLTR")

    bundle = asyncio.run(run())

    assert bundle.ticker == "PLTR"
    assert bundle.market.quote == {"c": 21.5, "pc": 20.0}
    assert bundle.company.profile["name"] == "Palantir"
    assert bundle.financials.earnings is None
    assert bundle.populated_fields == 2


def test_collect_all_keeps_tickers_with_partial_data():
    async def run():
        async with _client() as client:
            return await collect_all(client, ["PLTR", "DEAD", "SOFI"], delay_seconds=0)

    results = asyncio.run(run())

    assert [r.ticker for r in results] == ["PLTR", "DEAD", "SOFI"]
    assert results[1].populated_fields == 0


def test_client_maps_status_codes():
    def handler(request: httpx.Request) -> httpx.Response:
        status = {"/api/v1/a": 401, "/api/v1/b": 429}[request.url.path]
        return httpx.Response(status)

    async def run(endpoint):
        async with FinnhubClient("k", transport=httpx.MockTransport(handler)) as client:
            await client.get(endpoint)

    with pytest.raises(FinnhubAuthError):
        asyncio.run(run("/a"))
    with pytest.raises(FinnhubRateLimitError):
        asyncio.run(run("/b"))


def test_client_requires_context_manager():
    with pytest.raises(RuntimeError):
        asyncio.run(FinnhubClient("k").get("/quote"))


def test_request_specs_cover_every_section():
    specs = build_request_specs("PLTR")
    sections = {section for section, _, _, _ in specs}

    assert sections == {"company", "market", "financials", "ownership", "technical", "market_data"}
    assert all(params["symbol"] == "PLTR" for _, _, _, params in specs)


def test_metrics_are_requested_once_and_shared():
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request.url.path)
        if request.url.path == "/api/v1/stock/metric":
            return httpx.Response(200, json={"metric": {"beta": 1.8}})
        return httpx.Response(403)

    async def run():
        async with FinnhubClient("k", transport=httpx.MockTransport(handler)) as client:
            return await collect_stock_data(client, "PLTR")

    bundle = asyncio.run(run())

    assert calls.count("/api/v1/stock/metric") == 1
    assert bundle.market.metrics == {"metric": {"beta": 1.8}}
    assert bundle.financials.basic_financials == bundle.market.metrics
    assert len(calls) == len(build_request_specs("PLTR"))


def test_export_bundle_layout(tmp_path):
    stocks = [
        StockDataBundle(ticker="PLTR"),
        StockDataBundle(ticker="SOFI"),
    ]
    stocks[0].market.quote = {"c": 21.5}
    generated_at = datetime(2025, 1, 2, 3, 4, 5, tzinfo=timezone.utc)

    bundle_dir = export_bundle(stocks, tmp_path, generated_at)

    assert bundle_dir.name == "financial-data-2025-01-02T03-04-05"
    master = json.loads((bundle_dir / "master-financial-data.json").read_text())
    assert master["total_stocks"] == 2
    assert [s["ticker"] for s in master["stocks"]] == ["PLTR", "SOFI"]

    pltr = json.loads((bundle_dir / "stocks" / "PLTR-complete-data.json").read_text())
    assert pltr["market"]["quote"] == {"c": 21.5}
    assert (bundle_dir / "stocks" / "SOFI-complete-data.json").exists()


def test_missing_key_is_unavailable():
    with pytest.raises(ProviderUnavailable):
        asyncio.run(collect_financial_data("", ["PLTR"]))
