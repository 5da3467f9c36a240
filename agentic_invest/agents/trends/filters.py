"""Ticker normalisation and large-cap exclusion."""

import re
from collections.abc import Iterable

from .models import TrendingStock

_TICKER_RE = re.compile(r"^[A-Z]{1,5}$")


def normalize_ticker(raw: str) -> str | None:
    """Return the upper-cased symbol, or None if it is not 1-5 letters."""
    ticker = raw.strip().lstrip("$").upper()
    if _TICKER_RE.match(ticker):
        return ticker
    return None


def exclude_large_caps(
    stocks: Iterable[TrendingStock],
    excluded: Iterable[str],
) -> list[TrendingStock]:
    """Drop denylisted and malformed tickers, and repeats of the same ticker.

    The denylist match is case-insensitive.
    """
    denylist = {t.strip().upper() for t in excluded}
    kept: list[TrendingStock] = []
    seen: set[str] = set()
    for stock in stocks:
        ticker = normalize_ticker(stock.ticker)
        if ticker is None or ticker in denylist or ticker in seen:
            continue
        seen.add(ticker)
        kept.append(TrendingStock(ticker=ticker, reason=stock.reason))
    return kept
