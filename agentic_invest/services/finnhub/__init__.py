"""Finnhub market data integration (comprehensive per-ticker collection)."""

from .client import FinnhubClient
from .collector import (
    build_request_specs,
    collect_all,
    collect_financial_data,
    collect_stock_data,
    export_bundle,
)
from .config import FinnhubConfig
from .exceptions import (
    FinnhubAPIError,
    FinnhubAuthError,
    FinnhubNotFoundError,
    FinnhubRateLimitError,
)
from .models import StockDataBundle

__all__ = [
    "FinnhubAPIError",
    "FinnhubAuthError",
    "FinnhubClient",
    "FinnhubConfig",
    "FinnhubNotFoundError",
    "FinnhubRateLimitError",
    "StockDataBundle",
    "build_request_specs",
    "collect_all",
    "collect_financial_data",
    "collect_stock_data",
    "export_bundle",
]
