"""Trend detection agents (stage 1)."""

from .filters import exclude_large_caps, normalize_ticker
from .main import (
    AgentTrendSource,
    GeminiTrendSource,
    GrokTrendSource,
    SourceAttempt,
    TrendDetector,
    create_trend_detector,
)
from .models import TrendAnalysis, TrendingStock, TrendReport

__all__ = [
    "AgentTrendSource",
    "GeminiTrendSource",
    "GrokTrendSource",
    "SourceAttempt",
    "TrendAnalysis",
    "TrendDetector",
    "TrendReport",
    "TrendingStock",
    "create_trend_detector",
    "exclude_large_caps",
    "normalize_ticker",
]
