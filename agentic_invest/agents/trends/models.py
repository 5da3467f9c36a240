"""Data models for trend detection."""

from typing import Literal

from pydantic import BaseModel, Field


class TrendingStock(BaseModel):
    """A ticker gaining social attention, with the reason it is trending."""

    ticker: str = Field(description="Stock ticker symbol, 1-5 uppercase letters, no $ prefix")
    reason: str = Field(description="One sentence on why the stock is trending right now")


class TrendAnalysis(BaseModel):
    """Structured output requested from the trend agents."""

    stocks: list[TrendingStock] = Field(
        description="Trending small/mid-cap stocks, most discussed first"
    )
    sentiment: Literal["bullish", "bearish", "neutral"] = Field(
        default="neutral",
        description="Overall sentiment across the discussion",
    )
    confidence: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Confidence (0-100) that these stocks are genuinely trending",
    )
    analysis: str = Field(
        default="",
        description="Brief 2-3 sentence summary of the themes driving the discussion",
    )


class TrendReport(BaseModel):
    """Trend detection result with the label of the source that produced it."""

    stocks: list[TrendingStock] = Field(default_factory=list)
    source: str = ""
    confidence: int = 0
    sentiment: Literal["bullish", "bearish", "neutral"] = "neutral"
    analysis: str = ""

    @property
    def tickers(self) -> list[str]:
        return [stock.ticker for stock in self.stocks]
