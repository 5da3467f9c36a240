from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class CompanyData(BaseModel):
    profile: Any = None
    executives: Any = None
    news: Any = None


class MarketData(BaseModel):
    quote: Any = None
    candles: Any = None
    metrics: Any = None
    recommendation: Any = None
    price_target: Any = None


class FinancialsData(BaseModel):
    basic_financials: Any = None
    reported_financials: Any = None
    earnings: Any = None
    earnings_calendar: Any = None


class OwnershipData(BaseModel):
    institutional_ownership: Any = None
    fund_ownership: Any = None
    insider_transactions: Any = None


class TechnicalData(BaseModel):
    technical_indicators: Any = None
    support_resistance: Any = None
    pattern_recognition: Any = None


class MarketContextData(BaseModel):
    similar_stocks: Any = None
    social_sentiment: Any = None


class StockDataBundle(BaseModel):
    """Everything collected for one ticker. Sections a request failed for stay None."""

    ticker: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    company: CompanyData = Field(default_factory=CompanyData)
    market: MarketData = Field(default_factory=MarketData)
    financials: FinancialsData = Field(default_factory=FinancialsData)
    ownership: OwnershipData = Field(default_factory=OwnershipData)
    technical: TechnicalData = Field(default_factory=TechnicalData)
    market_data: MarketContextData = Field(default_factory=MarketContextData)

    @property
    def populated_fields(self) -> int:
        """Number of sub-fields that received data."""
        sections = (
            self.company,
            self.market,
            self.financials,
            self.ownership,
            self.technical,
            self.market_data,
        )
        return sum(
            1
            for section in sections
            for value in section.model_dump().values()
            if value is not None
        )
