"""Data models for the financial summary stage."""

from pydantic import BaseModel, Field

from agentic_invest.pipeline.models import Citation


class FinancialSummary(BaseModel):
    """Narrative summary for a set of tickers plus the sources it cites."""

    summary: str
    sources: list[Citation] = Field(default_factory=list)
