"""Structured output of the Advisor agent."""

from typing import Any

from pydantic import BaseModel, Field


class AdvisorPayload(BaseModel):
    """Either ``trades`` or ``error``, as the output contract asks.

    Trade count and per-trade types are checked by
    ``validate_trade_payload``, not here.
    """

    trades: list[Any] | None = Field(
        default=None,
        description="Trade objects with ticker, strategy, legs, thesis and pop",
    )
    error: str | None = Field(
        default=None,
        description="Why fewer than the required number of trades meet the criteria",
    )
