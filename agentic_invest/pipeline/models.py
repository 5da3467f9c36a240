"""Pydantic models shared by the pipeline, the adapters and the dashboard API."""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictStr, field_validator

from .stages import PipelineStatus, Stage


class Citation(BaseModel):
    """A source reference attached to a stage's output."""

    uri: str
    title: str


class StageOutput(BaseModel):
    """Display text (and optional citations) produced by one stage."""

    text: str
    sources: list[Citation] | None = None


class TradeRecommendation(BaseModel):
    """One option trade proposed by the advisor.

    Keys outside the five trade fields are dropped on validation.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    ticker: StrictStr
    strategy: StrictStr
    legs: StrictStr
    thesis: StrictStr = Field(description="A concise thesis, max 30 words.")
    probability_of_profit: float = Field(
        validation_alias=AliasChoices("pop", "probabilityOfProfit", "probability_of_profit"),
        serialization_alias="pop",
        description="Probability of Profit",
    )

    @field_validator("probability_of_profit", mode="before")
    @classmethod
    def require_number(cls, v: Any) -> Any:
        # bool is an int subclass; numeric strings are not numbers here
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("probability of profit must be a number")
        return v


class ValuationSample(BaseModel):
    """One point on the portfolio value chart."""

    day: int
    value: int = Field(ge=0)


class PipelineRun(BaseModel):
    """State of the current (or most recent) pipeline run."""

    run_id: str | None = None
    status: PipelineStatus = PipelineStatus.IDLE
    current_stage: Stage = Stage.IDLE
    stage_outputs: dict[Stage, StageOutput] = Field(default_factory=dict)
    error_message: str | None = None
    strategy: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None


class SessionSnapshot(BaseModel):
    """Read-only view of the session handed to observers."""

    run_id: str | None = None
    status: PipelineStatus
    current_stage: Stage
    stage_outputs: dict[Stage, StageOutput]
    trades: list[TradeRecommendation]
    error_message: str | None
    portfolio_history: list[ValuationSample]
    started_at: datetime | None = None
    finished_at: datetime | None = None
