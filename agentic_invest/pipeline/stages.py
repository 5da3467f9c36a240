"""Pipeline stage and status enums."""

from enum import StrEnum


class PipelineStatus(StrEnum):
    """Lifecycle status of a pipeline run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class Stage(StrEnum):
    """Pipeline stages in execution order, plus the Idle sentinel."""

    TREND_DETECTION = "TrendDetection"
    FINANCIAL_SUMMARY = "FinancialSummary"
    CANDIDATE_SELECTION = "CandidateSelection"
    TRADE_RECOMMENDATION = "TradeRecommendation"
    VALUATION_UPDATE = "ValuationUpdate"
    IDLE = "Idle"

    @classmethod
    def pipeline(cls) -> list["Stage"]:
        """The five executable stages in order."""
        return [stage for stage in cls if stage is not cls.IDLE]

    @property
    def index(self) -> int:
        """Position in the pipeline; Idle sorts before every stage."""
        if self is Stage.IDLE:
            return -1
        return Stage.pipeline().index(self)

    @property
    def label(self) -> str:
        return STAGE_LABELS[self]


STAGE_LABELS: dict[Stage, str] = {
    Stage.TREND_DETECTION: "Enhanced Twitter Agent",
    Stage.FINANCIAL_SUMMARY: "Finance Data Agent",
    Stage.CANDIDATE_SELECTION: "Financial Decision Agent",
    Stage.TRADE_RECOMMENDATION: "Advisor Agent",
    Stage.VALUATION_UPDATE: "Trade Execution",
    Stage.IDLE: "Idle",
}
