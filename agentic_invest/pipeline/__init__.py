"""
Pipeline core: stages, session state, validation helpers and orchestration.

The orchestrator lives in ``agentic_invest.pipeline.orchestrator`` and is not
re-exported here, so adapters can import the models and exceptions below
without pulling in the agents.
"""

from .dedupe import dedupe_citations
from .exceptions import (
    BusinessRuleUnmet,
    PipelineBusyError,
    PipelineError,
    ProviderRequestFailed,
    ProviderUnavailable,
    ValidationFailed,
)
from .models import (
    Citation,
    PipelineRun,
    SessionSnapshot,
    StageOutput,
    TradeRecommendation,
    ValuationSample,
)
from .stages import STAGE_LABELS, PipelineStatus, Stage
from .state import SessionStore
from .valuation import next_valuation_sample

__all__ = [
    "BusinessRuleUnmet",
    "Citation",
    "PipelineBusyError",
    "PipelineError",
    "PipelineRun",
    "PipelineStatus",
    "ProviderRequestFailed",
    "ProviderUnavailable",
    "STAGE_LABELS",
    "SessionSnapshot",
    "SessionStore",
    "Stage",
    "StageOutput",
    "TradeRecommendation",
    "ValidationFailed",
    "ValuationSample",
    "dedupe_citations",
    "next_valuation_sample",
]
