"""Advisor agent (stage 4) and its response validator."""

from .main import AgentAdvisorSource, create_advisor_source
from .models import AdvisorPayload
from .validator import (
    GENERIC_VALIDATION_ERROR,
    UNEXPECTED_FORMAT_ERROR,
    TradesAccepted,
    TradesRejected,
    ValidationResult,
    validate_trade_payload,
)

__all__ = [
    "AdvisorPayload",
    "AgentAdvisorSource",
    "GENERIC_VALIDATION_ERROR",
    "UNEXPECTED_FORMAT_ERROR",
    "TradesAccepted",
    "TradesRejected",
    "ValidationResult",
    "create_advisor_source",
    "validate_trade_payload",
]
