"""Strict validation of the Advisor agent's JSON payload.

The payload carries either ``trades`` (exactly N trade objects) or ``error``
(a business-rule explanation). Anything else is rejected with a generic
message. ``validate_trade_payload`` never raises.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import ValidationError

from agentic_invest.pipeline.models import TradeRecommendation

logger = logging.getLogger(__name__)

REQUIRED_TRADE_COUNT = 5

GENERIC_VALIDATION_ERROR = (
    "The Advisor Agent returned trades that do not match the required format: "
    "the required number of trades, each with ticker, strategy, legs, thesis and a numeric pop."
)
UNEXPECTED_FORMAT_ERROR = "Received an unexpected format from the Advisor Agent."

RejectionReason = Literal["business_rule", "schema", "format"]


@dataclass(frozen=True)
class TradesAccepted:
    trades: list[TradeRecommendation] = field(default_factory=list)


@dataclass(frozen=True)
class TradesRejected:
    message: str
    reason: RejectionReason


ValidationResult = TradesAccepted | TradesRejected


def _strip_code_fence(text: str) -> str:
    """Remove one surrounding ``` fence (optionally tagged json)."""
    if not text.startswith("```"):
        return text
    lines = text.splitlines()
    if len(lines) < 2 or not lines[-1].strip().startswith("```"):
        return text
    return "\n".join(lines[1:-1]).strip()


def _parse(raw: Any) -> dict[str, Any] | None:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    if not isinstance(raw, str):
        return None

    text = _strip_code_fence(raw.strip())
    try:
        payload = json.loads(text)
    except json.JSONDecodeError:
        return None
    return payload if isinstance(payload, dict) else None


def validate_trade_payload(
    raw: Any,
    trade_count: int = REQUIRED_TRADE_COUNT,
) -> ValidationResult:
    """Validate advisor output into exactly ``trade_count`` trades or an error message."""
    payload = _parse(raw)
    if payload is None:
        logger.warning("Advisor payload is not a JSON object")
        return TradesRejected(UNEXPECTED_FORMAT_ERROR, "format")

    error = payload.get("error")
    if isinstance(error, str) and error.strip():
        return TradesRejected(error, "business_rule")

    trades = payload.get("trades")
    if not isinstance(trades, list):
        return TradesRejected(UNEXPECTED_FORMAT_ERROR, "format")

    if len(trades) != trade_count:
        logger.warning(f"Advisor returned {len(trades)} trades, expected {trade_count}")
        return TradesRejected(GENERIC_VALIDATION_ERROR, "schema")

    validated: list[TradeRecommendation] = []
    for index, item in enumerate(trades):
        if not isinstance(item, dict):
            return TradesRejected(GENERIC_VALIDATION_ERROR, "schema")
        try:
            validated.append(TradeRecommendation.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Trade {index} failed validation: {e.error_count()} errors")
            return TradesRejected(GENERIC_VALIDATION_ERROR, "schema")

    return TradesAccepted(validated)
