"""Exa AI answer API integration (financial summaries with citations)."""

from .client import ExaClient
from .config import ExaConfig
from .exceptions import (
    ExaAPIError,
    ExaAuthError,
    ExaBadRequestError,
    ExaRateLimitError,
    ExaServerError,
    ExaTimeoutError,
)
from .models import ExaAnswerResponse, ExaCitation

__all__ = [
    "ExaClient",
    "ExaConfig",
    "ExaAPIError",
    "ExaAuthError",
    "ExaRateLimitError",
    "ExaBadRequestError",
    "ExaServerError",
    "ExaTimeoutError",
    "ExaCitation",
    "ExaAnswerResponse",
]
