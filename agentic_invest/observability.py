"""Logfire tracing for pipeline runs."""

import logging

import logfire

from agentic_invest import __version__
from agentic_invest.config import Settings
from agentic_invest.pipeline.stages import Stage

logger = logging.getLogger(__name__)

STAGE_SPAN = "pipeline.stage"


def stage_span(stage: Stage) -> logfire.LogfireSpan:
    """Span wrapping the provider call of one pipeline stage."""
    return logfire.span(STAGE_SPAN, stage=stage.value, label=stage.label)


def initialize_logfire(settings: Settings) -> None:
    """
    Initialize Logfire tracing for pipeline runs.

    Must be called ONCE at startup, before the first run starts.

    Each stage's provider call is recorded as a ``pipeline.stage`` span
    tagged with the stage name and its dashboard label. Nested under it:
    - PydanticAI agent runs (trend, selector, advisor)
    - HTTPX requests (Finnhub API)
    - Python log records, bridged through the root logger

    Without a token nothing is configured and the spans are no-ops.

    Args:
        settings: Application settings containing Logfire token
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="agentic-invest",
            service_version=__version__,
        )

        logfire.instrument_pydantic_ai()
        logfire.instrument_httpx()

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("✓ Logfire tracing initialized")

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
