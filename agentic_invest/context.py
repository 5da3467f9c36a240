"""Explicit provider context, built once per process and handed to the orchestrator."""

import logging
import random
from dataclasses import dataclass, field

from agentic_invest.agents.advisor import create_advisor_source
from agentic_invest.agents.base import (
    AdvisorSource,
    CandidateSource,
    FinanceSource,
    TrendProvider,
)
from agentic_invest.agents.finance import create_finance_source
from agentic_invest.agents.selector import create_candidate_source
from agentic_invest.agents.trends import create_trend_detector
from agentic_invest.config import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class ProviderContext:
    """Everything a pipeline run talks to. Tests build one with fakes."""

    settings: Settings
    trends: TrendProvider
    finance: FinanceSource
    selector: CandidateSource
    advisor: AdvisorSource
    rng: random.Random = field(default_factory=random.Random)


def build_context(settings: Settings | None = None) -> ProviderContext:
    """Wire the production adapters from settings.

    Agents are created lazily, so a missing key only fails the stage that needs it.
    """
    if settings is None:
        settings = get_settings()

    context = ProviderContext(
        settings=settings,
        trends=create_trend_detector(settings),
        finance=create_finance_source(settings),
        selector=create_candidate_source(settings),
        advisor=create_advisor_source(settings),
    )
    logger.info(
        f"Provider context ready (trends={settings.models.trend_primary} -> "
        f"{settings.models.trend_fallback}, selector={settings.models.selector}, "
        f"advisor={settings.models.advisor})"
    )
    return context
