"""
Pipeline Exception Hierarchy

Exception Classes:
- PipelineError: Base exception, carries the stage that failed
- ProviderUnavailable: Missing credential/configuration for a provider
- ProviderRequestFailed: Transport or HTTP-level failure, or an empty answer
- ValidationFailed: Advisor output did not meet the schema/cardinality rules
- BusinessRuleUnmet: Advisor reported that fewer trades pass the hard filters
- PipelineBusyError: A cycle is already running for this session

The message of every PipelineError is shown to observers verbatim.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .stages import Stage


class PipelineError(Exception):
    """Base exception for pipeline failures."""

    def __init__(self, message: str, stage: Stage | None = None):
        super().__init__(message)
        self.message = message
        self.stage = stage


class ProviderUnavailable(PipelineError):
    """A required provider is not configured (e.g. missing API key)."""

    pass


class ProviderRequestFailed(PipelineError):
    """A provider call failed or returned nothing usable."""

    pass


class ValidationFailed(PipelineError):
    """Structured advisor output failed validation."""

    pass


class BusinessRuleUnmet(ValidationFailed):
    """Fewer trades than required satisfy the hard filters."""

    pass


class PipelineBusyError(PipelineError):
    """Raised when a run is requested while another is in flight."""

    pass
