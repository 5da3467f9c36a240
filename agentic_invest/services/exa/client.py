"""Async wrapper for Exa AI SDK with error classification."""

import asyncio
import logging
from typing import Any, Callable

from exa_py import Exa

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

logger = logging.getLogger(__name__)


class ExaClient:
    """Async wrapper for Exa AI SDK. One attempt per call; errors are classified."""

    def __init__(self, api_key: str, config: ExaConfig | None = None):
        self.api_key = api_key
        self.config = config or ExaConfig()
        self._client: Exa | None = None
        logger.debug("Initialized ExaClient")

    async def __aenter__(self) -> "ExaClient":
        """Context manager entry - create Exa client."""
        self._client = Exa(api_key=self.api_key)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - cleanup."""
        self._client = None
        logger.debug("Closed ExaClient")

    @property
    def client(self) -> Exa:
        """Get Exa client, raising if not in context."""
        if self._client is None:
            raise RuntimeError("ExaClient must be used as async context manager")
        return self._client

    async def _call(self, operation: str, fn: Callable[[], Any]) -> Any:
        """Run a blocking SDK call off the event loop and classify failures."""
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(fn), timeout=self.config.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise ExaTimeoutError(
                f"{operation} timed out after {self.config.timeout_seconds:.0f}s"
            ) from e
        except Exception as e:
            error_msg = str(e).lower()

            if "401" in error_msg or "unauthorized" in error_msg:
                raise ExaAuthError("Authentication failed", status_code=401) from e
            elif "429" in error_msg or "rate limit" in error_msg:
                raise ExaRateLimitError(f"Rate limited in {operation}", status_code=429) from e
            elif "400" in error_msg or "bad request" in error_msg:
                raise ExaBadRequestError(f"Invalid request: {e}", status_code=400) from e
            elif any(code in error_msg for code in ["500", "502", "503", "504"]):
                raise ExaServerError(f"Server error in {operation}: {e}") from e
            raise ExaAPIError(f"{operation} failed: {e}") from e

    async def answer(
        self,
        question: str,
        include_text: bool | None = None,
        system_prompt: str | None = None,
    ) -> ExaAnswerResponse:
        """Generate an answer to a question with citations.

        Args:
            question: Question to answer
            include_text: Whether to include full text in citations
            system_prompt: Custom system prompt for the LLM
        """
        include_text = (
            include_text if include_text is not None else self.config.answer_include_text
        )
        system_prompt = system_prompt or self.config.default_system_prompt

        def _answer():
            return self.client.answer(
                query=question,
                text=include_text,
                model=self.config.answer_model,
                system_prompt=system_prompt,
            )

        response = await self._call("answer", _answer)

        citations = [
            ExaCitation(
                url=c.url,
                title=getattr(c, "title", None) or "",
                text=getattr(c, "text", None),
            )
            for c in (response.citations or [])
        ]

        answer = response.answer if isinstance(response.answer, str) else str(response.answer)
        return ExaAnswerResponse(answer=answer, citations=citations, query=question)
