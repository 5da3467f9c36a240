"""Generic agent factory for lazily built agent instances owned by a ProviderContext."""

import logging
import os
from typing import Callable, Generic, TypeVar

from pydantic_ai import Agent

from agentic_invest.config import Settings
from agentic_invest.llm_providers import LLMProvider, get_provider_for_model_string
from agentic_invest.pipeline.exceptions import ProviderUnavailable

logger = logging.getLogger(__name__)

DepsT = TypeVar("DepsT")
OutputT = TypeVar("OutputT")


class AgentFactory(Generic[DepsT, OutputT]):
    """Builds an agent on first use, after checking its provider credential."""

    def __init__(
        self,
        create_fn: Callable[[], Agent[DepsT, OutputT]],
        api_key: str | None = None,
        api_key_envs: tuple[str, ...] = (),
    ):
        """Initialize the agent factory.

        Args:
            create_fn: Function that creates a new agent instance
            api_key: Credential for the agent's provider; required when
                ``api_key_envs`` is non-empty
            api_key_envs: Environment variables the provider SDK reads the key from
        """
        self._create_fn = create_fn
        self._api_key = api_key
        self._api_key_envs = api_key_envs
        self._agent: Agent[DepsT, OutputT] | None = None

    def get_agent(self) -> Agent[DepsT, OutputT]:
        """Get or create the agent instance.

        Raises:
            ProviderUnavailable: if the provider credential is missing.
        """
        if self._agent is None:
            self._setup_api_keys()
            self._agent = self._create_fn()
        return self._agent

    def _setup_api_keys(self) -> None:
        """Export the configured key under the names the provider SDK expects."""
        if not self._api_key_envs:
            return
        if not self._api_key:
            raise ProviderUnavailable(
                f"{self._api_key_envs[0]} is not configured"
            )
        for env_name in self._api_key_envs:
            os.environ[env_name] = self._api_key


def credentials_for_model(settings: Settings, model: str) -> tuple[str, tuple[str, ...]]:
    """Return the configured key for a model string and the env vars its SDK reads."""
    provider = get_provider_for_model_string(model)
    if provider == LLMProvider.GROK:
        return settings.grok_api_key, ("GROK_API_KEY",)
    elif provider == LLMProvider.GEMINI:
        return settings.gemini_api_key, ("GOOGLE_API_KEY", "GEMINI_API_KEY")
    return settings.openai_api_key, ("OPENAI_API_KEY",)
