"""LLM Provider and Model Enums for easy model selection and hotswapping.

This module provides enums for all supported LLM providers and their models,
making it easy to switch between different models across the codebase.
"""

from enum import StrEnum


class LLMProvider(StrEnum):
    """Supported LLM providers."""

    GROK = "grok"
    GEMINI = "gemini"
    OPENAI = "openai"


class GrokModel(StrEnum):
    """xAI Grok models (real-time X/Twitter access)."""

    GROK_4 = "grok-4"
    GROK_3 = "grok-3"
    GROK_3_MINI = "grok-3-mini"


class GeminiModel(StrEnum):
    """Google Gemini models available via the Generative Language API."""

    GEMINI_2_5_FLASH = "gemini-2.5-flash"
    GEMINI_2_5_PRO = "gemini-2.5-pro"


class OpenAIModel(StrEnum):
    """OpenAI models available via API."""

    GPT_5 = "gpt-5"
    GPT_5_MINI = "gpt-5-mini"
    GPT_4O = "gpt-4o"


# =============================================================================
# Helper Functions
# =============================================================================


def get_model_string(model: GrokModel | GeminiModel | OpenAIModel) -> str:
    """Get the pydantic-ai model string for any supported model."""
    if isinstance(model, GrokModel):
        return f"grok:{model.value}"
    elif isinstance(model, GeminiModel):
        return f"google-gla:{model.value}"
    elif isinstance(model, OpenAIModel):
        return f"openai:{model.value}"
    return model.value


def get_provider_for_model_string(model: str) -> LLMProvider:
    """Determine the provider for a pydantic-ai model string."""
    prefix = model.split(":", 1)[0]
    if prefix == "grok":
        return LLMProvider.GROK
    elif prefix in ("google-gla", "google-vertex", "gemini"):
        return LLMProvider.GEMINI
    elif prefix in ("openai", "openai-responses"):
        return LLMProvider.OPENAI
    else:
        raise ValueError(f"Unknown model provider: {model}")
