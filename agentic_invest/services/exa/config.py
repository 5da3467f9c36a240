"""Configuration for Exa AI client."""

from pydantic import BaseModel

# Default system prompt for financial data answers
DEFAULT_SYSTEM_PROMPT = """You are a financial data assistant summarising the latest public information on stocks.

Instructions:
- Use the most recent sources available (prefer the last 7 days for news)
- Give concrete figures: EPS, revenue, P/E ratio, margins where available
- Classify recent news sentiment per ticker as positive, neutral, or negative
- Keep each ticker in its own clearly separated section
- Say explicitly when a figure could not be found; never invent numbers
"""


class ExaConfig(BaseModel):
    """Configuration for Exa AI client."""

    timeout_seconds: float = 60.0

    # Answer defaults
    answer_model: str = "exa"  # or "exa-pro"
    answer_include_text: bool = False
    default_system_prompt: str = DEFAULT_SYSTEM_PROMPT
