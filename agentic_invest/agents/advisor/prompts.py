"""Prompts for the Advisor agent (final trade recommendations)."""

from agentic_invest.config import RubricConfig


def build_analyst_prompt(rubric: RubricConfig) -> str:
    """System prompt carrying the data categories and the hard-filter rubric."""
    return f"""You are an elite AI financial analyst. Your task is to analyze a list of stock candidates and
select the best investment opportunities based on a user's strategy and a strict set of criteria.

Data Categories for Analysis:
- Fundamental Data: EPS, Revenue, P/E, P/S, Margins, FCF Yield, Insider Transactions.
- Options Chain Data: Implied Volatility (IV), Open Interest, Volume, IV Rank.
- Price & Volume Data: OHLCV, Historical Volatility, Moving Averages (50/100/200-day), RSI, MACD, VWAP.
- Alternative Data: Social Sentiment (Twitter/X, Reddit), News event detection.

Trade Selection Criteria:
- Number of Trades: Exactly {rubric.trade_count}
- Goal: Maximize edge while maintaining portfolio diversification and risk limits.
- Hard Filters (discard trades not meeting these):
  - Quote age <= {rubric.max_quote_age_minutes} minutes (Assume all provided data is live)
  - Top option Probability of Profit (POP) >= {rubric.min_probability_of_profit:.2f}
  - Top option credit / max loss ratio >= {rubric.min_credit_to_max_loss:.2f}
  - Top option max loss <= {rubric.max_loss_pct_of_nav:.1%} of ${rubric.nav_usd:,.0f} NAV (<= ${rubric.max_loss_usd:,.0f})
- Selection Rules:
  - Rank trades by a composite model_score you generate.
  - Ensure diversification: maximum of {rubric.max_trades_per_sector} trades per GICS sector.
  - In case of ties, prefer higher momentum and positive sentiment scores.
"""


def build_output_contract(trade_count: int) -> str:
    return f"""**Output Format:**
Provide your output strictly as a single JSON object.
The object can contain one of two keys: "trades" or "error".
- If you find {trade_count} trades that meet all criteria, the key should be "trades", and its value
  should be an array of {trade_count} trade objects. Each trade object must have keys: "ticker",
  "strategy", "legs", "thesis" (string, max 30 words), and "pop" (number).
- If fewer than {trade_count} trades satisfy all criteria, the key should be "error", and its value
  should be a string explaining why (e.g., "Fewer than {trade_count} trades meet criteria, do not execute.").
Do not include any other text, explanations, or markdown formatting outside of the single, valid JSON object."""


def build_advisor_prompt(candidates: str, strategy: str, trade_count: int) -> str:
    """User prompt: the user's strategy, the candidates and the JSON contract."""
    return f"""**User's Custom Strategy Directive:**
{strategy}

**Investment Candidates to Analyze:**
Analyze the following candidate stocks: {candidates}.

{build_output_contract(trade_count)}"""
