"""Prompt for the financial summary stage."""


def build_financial_question(tickers: list[str]) -> str:
    return (
        "Find the latest key financial data points and news for the following stock "
        f"tickers: {', '.join(tickers)}. For each ticker, provide a concise summary "
        "including EPS, Revenue, P/E ratio, and a summary of the most recent (last 7 days) "
        "news sentiment (positive, neutral, or negative). Present it as a well-formatted "
        "block of text with each ticker clearly separated."
    )
