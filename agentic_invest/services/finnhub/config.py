from pydantic import BaseModel


class FinnhubConfig(BaseModel):
    """Configuration for Finnhub API client."""

    base_url: str = "https://finnhub.io/api/v1"
    timeout_seconds: float = 30.0
    max_connections: int = 20
    max_keepalive_connections: int = 10
    # Pause between tickers to stay under the free-tier rate limit
    inter_ticker_delay_seconds: float = 0.1
