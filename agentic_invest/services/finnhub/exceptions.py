class FinnhubAPIError(Exception):
    """Base exception for Finnhub API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FinnhubAuthError(FinnhubAPIError):
    """Invalid or missing API token."""

    pass


class FinnhubRateLimitError(FinnhubAPIError):
    """Rate limit exceeded."""

    pass


class FinnhubNotFoundError(FinnhubAPIError):
    """Endpoint or symbol not found (or not on the current plan)."""

    pass
