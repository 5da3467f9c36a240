"""Exceptions raised by the Exa client."""


class ExaAPIError(Exception):
    """Base exception for Exa API errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ExaAuthError(ExaAPIError):
    """Invalid or missing API key (401)."""


class ExaRateLimitError(ExaAPIError):
    """Rate limit exceeded (429). Not retried."""


class ExaBadRequestError(ExaAPIError):
    """Invalid request parameters (400)."""


class ExaServerError(ExaAPIError):
    """Server-side error (5xx)."""


class ExaTimeoutError(ExaAPIError):
    """The answer call did not finish within the configured timeout."""
