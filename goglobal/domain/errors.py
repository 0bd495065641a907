"""
Domain Errors
=============

Every error the service raises on purpose derives from MarketAnalysisError,
so the web layer can map the known ones to status codes and treat the rest
as unexpected.
"""

from typing import Optional


class MarketAnalysisError(Exception):
    """Base exception for market analysis errors."""

    status_code = 500


class RequestValidationError(MarketAnalysisError):
    """The request body is missing data or has the wrong shape."""

    status_code = 400

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        super().__init__(message)
        self.fields = fields or []


class RateLimitExceededError(MarketAnalysisError):
    """The client sent too many requests in the current window."""

    status_code = 429

    def __init__(self, client_id: str, retry_after: int):
        super().__init__("Rate limit exceeded. Please try again later.")
        self.client_id = client_id
        self.retry_after = retry_after


class ModelResponseError(MarketAnalysisError):
    """The completion API answered, but not with a usable analysis."""


class ConfigurationError(MarketAnalysisError):
    """Settings are invalid; the process must not start."""
