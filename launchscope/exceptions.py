"""
Error kinds raised inside the extraction pipeline.

Public operations convert every one of these into an error string on their
result envelope; none of them escape an operation boundary.
"""
from typing import Optional


class ScraperError(Exception):
    """Base error for the scraping pipeline."""


class NetworkError(ScraperError):
    """Non-success HTTP status or transport failure."""

    def __init__(self, message: str, *, url: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class StateNotFoundError(ScraperError):
    """The embedded state transport (or the expected markup) is absent from the page."""


class PayloadParseError(ScraperError):
    """The embedded payload could not be repaired into valid JSON."""


class FeedNotFoundError(ScraperError):
    """No parsed event carries the requested feed."""

    def __init__(self, message: str, *, feed: str) -> None:
        super().__init__(message)
        self.feed = feed


class ApiError(Exception):
    """Failure reported by the formal GraphQL API."""
