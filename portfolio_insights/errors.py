from __future__ import annotations


class PortfolioInsightsError(Exception):
    """Base class for errors raised by this package."""


class StartupsFetchError(PortfolioInsightsError):
    """The upstream startups listing could not be fetched or decoded."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
