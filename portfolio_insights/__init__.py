"""Portfolio-level dashboard analytics over startup analysis snapshots."""

from .pipeline import DashboardSummary, PortfolioAggregator
from .services.filtering import TimePeriod, filter_by_time_period, select_analyzed

__all__ = [
    "DashboardSummary",
    "PortfolioAggregator",
    "TimePeriod",
    "filter_by_time_period",
    "select_analyzed",
]
