from __future__ import annotations

from typing import Iterable

from ..models import PortfolioInvestment, StartupRecord
from .common import as_records, round_to_tenth

MIN_RETURN_MULTIPLE = 0.5
MAX_RETURN_MULTIPLE = 10.0


def clamp_return(expected_return: float | None) -> float:
    multiple = expected_return or 1.0
    return max(MIN_RETURN_MULTIPLE, min(multiple, MAX_RETURN_MULTIPLE))


def calculate_portfolio_investment(records: Iterable[StartupRecord]) -> PortfolioInvestment:
    # A zero target investment is treated the same as a missing one.
    funded = [
        record.investment
        for record in as_records(records)
        if record.investment is not None and record.investment.target_investment
    ]
    if not funded:
        return PortfolioInvestment()

    total_investment = sum(rec.target_investment for rec in funded)
    if not total_investment:
        return PortfolioInvestment()
    total_weighted_return = sum(
        rec.target_investment * clamp_return(rec.expected_return) for rec in funded
    )
    avg_return = total_weighted_return / total_investment

    return PortfolioInvestment(
        total_investment=total_investment,
        growth_percentage=round_to_tenth((avg_return - 1) * 100),
    )
