from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List

from ..models import RiskFlagSummary, StartupRecord
from .common import as_records

MAX_RISK_SUMMARIES = 3


@dataclass
class _CategoryTally:
    count: int
    severity: str


def _escalate(current: str, incoming: str) -> str:
    """Raise the running severity; never demote it."""
    if incoming == "high" or (incoming == "medium" and current == "low"):
        return incoming
    return current


def calculate_aggregate_risk_flags(records: Iterable[StartupRecord]) -> List[RiskFlagSummary]:
    """Roll per-startup risk flags up into at most three category summaries.

    Categories keep first-seen order. Each flag counts once towards its
    category, and the category severity is the highest seen so far.
    """
    tallies: Dict[str, _CategoryTally] = {}
    for record in as_records(records):
        if record.risk_flags is None:
            continue
        for flag in record.risk_flags:
            tally = tallies.get(flag.category)
            if tally is None:
                tallies[flag.category] = _CategoryTally(count=1, severity=flag.type)
                continue
            tally.count += 1
            tally.severity = _escalate(tally.severity, flag.type)

    summaries: List[RiskFlagSummary] = []
    for category, tally in list(tallies.items())[:MAX_RISK_SUMMARIES]:
        plural = "s" if tally.count > 1 else ""
        summaries.append(
            RiskFlagSummary(
                type=tally.severity,
                category=category,
                description=f"Found in {tally.count} startup{plural}",
                impact=f"Portfolio-wide {category.lower()} risk",
            )
        )
    return summaries
