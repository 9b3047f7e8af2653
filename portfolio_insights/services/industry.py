from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from ..models import IndustryBreakdown, StartupRecord
from .common import as_records, round_half_up


@dataclass
class _IndustryTally:
    label: str
    scores: List[float] = field(default_factory=list)

    def summary(self) -> IndustryBreakdown:
        return IndustryBreakdown(
            industry=self.label,
            count=len(self.scores),
            avg_score=round_half_up(sum(self.scores) / len(self.scores)),
        )


def _industry_key(record: StartupRecord) -> Optional[str]:
    if not record.industry or not record.industry.strip():
        return None
    return record.industry.strip().lower()


def industry_breakdown(records: Iterable[StartupRecord]) -> List[IndustryBreakdown]:
    """Count and mean score per industry over analyzed records.

    Industries match case-insensitively and are labelled with the first
    spelling seen. Records without an industry are left out.
    """
    tallies: Dict[str, _IndustryTally] = {}
    for record in as_records(records):
        key = _industry_key(record)
        if key is None:
            continue
        tally = tallies.setdefault(key, _IndustryTally(label=record.industry.strip()))
        tally.scores.append(record.overall_score or 0)
    return [tally.summary() for tally in tallies.values()]


def industry_metrics(records: Iterable[StartupRecord], industry: str) -> Optional[IndustryBreakdown]:
    """Benchmark for one industry, or ``None`` when no record matches."""
    wanted = (industry or "").strip().lower()
    if not wanted:
        return None
    matches = [record for record in as_records(records) if _industry_key(record) == wanted]
    if not matches:
        return None
    tally = _IndustryTally(label=industry.strip(), scores=[r.overall_score or 0 for r in matches])
    return tally.summary()
