"""Chart-ready datasets for the dashboard views.

Every function here is pure and total: empty input yields an empty dataset
(or the empty radar), and records missing the relevant field are skipped.
"""
from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..models import (
    METRIC_KEYS,
    BreakdownSlice,
    RadarChart,
    RadarPoint,
    ScoreBucket,
    StartupRecord,
    TimelinePoint,
)
from .common import as_records, round_half_up
from .filtering import local_wall_time

# (label, inclusive upper bound, color)
SCORE_BUCKETS = (
    ("0-20", 20, "#ef4444"),
    ("21-40", 40, "#f97316"),
    ("41-60", 60, "#eab308"),
    ("61-80", 80, "#84cc16"),
    ("81-100", 100, "#22c55e"),
)

RECOMMENDATION_COLORS = {
    "Strong Buy": "#10b981",
    "Buy": "#3b82f6",
    "Hold": "#f59e0b",
    "Pass": "#ef4444",
}

RISK_COLORS = {
    "Low": "#10b981",
    "Medium": "#f59e0b",
    "High": "#ef4444",
}

RADAR_LABELS = {
    "market_size": "Market",
    "traction": "Traction",
    "team": "Team",
    "product": "Product",
    "financials": "Financial",
    "competition": "Competition",
}

DEFAULT_DATE_FORMAT = "%Y-%m-%d"


def _score_bucket(score: float) -> int:
    for index, (_, upper, _) in enumerate(SCORE_BUCKETS):
        if score <= upper:
            return index
    return len(SCORE_BUCKETS) - 1


def score_distribution(records: Iterable[StartupRecord]) -> List[ScoreBucket]:
    scores = [record.overall_score for record in as_records(records) if record.is_analyzed]
    if not scores:
        return []

    counts = Counter(_score_bucket(score) for score in scores)
    return [
        ScoreBucket(range=label, count=counts[index], fill=color)
        for index, (label, _, color) in enumerate(SCORE_BUCKETS)
    ]


def recommendation_bucket(recommendation: Optional[str]) -> Optional[str]:
    if not recommendation:
        return None
    value = recommendation.lower()
    if "strong" in value or value == "strong_buy":
        return "Strong Buy"
    if value == "buy":
        return "Buy"
    if value == "hold":
        return "Hold"
    if value == "pass":
        return "Pass"
    return None


def _slices(counts: Counter, colors: Dict[str, str]) -> List[BreakdownSlice]:
    return [
        BreakdownSlice(name=name, value=counts[name], color=color)
        for name, color in colors.items()
        if counts[name] > 0
    ]


def recommendation_breakdown(records: Iterable[StartupRecord]) -> List[BreakdownSlice]:
    counts = Counter(recommendation_bucket(record.recommendation) for record in as_records(records))
    return _slices(counts, RECOMMENDATION_COLORS)


def risk_distribution(records: Iterable[StartupRecord]) -> List[BreakdownSlice]:
    levels = {name.lower(): name for name in RISK_COLORS}
    counts = Counter(
        levels.get(record.risk_level.lower())
        for record in as_records(records)
        if record.risk_level
    )
    return _slices(counts, RISK_COLORS)


def activity_timeline(
    records: Iterable[StartupRecord],
    date_format: str = DEFAULT_DATE_FORMAT,
) -> List[TimelinePoint]:
    per_day: Counter = Counter(local_wall_time(record.created_at).date() for record in as_records(records))
    days: List[date] = sorted(per_day)
    return [TimelinePoint(date=day.strftime(date_format), count=per_day[day]) for day in days]


def average_metrics_radar(records: Iterable[StartupRecord]) -> RadarChart:
    measured = [
        record.effective_metrics
        for record in as_records(records)
        if record.is_analyzed and record.effective_metrics
    ]
    if not measured:
        return RadarChart()

    count = len(measured)
    averages = {
        key: round_half_up(sum(getattr(metrics, key) for metrics in measured) / count)
        for key in METRIC_KEYS
    }
    data = [RadarPoint(metric=RADAR_LABELS[key], value=averages[key]) for key in METRIC_KEYS]
    avg_score = round_half_up(sum(averages.values()) / len(averages))
    return RadarChart(data=data, avg_score=avg_score)
