from __future__ import annotations

from typing import Iterable, List

from ..models import METRIC_KEYS, MetricCard, MetricScores, StartupRecord
from .common import as_records

# (key, title, description) in dashboard order
METRIC_CARDS = (
    ("market_size", "Market Size", "Average market potential score"),
    ("traction", "Traction", "Average traction score"),
    ("team", "Team Quality", "Average team strength score"),
    ("product", "Product", "Average product innovation score"),
    ("financials", "Financials", "Average financial health score"),
    ("competition", "Competition", "Average competitive position"),
)


def calculate_aggregate_metrics(records: Iterable[StartupRecord]) -> MetricScores:
    measured = [record.analysis_metrics for record in as_records(records) if record.analysis_metrics]
    if not measured:
        return MetricScores()

    count = len(measured)
    averages = {
        key: sum(getattr(metrics, key) for metrics in measured) / count
        for key in METRIC_KEYS
    }
    return MetricScores(**averages)


def metric_category(value: float) -> str:
    if value >= 80:
        return "success"
    if value >= 60:
        return "primary"
    if value >= 40:
        return "warning"
    return "danger"


def metric_trend(value: float) -> str:
    # Score-based heuristic until historical snapshots are kept.
    if value >= 75:
        return "up"
    if value <= 50:
        return "down"
    return "neutral"


def build_metric_cards(metrics: MetricScores, analyzed_count: int) -> List[MetricCard]:
    label = f"{analyzed_count} startup{'' if analyzed_count == 1 else 's'}"
    cards: List[MetricCard] = []
    for key, title, description in METRIC_CARDS:
        value = getattr(metrics, key)
        cards.append(
            MetricCard(
                key=key,
                title=title,
                description=description,
                value=value,
                trend=metric_trend(value),
                trend_label=label,
                category=metric_category(value),
            )
        )
    return cards
