from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, List, Optional, Union

from pydantic import Field

from .memo import DerivationMemo
from .models import (
    BreakdownSlice,
    CamelModel,
    IndustryBreakdown,
    MetricCard,
    MetricScores,
    PortfolioInvestment,
    PortfolioOverview,
    RadarChart,
    RecentAnalysis,
    RiskFlagSummary,
    ScoreBucket,
    StartupRecord,
    TimelinePoint,
)
from .services import charts
from .services.common import as_records, round_half_up, round_to_tenth
from .services.filtering import TimePeriod, coerce_period, filter_by_time_period, select_analyzed
from .services.industry import industry_breakdown
from .services.investment import calculate_portfolio_investment
from .services.metrics import build_metric_cards, calculate_aggregate_metrics
from .services.risk import calculate_aggregate_risk_flags

logger = logging.getLogger(__name__)


class DashboardSummary(CamelModel):
    period: TimePeriod
    generated_at: datetime
    data_source: str = "live"
    overview: PortfolioOverview
    metrics: MetricScores
    metric_cards: List[MetricCard] = Field(default_factory=list)
    risk_flags: List[RiskFlagSummary] = Field(default_factory=list)
    investment: PortfolioInvestment
    score_distribution: List[ScoreBucket] = Field(default_factory=list)
    recommendation_breakdown: List[BreakdownSlice] = Field(default_factory=list)
    risk_distribution: List[BreakdownSlice] = Field(default_factory=list)
    activity_timeline: List[TimelinePoint] = Field(default_factory=list)
    average_metrics: RadarChart
    industry_breakdown: List[IndustryBreakdown] = Field(default_factory=list)
    recent_analyses: List[RecentAnalysis] = Field(default_factory=list)


def build_overview(analyzed: Iterable[StartupRecord]) -> PortfolioOverview:
    analyzed = list(analyzed)
    total = len(analyzed)
    if total == 0:
        return PortfolioOverview()

    avg_score = sum(record.overall_score or 0 for record in analyzed) / total
    high_risk = sum(1 for record in analyzed if record.risk_level == "High")
    return PortfolioOverview(
        total_analyzed=total,
        avg_score=round_to_tenth(avg_score),
        high_risk_count=high_risk,
        high_risk_percentage=round_half_up(high_risk / total * 100),
    )


def build_recent_analyses(analyzed: Iterable[StartupRecord], limit: int) -> List[RecentAnalysis]:
    return [
        RecentAnalysis(
            id=record.id,
            name=record.name,
            industry=record.industry or "Not specified",
            overall_score=record.overall_score,
            status="completed" if record.overall_score else "pending",
        )
        for record in list(analyzed)[:limit]
    ]


class PortfolioAggregator:
    """
    Builds the dashboard summary for one snapshot and time window.

    Each derivation is memoized on the record tuple it reads, so repeated
    calls over an unchanged snapshot reuse earlier results.
    """

    def __init__(
        self,
        memo: Optional[DerivationMemo] = None,
        clock: Optional[Callable[[], datetime]] = None,
        timeline_date_format: str = charts.DEFAULT_DATE_FORMAT,
        recent_limit: int = 4,
    ) -> None:
        self.memo = memo if memo is not None else DerivationMemo()
        self.clock = clock or datetime.now
        self.timeline_date_format = timeline_date_format
        self.recent_limit = recent_limit

    def summarize(
        self,
        records: Iterable[StartupRecord],
        period: Union[TimePeriod, str] = TimePeriod.MONTH,
        data_source: str = "live",
    ) -> DashboardSummary:
        period = coerce_period(period)
        records = as_records(records)
        filtered = filter_by_time_period(records, period, now=self.clock())
        analyzed = select_analyzed(filtered)
        logger.info(
            "Summarizing %s of %s startups for period=%s (%s analyzed)",
            len(filtered),
            len(records),
            period.value,
            len(analyzed),
        )

        memo = self.memo
        metrics = memo.get_or_compute("metrics", analyzed, lambda: calculate_aggregate_metrics(analyzed))
        return DashboardSummary(
            period=period,
            generated_at=datetime.now(timezone.utc),
            data_source=data_source,
            overview=memo.get_or_compute("overview", analyzed, lambda: build_overview(analyzed)),
            metrics=metrics,
            metric_cards=build_metric_cards(metrics, len(analyzed)),
            risk_flags=memo.get_or_compute(
                "risk_flags", analyzed, lambda: calculate_aggregate_risk_flags(analyzed)
            ),
            investment=memo.get_or_compute(
                "investment", analyzed, lambda: calculate_portfolio_investment(analyzed)
            ),
            score_distribution=memo.get_or_compute(
                "score_distribution", analyzed, lambda: charts.score_distribution(analyzed)
            ),
            recommendation_breakdown=memo.get_or_compute(
                "recommendation_breakdown", analyzed, lambda: charts.recommendation_breakdown(analyzed)
            ),
            risk_distribution=memo.get_or_compute(
                "risk_distribution", analyzed, lambda: charts.risk_distribution(analyzed)
            ),
            activity_timeline=memo.get_or_compute(
                "activity_timeline",
                filtered,
                lambda: charts.activity_timeline(filtered, self.timeline_date_format),
            ),
            average_metrics=memo.get_or_compute(
                "average_metrics", analyzed, lambda: charts.average_metrics_radar(analyzed)
            ),
            industry_breakdown=memo.get_or_compute(
                "industry_breakdown", analyzed, lambda: industry_breakdown(analyzed)
            ),
            recent_analyses=build_recent_analyses(analyzed, self.recent_limit),
        )
