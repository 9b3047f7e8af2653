from __future__ import annotations

import math
from datetime import datetime
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Frozen model that reads and writes camelCase keys.

    Frozen models hash by value, so a tuple of records doubles as the
    memo key for derivations computed over it.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


def as_number(value: Any, default: Optional[float] = 0.0) -> Optional[float]:
    """``value`` as a finite float, or ``default`` when it is not numeric."""
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _object_or_none(value: Any) -> Any:
    return value if isinstance(value, (dict, BaseModel)) else None


def _text_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


# ---- Input snapshot ----


class MetricScores(CamelModel):
    market_size: float = 0.0
    traction: float = 0.0
    team: float = 0.0
    product: float = 0.0
    financials: float = 0.0
    competition: float = 0.0

    @field_validator("*", mode="before")
    @classmethod
    def _non_numeric_is_zero(cls, value):
        return as_number(value)


METRIC_KEYS: Tuple[str, ...] = tuple(MetricScores.model_fields)


class RiskFlag(CamelModel):
    type: str = "low"
    category: str = "Uncategorized"
    description: str = ""
    impact: Optional[str] = None

    @field_validator("type", mode="before")
    @classmethod
    def _normalize_severity(cls, value):
        if not isinstance(value, str) or not value.strip():
            return "low"
        return value.strip().lower()

    @field_validator("category", mode="before")
    @classmethod
    def _category_text(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return "Uncategorized"
        return str(value)

    @field_validator("description", mode="before")
    @classmethod
    def _description_text(cls, value):
        return "" if value is None else str(value)

    @field_validator("impact", mode="before")
    @classmethod
    def _impact_text(cls, value):
        return None if value is None else str(value)


class InvestmentRecommendation(CamelModel):
    decision: Optional[str] = None
    reasoning: Optional[str] = None
    target_investment: Optional[float] = None
    expected_return: Optional[float] = None

    @field_validator("decision", "reasoning", mode="before")
    @classmethod
    def _text_fields(cls, value):
        return _text_or_none(value)

    @field_validator("target_investment", "expected_return", mode="before")
    @classmethod
    def _non_numeric_is_missing(cls, value):
        return as_number(value, default=None)


class AnalysisData(CamelModel):
    metrics: Optional[MetricScores] = None
    risk_flags: Optional[Tuple[RiskFlag, ...]] = None
    recommendation: Optional[InvestmentRecommendation] = None

    @field_validator("metrics", "recommendation", mode="before")
    @classmethod
    def _objects_only(cls, value):
        return _object_or_none(value)

    @field_validator("risk_flags", mode="before")
    @classmethod
    def _keep_wellformed_flags(cls, value):
        # Drop flags that are not objects rather than the whole record.
        if not isinstance(value, (list, tuple)):
            return None
        return tuple(flag for flag in value if isinstance(flag, (dict, RiskFlag)))


class StartupRecord(CamelModel):
    id: str
    name: str = ""
    industry: Optional[str] = None
    stage: Optional[str] = None
    risk_level: Optional[str] = None
    recommendation: Optional[str] = None
    overall_score: Optional[float] = None
    metrics: Optional[MetricScores] = None
    analysis_data: Optional[AnalysisData] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, value):
        return value if value is None else str(value)

    @field_validator("industry", "stage", "risk_level", "recommendation", mode="before")
    @classmethod
    def _text_fields(cls, value):
        return _text_or_none(value)

    @field_validator("metrics", "analysis_data", mode="before")
    @classmethod
    def _objects_only(cls, value):
        return _object_or_none(value)

    @property
    def is_analyzed(self) -> bool:
        return self.overall_score is not None

    @property
    def analysis_metrics(self) -> Optional[MetricScores]:
        return self.analysis_data.metrics if self.analysis_data else None

    @property
    def effective_metrics(self) -> Optional[MetricScores]:
        """Flattened ``metrics`` if present, else ``analysisData.metrics``."""
        return self.metrics or self.analysis_metrics

    @property
    def risk_flags(self) -> Optional[Tuple[RiskFlag, ...]]:
        return self.analysis_data.risk_flags if self.analysis_data else None

    @property
    def investment(self) -> Optional[InvestmentRecommendation]:
        return self.analysis_data.recommendation if self.analysis_data else None


# ---- Derived outputs ----


class RiskFlagSummary(CamelModel):
    type: str
    category: str
    description: str
    impact: str


class PortfolioInvestment(CamelModel):
    total_investment: float = 0.0
    growth_percentage: float = 0.0


class ScoreBucket(CamelModel):
    range: str
    count: int
    fill: str


class BreakdownSlice(CamelModel):
    name: str
    value: int
    color: str


class TimelinePoint(CamelModel):
    date: str
    count: int


class RadarPoint(CamelModel):
    metric: str
    value: int
    full_mark: int = 100


class RadarChart(CamelModel):
    data: List[RadarPoint] = Field(default_factory=list)
    avg_score: int = 0


class MetricCard(CamelModel):
    key: str
    title: str
    description: str
    value: float
    trend: str
    trend_label: str
    category: str


class PortfolioOverview(CamelModel):
    total_analyzed: int = 0
    avg_score: float = 0.0
    high_risk_count: int = 0
    high_risk_percentage: int = 0


class RecentAnalysis(CamelModel):
    id: str
    name: str
    industry: str
    overall_score: Optional[float] = None
    status: str


class IndustryBreakdown(CamelModel):
    industry: str
    count: int
    avg_score: int
