import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Query

from portfolio_insights.cache import build_snapshot_cache
from portfolio_insights.client import StartupSnapshotSource, StartupsClient
from portfolio_insights.config import Settings, get_settings
from portfolio_insights.ingestion import parse_records
from portfolio_insights.memo import DerivationMemo
from portfolio_insights.pipeline import DashboardSummary, PortfolioAggregator
from portfolio_insights.services.filtering import TimePeriod

logger = logging.getLogger("portfolio_insights")
settings = get_settings()
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title=settings.APP_NAME, version=settings.VERSION)


# ---- DI Setup ----
def get_snapshot_source(settings: Settings = Depends(get_settings)) -> StartupSnapshotSource:
    client = StartupsClient(
        url=settings.STARTUPS_API_URL,
        token=settings.API_TOKEN,
        timeout=settings.FETCH_TIMEOUT_SECONDS,
    )
    return StartupSnapshotSource(client=client, cache=build_snapshot_cache(settings))


@lru_cache()
def get_aggregator() -> PortfolioAggregator:
    # One aggregator per process so its memo survives across requests.
    return PortfolioAggregator(
        memo=DerivationMemo(maxsize=settings.MEMO_MAX_ENTRIES),
        timeline_date_format=settings.TIMELINE_DATE_FORMAT,
        recent_limit=settings.RECENT_ANALYSIS_LIMIT,
    )


def _resolve_period(period: Optional[TimePeriod]) -> TimePeriod:
    return period or settings.DEFAULT_PERIOD


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "service": settings.APP_NAME, "version": settings.VERSION}


@app.get("/dashboard", response_model=DashboardSummary)
async def dashboard(
    period: Optional[TimePeriod] = Query(None),
    source: StartupSnapshotSource = Depends(get_snapshot_source),
    aggregator: PortfolioAggregator = Depends(get_aggregator),
) -> DashboardSummary:
    snapshot = await source.load()
    if snapshot.source != "live":
        logger.info("Serving dashboard from %s snapshot", snapshot.source)
    return aggregator.summarize(snapshot.records, _resolve_period(period), data_source=snapshot.source)


@app.post("/dashboard", response_model=DashboardSummary)
async def dashboard_for_snapshot(
    startups: List[Dict[str, Any]] = Body(...),
    period: Optional[TimePeriod] = Query(None),
    aggregator: PortfolioAggregator = Depends(get_aggregator),
) -> DashboardSummary:
    records = parse_records(startups)
    return aggregator.summarize(records, _resolve_period(period), data_source="live")
