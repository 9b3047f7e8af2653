from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from portfolio_insights.api.main import app, get_aggregator, get_snapshot_source, settings
from portfolio_insights.client import Snapshot
from portfolio_insights.ingestion import parse_records
from portfolio_insights.pipeline import PortfolioAggregator


def _recent(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat()


PAYLOAD = [
    {
        "id": "a",
        "name": "Alpha",
        "overallScore": 81,
        "riskLevel": "High",
        "recommendation": "Strong Buy",
        "industry": "Fintech",
        "createdAt": _recent(2),
        "analysisData": {
            "metrics": {"marketSize": 80, "traction": 70, "team": 90, "product": 60, "financials": 50, "competition": 40},
            "riskFlags": [{"type": "high", "category": "Execution", "description": "Thin team"}],
            "recommendation": {"targetInvestment": 1000000, "expectedReturn": 50},
        },
    },
    {"id": "b", "name": "Beta", "createdAt": _recent(40)},
]


class DummySource:
    def __init__(self, source: str = "live"):
        self.source = source
        self.loads = 0

    async def load(self) -> Snapshot:
        self.loads += 1
        records = parse_records(PAYLOAD) if self.source != "empty" else []
        return Snapshot(records=records, source=self.source)


@pytest.fixture()
def api():
    source = DummySource()
    aggregator = PortfolioAggregator()
    app.dependency_overrides[get_snapshot_source] = lambda: source
    app.dependency_overrides[get_aggregator] = lambda: aggregator
    with TestClient(app) as client:
        yield {"client": client, "source": source}
    app.dependency_overrides.clear()


def test_health_endpoint(api):
    resp = api["client"].get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["service"] == settings.APP_NAME


def test_dashboard_defaults_to_configured_period(api):
    resp = api["client"].get("/dashboard")
    body = resp.json()
    assert resp.status_code == 200
    assert body["period"] == settings.DEFAULT_PERIOD
    assert api["source"].loads == 1


def test_dashboard_payload_is_camel_case(api):
    body = api["client"].get("/dashboard", params={"period": "all"}).json()
    assert body["overview"]["totalAnalyzed"] == 1
    assert body["investment"] == {"totalInvestment": 1000000.0, "growthPercentage": 900.0}
    assert body["riskFlags"][0]["impact"] == "Portfolio-wide execution risk"
    assert body["recommendationBreakdown"][0]["name"] == "Strong Buy"
    assert body["averageMetrics"]["data"][0]["fullMark"] == 100
    assert len(body["activityTimeline"]) == 2
    assert body["industryBreakdown"] == [{"industry": "Fintech", "count": 1, "avgScore": 81}]


def test_dashboard_reports_cache_fallback(api):
    api["source"].source = "cache"
    body = api["client"].get("/dashboard", params={"period": "week"}).json()
    assert body["dataSource"] == "cache"
    assert body["overview"]["totalAnalyzed"] == 1
    assert len(body["activityTimeline"]) == 1


def test_dashboard_with_nothing_to_show(api):
    api["source"].source = "empty"
    body = api["client"].get("/dashboard").json()
    assert body["dataSource"] == "empty"
    assert body["scoreDistribution"] == []
    assert body["averageMetrics"] == {"data": [], "avgScore": 0}


def test_invalid_period_is_rejected(api):
    resp = api["client"].get("/dashboard", params={"period": "decade"})
    assert resp.status_code == 422


def test_posted_snapshot_is_summarized(api):
    resp = api["client"].post("/dashboard", params={"period": "month"}, json=PAYLOAD + [{"id": "broken"}])
    body = resp.json()
    assert resp.status_code == 200
    assert body["overview"]["totalAnalyzed"] == 1
    assert body["scoreDistribution"][4] == {"range": "81-100", "count": 1, "fill": "#22c55e"}
    assert api["source"].loads == 0
