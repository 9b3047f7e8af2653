from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

import httpx

from .cache import Payload, SnapshotCache
from .errors import StartupsFetchError
from .ingestion import parse_records
from .models import StartupRecord

logger = logging.getLogger(__name__)


class StartupsClient:
    """
    Fetches the startups listing from the analysis backend.
    """

    def __init__(
        self,
        url: str,
        token: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.token = token
        self.timeout = timeout
        self.transport = transport

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def fetch_startups(self) -> Payload:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                resp = await client.get(self.url, headers=self._headers())
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                raise StartupsFetchError(
                    f"Startups API returned {exc.response.status_code}",
                    status_code=exc.response.status_code,
                ) from exc
            except httpx.RequestError as exc:
                raise StartupsFetchError(f"Startups API unreachable: {exc}") from exc

        try:
            data = resp.json()
        except ValueError as exc:
            raise StartupsFetchError("Startups API returned invalid JSON") from exc
        if not isinstance(data, list):
            raise StartupsFetchError(f"Startups API returned {type(data).__name__}, expected a list")
        return data


@dataclass(frozen=True)
class Snapshot:
    records: List[StartupRecord]
    source: str  # "live", "cache" or "empty"


class StartupSnapshotSource:
    """
    Live fetch with the last-known-good cached payload as fallback.
    """

    def __init__(self, client: StartupsClient, cache: SnapshotCache) -> None:
        self.client = client
        self.cache = cache

    async def load(self) -> Snapshot:
        try:
            payload = await self.client.fetch_startups()
        except StartupsFetchError as exc:
            logger.warning("Falling back to cached startups: %s", exc)
            cached = await self.cache.read()
            if cached is None:
                return Snapshot(records=[], source="empty")
            return Snapshot(records=parse_records(cached), source="cache")

        try:
            await self.cache.write(payload)
        except Exception as exc:
            logger.warning("Could not persist startups snapshot: %s", exc)
        return Snapshot(records=parse_records(payload), source="live")
