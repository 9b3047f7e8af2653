from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

import redis
from redis import asyncio as redis_async

from .config import Settings

logger = logging.getLogger(__name__)

Payload = List[Dict[str, Any]]


class SnapshotCache(ABC):
    """
    Last-known-good copy of the raw startups payload. No expiry: a successful
    fetch simply replaces it.

    Backends are awaited from request handlers, so none of them may block
    the event loop.
    """

    @abstractmethod
    async def read(self) -> Optional[Payload]:
        raise NotImplementedError

    @abstractmethod
    async def write(self, payload: Payload) -> None:
        raise NotImplementedError


def _decode(raw: Optional[str], where: str) -> Optional[Payload]:
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Failed to parse cached startups data from %s: %s", where, exc)
        return None
    if not isinstance(data, list):
        logger.error("Cached startups data in %s is not a list", where)
        return None
    return data


class InMemorySnapshotCache(SnapshotCache):
    def __init__(self) -> None:
        self._payload: Optional[Payload] = None

    async def read(self) -> Optional[Payload]:
        return None if self._payload is None else list(self._payload)

    async def write(self, payload: Payload) -> None:
        self._payload = list(payload)


class FileSnapshotCache(SnapshotCache):
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def read(self) -> Optional[Payload]:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, payload: Payload) -> None:
        await asyncio.to_thread(self._write_sync, payload)

    def _read_sync(self) -> Optional[Payload]:
        if not self.path.exists():
            return None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Could not read snapshot %s: %s", self.path, exc)
            return None
        return _decode(raw, str(self.path))

    def _write_sync(self, payload: Payload) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload), encoding="utf-8")
        tmp.replace(self.path)


class RedisSnapshotCache(SnapshotCache):
    def __init__(self, client: redis_async.Redis, key: str = "startups") -> None:
        self._redis = client
        self.key = f"portfolio:snapshot:{key}"

    @classmethod
    def from_url(cls, url: str, key: str = "startups") -> "RedisSnapshotCache":
        return cls(redis_async.from_url(url, encoding="utf-8", decode_responses=True), key=key)

    async def read(self) -> Optional[Payload]:
        try:
            raw = await self._redis.get(self.key)
        except redis.RedisError as exc:
            logger.warning("Snapshot cache unavailable: %s", exc)
            return None
        return _decode(raw, self.key)

    async def write(self, payload: Payload) -> None:
        await self._redis.set(self.key, json.dumps(payload))


def build_snapshot_cache(settings: Settings) -> SnapshotCache:
    backend = settings.SNAPSHOT_BACKEND.lower()
    if backend == "memory":
        return InMemorySnapshotCache()
    if backend == "file":
        return FileSnapshotCache(Path(settings.SNAPSHOT_PATH))
    if backend == "redis":
        return RedisSnapshotCache.from_url(settings.REDIS_URL, key=settings.SNAPSHOT_KEY)
    raise ValueError(f"Unknown snapshot backend: {settings.SNAPSHOT_BACKEND}")
