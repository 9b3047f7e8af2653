from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List

from pydantic import ValidationError

from .models import StartupRecord

logger = logging.getLogger(__name__)


def parse_records(items: Any) -> List[StartupRecord]:
    if not isinstance(items, list):
        logger.warning("Startups payload is %s, expected a list", type(items).__name__)
        return []

    records: List[StartupRecord] = []
    for item in items:
        try:
            records.append(StartupRecord.model_validate(item))
        except ValidationError as exc:
            startup_id = item.get("id") if isinstance(item, dict) else None
            logger.warning(
                "Skipping malformed startup record %s: %s error(s), first: %s",
                startup_id,
                exc.error_count(),
                exc.errors()[0]["msg"],
            )
    return records


def load_records(path: Path) -> List[StartupRecord]:
    with path.open("r", encoding="utf-8") as handle:
        items = json.load(handle)
    return parse_records(items)
