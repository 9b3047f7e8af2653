from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any, Tuple

from pydantic import BaseModel

from ..models import StartupRecord

logger = logging.getLogger(__name__)


def as_records(records: Any) -> Tuple[StartupRecord, ...]:
    """Return ``records`` as a tuple, treating non-collection input as empty."""
    if isinstance(records, tuple):
        return records
    if records is None or isinstance(records, (str, bytes, Mapping, BaseModel)) or not isinstance(records, Iterable):
        if records is not None:
            logger.warning("Expected a collection of startup records, got %s", type(records).__name__)
        return ()
    return tuple(records)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_to_tenth(value: float) -> float:
    return math.floor(value * 10 + 0.5) / 10
