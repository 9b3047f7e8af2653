from __future__ import annotations

import enum
import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional, Tuple, Union

from ..models import StartupRecord
from .common import as_records

logger = logging.getLogger(__name__)


class TimePeriod(str, enum.Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


WEEK_DAYS = 7
MONTH_DAYS = 30


def local_wall_time(moment: datetime) -> datetime:
    """Naive local wall-clock time; naive input is already taken as local."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def coerce_period(period: Union[TimePeriod, str]) -> TimePeriod:
    try:
        return TimePeriod(period)
    except ValueError:
        logger.warning("Unknown time period %r, showing all records", period)
        return TimePeriod.ALL


def period_cutoff(period: Union[TimePeriod, str], now: Optional[datetime] = None) -> Optional[datetime]:
    period = coerce_period(period)
    if period is TimePeriod.ALL:
        return None

    current = local_wall_time(now) if now is not None else datetime.now()
    if period is TimePeriod.TODAY:
        return current.replace(hour=0, minute=0, second=0, microsecond=0)
    if period is TimePeriod.WEEK:
        return current - timedelta(days=WEEK_DAYS)
    return current - timedelta(days=MONTH_DAYS)


def filter_by_time_period(
    records: Iterable[StartupRecord],
    period: Union[TimePeriod, str],
    now: Optional[datetime] = None,
) -> Tuple[StartupRecord, ...]:
    records = as_records(records)
    cutoff = period_cutoff(period, now)
    if cutoff is None:
        return records
    return tuple(record for record in records if local_wall_time(record.created_at) >= cutoff)


def select_analyzed(records: Iterable[StartupRecord]) -> Tuple[StartupRecord, ...]:
    return tuple(record for record in as_records(records) if record.is_analyzed)
