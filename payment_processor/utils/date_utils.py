"""Date manipulation utilities"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Tuple


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def day_bounds(day: date) -> Tuple[datetime, datetime]:
    """First and last representable instant of a calendar day"""
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1) - timedelta(microseconds=1)
    return start, end


def elapsed_ms(started: float, finished: float) -> int:
    """Milliseconds between two perf_counter readings"""
    return int((finished - started) * 1000)
