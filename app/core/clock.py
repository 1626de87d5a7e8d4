# Time sources

from datetime import datetime, timedelta, timezone
from typing import Callable
import threading

Clock = Callable[[], datetime]

_stamp_lock = threading.Lock()
_last_stamp = datetime.min.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def insertion_stamp() -> datetime:
    """
    Strictly increasing UTC timestamp used as ``created_at``.

    Rows created within the same microsecond, or after the wall clock steps
    back, still sort in the order this process created them.
    """
    global _last_stamp
    with _stamp_lock:
        now = utcnow()
        if now <= _last_stamp:
            now = _last_stamp + timedelta(microseconds=1)
        _last_stamp = now
        return now


def ensure_utc(value: datetime) -> datetime:
    """Normalize to aware UTC. Naive values (SQLite round-trips) are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def get_clock() -> Clock:
    """Dependency returning the clock used for time-based rules"""
    return utcnow
