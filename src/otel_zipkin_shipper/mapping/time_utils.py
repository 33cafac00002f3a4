"""Timestamp conversion between SDK nanoseconds, datetimes and Zipkin microseconds.

The OpenTelemetry SDK records span and event times as integer nanoseconds since
the Unix epoch. Models in this package carry timezone-aware UTC datetimes, and
the Zipkin v2 wire format expects integer microseconds.

Public Functions:
    epoch_ns_to_dt: Convert epoch nanoseconds to UTC-aware datetime
    dt_to_epoch_us: Convert a datetime to epoch microseconds
    duration_to_us: Convert a timedelta to whole microseconds

Design Invariant:
    Naive datetimes are interpreted as UTC; all produced datetimes are
    UTC-aware.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

__all__ = ["epoch_ns_to_dt", "dt_to_epoch_us", "duration_to_us"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def epoch_ns_to_dt(ns: int) -> datetime:
    """Convert epoch nanoseconds to a timezone-aware UTC datetime.

    Sub-microsecond precision is truncated; Zipkin cannot represent it.
    """
    return _EPOCH + timedelta(microseconds=ns // 1000)


def dt_to_epoch_us(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return duration_to_us(dt - _EPOCH)


def duration_to_us(delta: timedelta) -> int:
    # timedelta arithmetic is exact at microsecond resolution
    return (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
