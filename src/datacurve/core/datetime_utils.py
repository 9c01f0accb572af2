from __future__ import annotations
from datetime import datetime

import pandas as pd


DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"


def drop_timezone_preserving_wall(value):
    """Return ``value`` without any timezone information, preserving wall time."""
    if value is None or value is pd.NaT:
        return pd.NaT
    if isinstance(value, pd.Timestamp):
        if value.tzinfo is not None:
            return pd.Timestamp(value.to_pydatetime().replace(tzinfo=None))
        return value
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.replace(tzinfo=None)
        return value
    return value


def format_date(value) -> str:
    """Calendar date of ``value`` as ``yyyy-MM-dd`` (wall clock, no conversion)."""
    return pd.Timestamp(value).strftime(DATE_FORMAT)


def format_time(value) -> str:
    """Clock time of ``value``; sub-second precision is kept when present."""
    ts = pd.Timestamp(value)
    if ts.microsecond:
        return ts.strftime(TIME_FORMAT + ".%f")
    return ts.strftime(TIME_FORMAT)


__all__ = [
    "DATE_FORMAT",
    "TIME_FORMAT",
    "drop_timezone_preserving_wall",
    "format_date",
    "format_time",
]
