"""
Timezone and calendar period utilities.

This module centralises all timezone handling and calendar bucketing.
The analytics use these helpers to decide which local day a trade
belongs to and where the enclosing week, month or year begins.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Tuple
import pandas as pd

PERIODS = ('daily', 'weekly', 'monthly', 'yearly')


def to_timestamp(ts) -> pd.Timestamp:
    """Coerce a datetime, string or `pandas.Timestamp` into a `pandas.Timestamp`."""
    if isinstance(ts, pd.Timestamp):
        return ts
    return pd.Timestamp(ts)


def to_timezone(ts, tz_name: Optional[str]) -> pd.Timestamp:
    """Convert a timestamp to local wall-clock time.

    With a timezone name, naive timestamps are assumed to be in UTC
    before conversion and aware ones are converted.  Without one, aware
    timestamps are converted to the system's local time and naive ones
    are taken as already local.  The result is always naive.
    """
    ts = to_timestamp(ts)
    if tz_name:
        if ts.tzinfo is None:
            ts = ts.tz_localize("UTC")
        return ts.tz_convert(tz_name).tz_localize(None)
    if ts.tzinfo is not None:
        return pd.Timestamp(ts.to_pydatetime().astimezone().replace(tzinfo=None))
    return ts


def local_date(ts, tz_name: Optional[str]) -> date:
    """Return the calendar date of `ts` in the given timezone."""
    return to_timezone(ts, tz_name).date()


def local_now(now=None, tz_name: Optional[str] = None) -> pd.Timestamp:
    """Return the current local time, or `now` converted to local time."""
    if now is None:
        if tz_name:
            return pd.Timestamp.now(tz=tz_name).tz_localize(None)
        return pd.Timestamp(datetime.now())
    return to_timezone(now, tz_name)


def period_start(day: date, period: str) -> date:
    """Return the first date of the period containing `day`.

    Weeks follow ISO conventions and start on Monday.

    Raises
    ------
    ValueError
        If `period` is not one of ``daily``, ``weekly``, ``monthly`` or
        ``yearly``.
    """
    if period == 'daily':
        return day
    if period == 'weekly':
        return day - timedelta(days=day.weekday())
    if period == 'monthly':
        return day.replace(day=1)
    if period == 'yearly':
        return day.replace(month=1, day=1)
    raise ValueError(f"Unknown period {period!r}; expected one of {', '.join(PERIODS)}")


def period_range(now: pd.Timestamp, period: str) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """Return the local ``[start, end)`` range from the period start to the end of today."""
    start = pd.Timestamp(period_start(now.date(), period))
    end = pd.Timestamp(now.date()) + pd.Timedelta(days=1)
    return start, end
