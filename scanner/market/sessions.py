# -*- coding: utf-8 -*-
"""
Session window calculation.

Derives the current and previous session boundaries for a timeframe. Daily
sessions run 08:00 to 07:45 (next day) on a UTC+8 reference clock; intraday
timeframes use fixed-size buckets aligned to the epoch. All boundaries are
UTC epoch milliseconds.
"""

import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Optional


SESSION_UTC_OFFSET_HOURS = 8
SESSION_OPEN = (8, 0)  # hour, minute on the reference clock
SESSION_CLOSE = (7, 45)

TIMEFRAME_MILLIS = {
    '15m': 15 * 60 * 1000,
    '4h': 4 * 60 * 60 * 1000,
}


@dataclass(frozen=True)
class SessionWindow:
    session_start: int
    session_end: int
    prev_session_start: int
    prev_session_end: int


def _reference_millis(day: date, hour: int, minute: int) -> int:
    """UTC epoch millis for ``hour:minute`` UTC+8 on the UTC calendar ``day``."""
    midnight = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
    moment = midnight + timedelta(hours=hour - SESSION_UTC_OFFSET_HOURS, minutes=minute)
    return int(moment.timestamp() * 1000)


def _daily_window(now_ms: int) -> SessionWindow:
    today = datetime.fromtimestamp(now_ms / 1000, tz=timezone.utc).date()
    yesterday = today - timedelta(days=1)
    tomorrow = today + timedelta(days=1)

    today_open = _reference_millis(today, *SESSION_OPEN)
    yesterday_open = _reference_millis(yesterday, *SESSION_OPEN)
    today_close = _reference_millis(today, *SESSION_CLOSE)

    if now_ms >= today_open:
        session_start = today_open
        session_end = _reference_millis(tomorrow, *SESSION_CLOSE)
    else:
        session_start = yesterday_open
        session_end = today_close

    # Previous session does not depend on the branch above
    return SessionWindow(
        session_start=session_start,
        session_end=session_end,
        prev_session_start=yesterday_open,
        prev_session_end=today_close,
    )


def session_window(timeframe: str, now_ms: Optional[int] = None) -> SessionWindow:
    """
    Compute session boundaries for ``timeframe`` at ``now_ms``.

    Parameters
    ----------
    timeframe : str
        '1d', '15m' or '4h'.
    now_ms : int, optional
        Current time as UTC epoch milliseconds. Defaults to the wall clock.

    Returns
    -------
    SessionWindow
        Current and previous session boundaries.

    Raises
    ------
    ValueError
        If the timeframe is not supported.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)

    if timeframe == '1d':
        return _daily_window(now_ms)

    tf_millis = TIMEFRAME_MILLIS.get(timeframe)
    if tf_millis is None:
        raise ValueError(f"Unsupported timeframe: {timeframe}")

    session_start = (now_ms // tf_millis) * tf_millis
    return SessionWindow(
        session_start=session_start,
        session_end=session_start + tf_millis,
        prev_session_start=session_start - tf_millis,
        prev_session_end=session_start,
    )
