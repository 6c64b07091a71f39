# -*- coding: utf-8 -*-
"""
Indicator calculations.

Pure functions computing EMA, RSI and the RSI pump/dump momentum snapshot
from a close-price series. Every returned indicator series has the same length
and index as its input; positions without enough history hold NaN.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd


# ============================================================================
# Configuration Constants
# ============================================================================

DEFAULT_RSI_PERIOD = 3
MOMENTUM_LOOKBACK = 14

PriceInput = Union[pd.Series, Sequence[float], np.ndarray]


def _as_series(series: PriceInput) -> pd.Series:
    if isinstance(series, pd.Series):
        return series.astype(float)
    return pd.Series(np.asarray(series, dtype=float))


# ============================================================================
# EMA
# ============================================================================

def compute_ema(series: PriceInput, period: int) -> pd.Series:
    """
    Calculate the Exponential Moving Average of a price series.

    The first ``period - 1`` positions are NaN. Position ``period - 1`` is
    seeded with the simple average of the first ``period`` values, after which
    ``ema[i] = close[i] * k + ema[i - 1] * (1 - k)`` with ``k = 2 / (period + 1)``.

    Parameters
    ----------
    series : pd.Series or sequence of float
        Close prices in chronological order.
    period : int
        EMA period.

    Returns
    -------
    pd.Series
        EMA values aligned with the input (empty for empty input).
    """
    if period <= 0:
        raise ValueError(f"period must be > 0, got {period}")

    closes = _as_series(series)
    if closes.empty:
        return pd.Series(dtype=float)

    values = closes.to_numpy()
    ema = np.full(len(values), np.nan)
    if len(values) < period:
        return pd.Series(ema, index=closes.index)

    k = 2.0 / (period + 1)
    ema[period - 1] = values[:period].mean()
    for i in range(period, len(values)):
        ema[i] = values[i] * k + ema[i - 1] * (1 - k)

    return pd.Series(ema, index=closes.index)


# ============================================================================
# RSI
# ============================================================================

def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    # No losses saturates RSI at 100
    rs = np.inf if avg_loss == 0 else avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def compute_rsi(series: PriceInput, period: int = DEFAULT_RSI_PERIOD) -> pd.Series:
    """
    Calculate the Relative Strength Index using Wilder smoothing.

    Parameters
    ----------
    series : pd.Series or sequence of float
        Close prices in chronological order.
    period : int, default 3
        RSI period.

    Returns
    -------
    pd.Series
        RSI values (0-100) aligned with the input. The first ``period``
        positions are NaN. Empty when the input has ``period`` or fewer values.
    """
    if period <= 0:
        raise ValueError(f"period must be > 0, got {period}")

    closes = _as_series(series)
    if len(closes) <= period:
        return pd.Series(dtype=float)

    values = closes.to_numpy()
    diffs = np.diff(values)
    rsi = np.full(len(values), np.nan)

    # Seed averages from the first `period` differences
    seed = diffs[:period]
    avg_gain = seed[seed > 0].sum() / period
    avg_loss = -seed[seed < 0].sum() / period
    rsi[period] = _rsi_from_averages(avg_gain, avg_loss)

    for i in range(period + 1, len(values)):
        diff = diffs[i - 1]
        gain = diff if diff > 0 else 0.0
        loss = -diff if diff < 0 else 0.0

        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        rsi[i] = _rsi_from_averages(avg_gain, avg_loss)

    return pd.Series(rsi, index=closes.index)


# ============================================================================
# Momentum Snapshot
# ============================================================================

class Direction(Enum):
    """Direction of an RSI window from its first to its last value."""
    PUMP = "pump"
    DUMP = "dump"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class MomentumSnapshot:
    recent_high: float
    recent_low: float
    pump_strength: float
    # Always equal to pump_strength; kept separate for the dump-side rules
    dump_strength: float
    direction: Direction
    strength: float


def momentum_snapshot(rsi: PriceInput, lookback: int = MOMENTUM_LOOKBACK) -> Optional[MomentumSnapshot]:
    """
    Summarise the last ``lookback`` RSI values as pump/dump strength.

    Extremes are taken over the defined (non-NaN) values of the window only.
    Direction compares the window's first and last values.

    Parameters
    ----------
    rsi : pd.Series or sequence of float
        RSI series, NaN where undefined.
    lookback : int, default 14
        Number of trailing positions to consider.

    Returns
    -------
    MomentumSnapshot or None
        None when the series is shorter than ``lookback``, when the window has
        no defined value, or when either window endpoint is undefined.
    """
    values = _as_series(rsi)
    if len(values) < lookback:
        return None

    window = values.iloc[-lookback:]
    defined = window.dropna()
    if defined.empty:
        return None

    start_rsi = window.iloc[0]
    end_rsi = window.iloc[-1]
    if np.isnan(start_rsi) or np.isnan(end_rsi):
        return None

    recent_high = float(defined.max())
    recent_low = float(defined.min())

    if end_rsi > start_rsi:
        direction = Direction.PUMP
    elif end_rsi < start_rsi:
        direction = Direction.DUMP
    else:
        direction = Direction.NEUTRAL

    return MomentumSnapshot(
        recent_high=recent_high,
        recent_low=recent_low,
        pump_strength=recent_high - recent_low,
        dump_strength=abs(recent_low - recent_high),
        direction=direction,
        strength=float(abs(end_rsi - start_rsi)),
    )
