# -*- coding: utf-8 -*-
"""
Signal modules for the scanner.

Pure indicator and classification functions that consume price/RSI series and
know nothing about fetching or scheduling.
"""

from scanner.signals.indicators import (
    Direction,
    MomentumSnapshot,
    compute_ema,
    compute_rsi,
    momentum_snapshot,
    DEFAULT_RSI_PERIOD,
    MOMENTUM_LOOKBACK,
)
from scanner.signals.zone_signal import (
    SignalLabel,
    classify,
    classify_snapshot,
    filter_signals,
    MAX_ZONE_MIN,
    BALANCE_ZONE_RANGE,
    LOWEST_ZONE_RANGE,
)

__all__ = [
    'Direction',
    'MomentumSnapshot',
    'compute_ema',
    'compute_rsi',
    'momentum_snapshot',
    'SignalLabel',
    'classify',
    'classify_snapshot',
    'filter_signals',
    'DEFAULT_RSI_PERIOD',
    'MOMENTUM_LOOKBACK',
    'MAX_ZONE_MIN',
    'BALANCE_ZONE_RANGE',
    'LOWEST_ZONE_RANGE',
]
