# -*- coding: utf-8 -*-
"""
RSI zone signal module.

Maps the momentum snapshot of an RSI series to one of a fixed set of zone
labels. Classification is recomputed on every call and never cached.
"""

from enum import Enum
from typing import Iterable, List, Optional, TYPE_CHECKING

from scanner.signals.indicators import (
    Direction,
    MomentumSnapshot,
    momentum_snapshot,
    MOMENTUM_LOOKBACK,
    PriceInput,
)

if TYPE_CHECKING:
    from scanner.market.analysis import SymbolAnalysis


# Zone thresholds (RSI points between the window's high and low)
MAX_ZONE_MIN = 30.0
BALANCE_ZONE_RANGE = (21.0, 26.0)
LOWEST_ZONE_RANGE = (1.0, 10.0)


class SignalLabel(Enum):
    """Zone signal labels."""
    NO_DATA = "NO DATA"
    MAX_ZONE_PUMP = "MAX ZONE PUMP"
    MAX_ZONE_DUMP = "MAX ZONE DUMP"
    BALANCE_ZONE_PUMP = "BALANCE ZONE PUMP"
    BALANCE_ZONE_DUMP = "BALANCE ZONE DUMP"
    LOWEST_ZONE_PUMP = "LOWEST ZONE PUMP"
    LOWEST_ZONE_DUMP = "LOWEST ZONE DUMP"
    NO_STRONG_SIGNAL = "NO STRONG SIGNAL"


def _in_range(value: float, bounds) -> bool:
    low, high = bounds
    return low <= value <= high


def classify_snapshot(snapshot: Optional[MomentumSnapshot]) -> SignalLabel:
    """Classify an already computed momentum snapshot (first matching rule wins)."""
    if snapshot is None:
        return SignalLabel.NO_DATA

    pump = snapshot.direction == Direction.PUMP
    dump = snapshot.direction == Direction.DUMP

    if pump and snapshot.pump_strength >= MAX_ZONE_MIN:
        return SignalLabel.MAX_ZONE_PUMP
    if dump and snapshot.dump_strength >= MAX_ZONE_MIN:
        return SignalLabel.MAX_ZONE_DUMP

    if pump and _in_range(snapshot.pump_strength, BALANCE_ZONE_RANGE):
        return SignalLabel.BALANCE_ZONE_PUMP
    if dump and _in_range(snapshot.dump_strength, BALANCE_ZONE_RANGE):
        return SignalLabel.BALANCE_ZONE_DUMP

    if pump and _in_range(snapshot.pump_strength, LOWEST_ZONE_RANGE):
        return SignalLabel.LOWEST_ZONE_PUMP
    if dump and _in_range(snapshot.dump_strength, LOWEST_ZONE_RANGE):
        return SignalLabel.LOWEST_ZONE_DUMP

    return SignalLabel.NO_STRONG_SIGNAL


def classify(rsi: Optional[PriceInput]) -> SignalLabel:
    """
    Classify an RSI series into a zone signal.

    Parameters
    ----------
    rsi : pd.Series, sequence of float or None
        RSI series of a symbol.

    Returns
    -------
    SignalLabel
        NO_DATA when no momentum snapshot can be computed.
    """
    if rsi is None:
        return SignalLabel.NO_DATA
    return classify_snapshot(momentum_snapshot(rsi, MOMENTUM_LOOKBACK))


def filter_signals(analyses: Iterable["SymbolAnalysis"],
                   label: SignalLabel = SignalLabel.MAX_ZONE_PUMP) -> List["SymbolAnalysis"]:
    """Return the analyses whose RSI currently classifies as ``label``, in input order."""
    return [analysis for analysis in analyses if classify(analysis.rsi) == label]
