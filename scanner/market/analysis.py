# -*- coding: utf-8 -*-
"""
Per-symbol market analysis.

Turns raw klines and the 24h ticker of one symbol into a SymbolAnalysis record
holding the close series, RSI series and candle-derived context.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, TYPE_CHECKING

import numpy as np
import pandas as pd

from scanner.signals.indicators import compute_ema, compute_rsi
from scanner.market.sessions import session_window

if TYPE_CHECKING:
    from scanner.market.binance_client import BinanceFuturesClient


logger = logging.getLogger(__name__)


RSI_PERIOD = 14
EMA_FAST = 14
EMA_MID = 70
EMA_SLOW = 200

KLINE_COLUMNS = ['timestamp', 'open', 'high', 'low', 'close', 'volume']


@dataclass(frozen=True)
class TrendState:
    trend: str  # 'bullish' or 'bearish'
    type: str  # 'support' or 'resistance'
    crossover_price: float


@dataclass(frozen=True)
class SymbolAnalysis:
    """Analysis result of one symbol for one scan pass."""
    symbol: str
    closes: pd.Series
    rsi: pd.Series
    price_change_percent: float
    trend_state: TrendState
    highest_volume_color_prev: Optional[str]  # 'green', 'red' or None
    prev_closed_green: Optional[bool]
    prev_closed_red: Optional[bool]

    @property
    def last_price(self) -> Optional[float]:
        if self.closes.empty:
            return None
        return float(self.closes.iloc[-1])


def parse_klines(raw: List[List[Any]]) -> pd.DataFrame:
    """
    Parse Binance kline records into a candle DataFrame.

    Only the first six fields (open time, open, high, low, close, volume) of
    each record are used.

    Parameters
    ----------
    raw : list of list
        Kline records as returned by the klines endpoint.

    Returns
    -------
    pd.DataFrame
        Columns: timestamp (int ms), open, high, low, close, volume (float).
    """
    if not raw:
        return pd.DataFrame(columns=KLINE_COLUMNS)

    df = pd.DataFrame([record[:6] for record in raw], columns=KLINE_COLUMNS)
    df['timestamp'] = df['timestamp'].astype('int64')
    for col in ['open', 'high', 'low', 'close', 'volume']:
        df[col] = df[col].astype(float)
    return df


def _last_defined(series: pd.Series) -> float:
    if series.empty or np.isnan(series.iloc[-1]):
        return 0.0
    return float(series.iloc[-1])


def main_trend(closes: pd.Series) -> TrendState:
    """Trend from the last EMA70 vs EMA200 (an undefined EMA counts as 0)."""
    last_mid = _last_defined(compute_ema(closes, EMA_MID))
    last_slow = _last_defined(compute_ema(closes, EMA_SLOW))
    bullish = last_mid >= last_slow
    return TrendState(
        trend='bullish' if bullish else 'bearish',
        type='support' if bullish else 'resistance',
        crossover_price=float(closes.iloc[-1]) if not closes.empty else 0.0,
    )


def highest_volume_color(candles: pd.DataFrame, start_ms: int, end_ms: int) -> Optional[str]:
    """
    Colour of the highest-volume candle opened within [start_ms, end_ms].

    Returns 'green' if it closed above its open, 'red' otherwise, or None if
    no candle falls in the range. Ties go to the earliest candle.
    """
    in_session = candles[(candles['timestamp'] >= start_ms) & (candles['timestamp'] <= end_ms)]
    if in_session.empty:
        return None
    top = in_session.loc[in_session['volume'].idxmax()]
    return 'green' if top['close'] > top['open'] else 'red'


def previous_candle_colors(candles: pd.DataFrame):
    """(closed_green, closed_red) of the second-to-last candle, or (None, None)."""
    if len(candles) < 2:
        return None, None
    prev = candles.iloc[-2]
    return bool(prev['close'] > prev['open']), bool(prev['close'] < prev['open'])


def build_analysis(symbol: str, raw_klines: List[List[Any]], ticker: dict,
                   timeframe: str, now_ms: Optional[int] = None) -> SymbolAnalysis:
    """Build a SymbolAnalysis from already fetched klines and ticker."""
    candles = parse_klines(raw_klines)
    closes = candles['close']

    window = session_window(timeframe, now_ms)
    prev_green, prev_red = previous_candle_colors(candles)

    return SymbolAnalysis(
        symbol=symbol,
        closes=closes,
        rsi=compute_rsi(closes, RSI_PERIOD),
        price_change_percent=float(ticker['priceChangePercent']),
        trend_state=main_trend(closes),
        highest_volume_color_prev=highest_volume_color(
            candles, window.prev_session_start, window.prev_session_end),
        prev_closed_green=prev_green,
        prev_closed_red=prev_red,
    )


def analyze_symbol(client: "BinanceFuturesClient", symbol: str, timeframe: str,
                   kline_limit: int = 500, now_ms: Optional[int] = None) -> Optional[SymbolAnalysis]:
    """
    Fetch klines then the 24h ticker for a symbol and analyse them.

    Parameters
    ----------
    client : BinanceFuturesClient
        Client used for both requests
    symbol : str
        Symbol (e.g., "BTCUSDT")
    timeframe : str
        Kline interval ('15m', '4h', '1d')
    kline_limit : int, default 500
        Number of klines to request
    now_ms : int, optional
        Current time for the session window (defaults to wall clock)

    Returns
    -------
    SymbolAnalysis or None
        None if either request yields no data (symbol skipped).
    """
    raw = client.get_klines(symbol, timeframe, limit=kline_limit)
    if raw is None:
        logger.debug(f"No klines for {symbol}, skipping")
        return None

    ticker = client.get_ticker_24h(symbol)
    if ticker is None:
        logger.debug(f"No 24h ticker for {symbol}, skipping")
        return None

    return build_analysis(symbol, raw, ticker, timeframe, now_ms)
