# -*- coding: utf-8 -*-
"""
Market data module.

Provides the resilient Binance futures client, session windows, per-symbol
analysis and the batch scheduler that drives a scan pass.
"""

from scanner.market.binance_client import BinanceFuturesClient, UniverseFetchError
from scanner.market.sessions import SessionWindow, session_window
from scanner.market.analysis import SymbolAnalysis, TrendState, analyze_symbol, parse_klines
from scanner.market.batch_scheduler import BatchScheduler, ScanPass

__all__ = [
    'BinanceFuturesClient',
    'UniverseFetchError',
    'SessionWindow',
    'session_window',
    'SymbolAnalysis',
    'TrendState',
    'analyze_symbol',
    'parse_klines',
    'BatchScheduler',
    'ScanPass'
]
