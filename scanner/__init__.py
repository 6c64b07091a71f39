# -*- coding: utf-8 -*-
"""
RSI pump/dump zone scanner for Binance USD-M futures symbols.

Fetches candles and 24h tickers for the whole symbol universe in rate-limited
batches, computes EMA/RSI indicators and classifies each symbol into a
momentum zone.
"""

__version__ = "0.1.0"
