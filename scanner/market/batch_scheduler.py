# -*- coding: utf-8 -*-
"""
Batch ingestion scheduler.

Discovers the symbol universe once per pass, then analyses it in fixed-size
batches separated by a delay. Symbols inside a batch are processed
concurrently; results are appended only after the whole batch settles.
Starting a new pass (e.g. on a timeframe change) invalidates the previous one.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional

from scanner.config import ScannerConfig
from scanner.market.binance_client import BinanceFuturesClient, UniverseFetchError
from scanner.market.analysis import SymbolAnalysis, analyze_symbol
from scanner.signals.zone_signal import SignalLabel, filter_signals


logger = logging.getLogger(__name__)


@dataclass
class ScanPass:
    """State of one sweep over the symbol universe for a timeframe."""
    generation: int
    timeframe: str
    symbols: List[str] = field(default_factory=list)
    cursor: int = 0
    results: List[SymbolAnalysis] = field(default_factory=list)
    failed: bool = False
    done: threading.Event = field(default_factory=threading.Event)

    @property
    def progress(self) -> float:
        if not self.symbols:
            return 0.0
        return min(self.cursor, len(self.symbols)) / len(self.symbols)


class BatchScheduler:
    """Runs rate-limited scan passes and holds the results of the current one."""

    def __init__(self, client: BinanceFuturesClient, config: Optional[ScannerConfig] = None,
                 analyze: Callable[..., Optional[SymbolAnalysis]] = analyze_symbol):
        """
        Initialize scheduler.

        Parameters
        ----------
        client : BinanceFuturesClient
            Client used for discovery and per-symbol requests
        config : ScannerConfig, optional
            Batch size, batch interval, quote asset and kline limit
        analyze : callable, default analyze_symbol
            Per-symbol fetch-and-analyse function
        """
        self.client = client
        self.config = config or ScannerConfig()
        self._analyze = analyze

        self._lock = threading.Lock()
        self._generation = 0
        self._active: Optional[ScanPass] = None
        self._timer: Optional[threading.Timer] = None
        self._loading = False
        self._last_updated: Optional[str] = None

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def results(self) -> List[SymbolAnalysis]:
        with self._lock:
            return list(self._active.results) if self._active else []

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def last_updated(self) -> Optional[str]:
        return self._last_updated

    @property
    def timeframe(self) -> Optional[str]:
        return self._active.timeframe if self._active else None

    @property
    def current_pass(self) -> Optional[ScanPass]:
        return self._active

    def signals(self, label: SignalLabel = SignalLabel.MAX_ZONE_PUMP) -> List[SymbolAnalysis]:
        """Analyses of the current pass classifying as ``label``."""
        return filter_signals(self.results, label)

    # ------------------------------------------------------------------
    # Pass control
    # ------------------------------------------------------------------

    def start(self, timeframe: Optional[str] = None) -> ScanPass:
        """Start a new pass, abandoning any pass in flight."""
        timeframe = timeframe or self.config.timeframe
        with self._lock:
            self._cancel_locked()
            scan_pass = ScanPass(generation=self._generation, timeframe=timeframe)
            self._active = scan_pass
            self._loading = True
            self._last_updated = None

        logger.info(f"Starting scan pass #{scan_pass.generation} for {timeframe}")
        self._schedule(scan_pass, 0.0)
        return scan_pass

    def cancel(self):
        """Invalidate the pass in flight; it performs no further writes."""
        with self._lock:
            self._cancel_locked()
            self._loading = False

    def _cancel_locked(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._active is not None:
            self._active.done.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current pass completes, fails or is cancelled."""
        scan_pass = self._active
        if scan_pass is None:
            return True
        return scan_pass.done.wait(timeout)

    def _is_current(self, scan_pass: ScanPass) -> bool:
        return scan_pass.generation == self._generation

    def _schedule(self, scan_pass: ScanPass, delay: float):
        timer = threading.Timer(delay, self._process_batch, args=(scan_pass,))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _finish(self, scan_pass: ScanPass, failed: bool = False):
        scan_pass.failed = failed
        self._loading = False
        scan_pass.done.set()

    # ------------------------------------------------------------------
    # Batch processing
    # ------------------------------------------------------------------

    def _discover(self, scan_pass: ScanPass) -> bool:
        try:
            symbols = self.client.get_exchange_symbols(self.config.quote_asset)
        except UniverseFetchError as e:
            logger.error(f"Cannot proceed with scan pass #{scan_pass.generation}: {e}")
            with self._lock:
                if self._is_current(scan_pass):
                    self._finish(scan_pass, failed=True)
            return False

        with self._lock:
            if not self._is_current(scan_pass):
                return False
            scan_pass.symbols = symbols
        logger.info(f"Discovered {len(symbols)} {self.config.quote_asset} symbols")
        return True

    def _analyze_safely(self, symbol: str, timeframe: str) -> Optional[SymbolAnalysis]:
        try:
            return self._analyze(self.client, symbol, timeframe, kline_limit=self.config.kline_limit)
        except Exception as e:
            logger.error(f"Dropping {symbol} after unrecoverable error: {e}", exc_info=True)
            return None

    def _process_batch(self, scan_pass: ScanPass):
        if not self._is_current(scan_pass):
            return

        if not scan_pass.symbols and not self._discover(scan_pass):
            return

        batch_size = self.config.batch_size
        batch = scan_pass.symbols[scan_pass.cursor:scan_pass.cursor + batch_size]

        analyses: List[SymbolAnalysis] = []
        if batch:
            with ThreadPoolExecutor(max_workers=len(batch)) as executor:
                futures = [executor.submit(self._analyze_safely, symbol, scan_pass.timeframe)
                           for symbol in batch]
                analyses = [f.result() for f in futures]
            analyses = [a for a in analyses if a is not None]

        with self._lock:
            if not self._is_current(scan_pass):
                logger.debug(f"Discarding batch of stale scan pass #{scan_pass.generation}")
                return

            scan_pass.results = scan_pass.results + analyses
            scan_pass.cursor += batch_size
            self._last_updated = datetime.now().strftime("%H:%M:%S")
            logger.debug(f"Pass #{scan_pass.generation}: {len(analyses)}/{len(batch)} symbols analysed, "
                         f"progress {scan_pass.progress:.0%}")

            if scan_pass.cursor < len(scan_pass.symbols):
                self._schedule(scan_pass, self.config.batch_interval)
            else:
                self._finish(scan_pass)
                logger.info(f"Scan pass #{scan_pass.generation} complete: "
                            f"{len(scan_pass.results)} symbols analysed")
