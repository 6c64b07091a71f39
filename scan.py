# -*- coding: utf-8 -*-
"""
Main entry point for the zone scanner.

Runs one scan pass over all Binance USD-M futures symbols of the configured
quote asset and prints the symbols currently in the requested zone.
"""

import sys
import logging
import argparse
from rich.console import Console

from scanner.config import ScannerConfig, SUPPORTED_TIMEFRAMES
from scanner.market.binance_client import BinanceFuturesClient
from scanner.market.batch_scheduler import BatchScheduler
from scanner.report import build_signals_table
from scanner.signals.zone_signal import SignalLabel


logger = logging.getLogger("scanner")


def setup_logging(config: ScannerConfig):
    """Setup logging configuration."""
    log_level = getattr(logging, config.log_level.upper(), logging.INFO)
    logger.setLevel(log_level)

    # Replace handlers from a previous run in the same process
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.log_file:
        file_handler = logging.FileHandler(config.log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='RSI pump/dump zone scanner for Binance futures')
    parser.add_argument('--timeframe', type=str, choices=SUPPORTED_TIMEFRAMES, default=None,
                        help='Kline timeframe (default: from SCANNER_TIMEFRAME env var or 1d)')
    parser.add_argument('--quote-asset', type=str, default=None,
                        help='Quote asset suffix of scanned symbols (default: USDT)')
    parser.add_argument('--batch-size', type=int, default=None,
                        help='Symbols per batch (default: 10)')
    parser.add_argument('--zone', type=str, default=SignalLabel.MAX_ZONE_PUMP.name,
                        choices=[label.name for label in SignalLabel],
                        help='Zone to list (default: MAX_ZONE_PUMP)')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Logging level (default: INFO)')
    return parser


def main(argv=None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = ScannerConfig()
        # Command line arguments have the highest priority
        if args.timeframe:
            config.timeframe = args.timeframe
        if args.quote_asset:
            config.quote_asset = args.quote_asset
        if args.batch_size:
            config.batch_size = args.batch_size
        if args.log_level:
            config.log_level = args.log_level
        config.validate()
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    setup_logging(config)

    client = BinanceFuturesClient(
        base_url=config.api_endpoint,
        max_retries=config.max_retries,
        base_delay=config.retry_base_delay,
        timeout=config.request_timeout,
        rate_limit_jitter=config.rate_limit_jitter,
        rate_limit_max_backoff=config.rate_limit_max_backoff,
    )
    scheduler = BatchScheduler(client, config)
    label = SignalLabel[args.zone]
    console = Console()

    try:
        scan_pass = scheduler.start(config.timeframe)
        with console.status(f"Loading {config.timeframe} signals... This might take a moment."):
            scheduler.wait()
    except KeyboardInterrupt:
        scheduler.cancel()
        console.print("Scan cancelled by user")
        return 130

    if scan_pass.failed:
        console.print(f"No {label.value} signals: symbol list could not be loaded.")
        return 1

    signals = scheduler.signals(label)
    if not signals:
        console.print(f'No "{label.value}" signals found for the selected timeframe.')
        return 0

    console.print(build_signals_table(signals, label, scheduler.last_updated))
    return 0


if __name__ == "__main__":
    sys.exit(main())
