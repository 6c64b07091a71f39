# -*- coding: utf-8 -*-
"""
Scanner configuration schema.

Defaults can be overridden by environment variables (optionally loaded from a
.env file in the project root).
"""

import os
import logging
from pathlib import Path
from dataclasses import dataclass, asdict
from dotenv import load_dotenv
from binance.client import Client


logger = logging.getLogger(__name__)

# Load .env file from project root if it exists
project_root = Path(__file__).parent.parent
env_file = project_root / ".env"
if env_file.exists():
    load_dotenv(env_file)
    logger.debug(f"Loaded environment variables from {env_file}")

SUPPORTED_TIMEFRAMES = (
    Client.KLINE_INTERVAL_15MINUTE,
    Client.KLINE_INTERVAL_4HOUR,
    Client.KLINE_INTERVAL_1DAY,
)


@dataclass
class ScannerConfig:
    # Binance USD-M futures REST endpoint
    api_endpoint: str = "https://fapi.binance.com"
    quote_asset: str = "USDT"  # Only symbols ending with this suffix are scanned
    timeframe: str = Client.KLINE_INTERVAL_1DAY  # 15m, 4h or 1d
    kline_limit: int = 500

    # Batching
    batch_size: int = 10  # Symbols processed concurrently per batch
    batch_interval: float = 1.0  # Seconds between batches

    # Retry / rate limiting
    max_retries: int = 5
    retry_base_delay: float = 1.0  # Seconds, doubled per attempt
    request_timeout: float = 10.0  # Seconds per HTTP call
    rate_limit_jitter: float = 0.5  # Max random seconds added to rate-limit waits
    rate_limit_max_backoff: float = 60.0  # Cap when no Retry-After header is sent

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = console only

    def __post_init__(self):
        """Override defaults with environment variables if present."""
        self.api_endpoint = os.getenv("SCANNER_API_ENDPOINT", self.api_endpoint)
        self.quote_asset = os.getenv("SCANNER_QUOTE_ASSET", self.quote_asset)
        self.timeframe = os.getenv("SCANNER_TIMEFRAME", self.timeframe)

        if os.getenv("SCANNER_KLINE_LIMIT"):
            self.kline_limit = int(os.getenv("SCANNER_KLINE_LIMIT"))
        if os.getenv("SCANNER_BATCH_SIZE"):
            self.batch_size = int(os.getenv("SCANNER_BATCH_SIZE"))
        if os.getenv("SCANNER_BATCH_INTERVAL"):
            self.batch_interval = float(os.getenv("SCANNER_BATCH_INTERVAL"))
        if os.getenv("SCANNER_MAX_RETRIES"):
            self.max_retries = int(os.getenv("SCANNER_MAX_RETRIES"))
        if os.getenv("SCANNER_RETRY_BASE_DELAY"):
            self.retry_base_delay = float(os.getenv("SCANNER_RETRY_BASE_DELAY"))
        if os.getenv("SCANNER_REQUEST_TIMEOUT"):
            self.request_timeout = float(os.getenv("SCANNER_REQUEST_TIMEOUT"))

        self.log_level = os.getenv("SCANNER_LOG_LEVEL", self.log_level)
        self.log_file = os.getenv("SCANNER_LOG_FILE", self.log_file)

        self.validate()

    def validate(self):
        """Raise ValueError for settings the scanner cannot run with."""
        if self.timeframe not in SUPPORTED_TIMEFRAMES:
            raise ValueError(f"Unsupported timeframe: {self.timeframe}. "
                             f"Must be one of {', '.join(SUPPORTED_TIMEFRAMES)}")
        if self.batch_size <= 0:
            raise ValueError(f"batch_size must be > 0, got {self.batch_size}")
        if self.max_retries <= 0:
            raise ValueError(f"max_retries must be > 0, got {self.max_retries}")

    def to_dict(self) -> dict:
        """Convert config to dictionary."""
        return asdict(self)
